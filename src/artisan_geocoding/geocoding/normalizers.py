"""
Address normalizers for French postal addresses.

Provides implementations for cleaning free-text addresses before they are
sent to the geocoding service, deriving a street-only variant, and
extracting a bare "postcode city" fragment.
"""

import re
from functools import partial
from typing import Callable, Optional, Sequence

from .base import Normalizer

# Letters allowed in a French commune name
_CITY_LETTERS = "A-Za-zÀ-ÖØ-öø-ÿŒœ"

# Left by steps 3-4 where an annotation was cut out; consumed by step 5
REMOVED_MARK = "\x00"

# 1. "BAT E PORTE B9,", "BATIMENT B APT 101,", "BUREAU 3,", "APPT 12,"
_RE_BUILDING_PREFIX = re.compile(
    r"^(?:BAT(?:IMENT)?\s+[A-Z0-9]+(?:\s*(?:PORTE|APT?)\s*[A-Z0-9]+)?\s*,?\s*"
    r"|BUREAU\s+\d+\s*,?\s*"
    r"|APPT\s*[A-Z0-9]+\s*,\s*)",
    re.I,
)
# 2. "APT 4," left at the front once the building prefix is gone
_RE_APARTMENT_PREFIX = re.compile(r"^APP?T\s*\d+\s*,?\s*", re.I)
# 3. "bât H no 360", "bâtiment B3 apt 159", "bat B"
_RE_INLINE_BUILDING = re.compile(
    r",?\s*\bb[âa]t(?:iment)?\.?\s+[A-Z0-9]+\b(?:\s*(?:no|n°|apt?|porte)\s*[A-Z0-9]+\b)*",
    re.I,
)
# 4. "appt 120", "apt 10"
_RE_INLINE_APARTMENT = re.compile(r",?\s*\bap{1,2}t\.?\s*\d+\b", re.I)
# 5. "12 Rue X bât H 360, 31000 ..." -> "12 Rue X, 31000 ..."; only right after a removal
_RE_ORPHAN_NUMBER = re.compile(
    re.escape(REMOVED_MARK) + r"\s*(?:n[o°]\s*)?\d{1,4}\b\s*(?=,|$)", re.I
)
# 6. "x654 Chemin ..." and "2A DU TERLON ..."
_RE_STRAY_LETTER = re.compile(r"^[A-Za-z](?=\d)")
_RE_LETTER_SUFFIXED_NUMBER = re.compile(r"^\d+[A-Za-z]\s+(?=[^\d\s])")
# 7. "30is" -> "30", "96or" -> "96", "12h" -> "12"
_RE_NUMBER_ALPHA_TYPO = re.compile(r"\b(\d+)[a-z]{1,2}\b", re.I)
# 8. "31200 Toulouse, 31200 Toulouse" -> "31200 Toulouse"
_RE_DUPLICATE_POSTCODE_CITY = re.compile(r"(\b\d{5}\s+[^,]+),\s*\1(?=\s*(?:,|$))", re.I)
# 9. "BALMA (31130)" -> "BALMA"
_RE_PARENTHESIZED_POSTCODE = re.compile(r"\s*\(\s*\d{5}\s*\)")

_RE_STREET_NUMBER = re.compile(r"^\d+[A-Za-z]?(?:\s+(?:bis|ter|quater)\b)?[\s,]+", re.I)
_RE_POSTCODE_CITY = re.compile(
    rf"(?<!\d)(\d{{5}})\s+([{_CITY_LETTERS}][{_CITY_LETTERS}\s\-'’]*)(?=\s*(?:,|$))"
)
_RE_TRAILING_COUNTRY = re.compile(r"\s+france$", re.I)

MIN_CITY_LENGTH = 3


def strip_building_prefix(text: str) -> str:
    """Drop a leading building/office/apartment annotation."""
    return _RE_BUILDING_PREFIX.sub("", text)


def strip_apartment_prefix(text: str) -> str:
    return _RE_APARTMENT_PREFIX.sub("", text)


def remove_inline_building(text: str, mark: str = "") -> str:
    return _RE_INLINE_BUILDING.sub(mark, text)


def remove_inline_apartment(text: str, mark: str = "") -> str:
    return _RE_INLINE_APARTMENT.sub(mark, text)


def strip_orphan_numbers(text: str) -> str:
    """
    Remove a short number stranded by an annotation removal, then the marks.

    Numbers that were not next to a removed annotation ("Place du 8 Mai 1945",
    "Route Nationale 20") are part of the street name and stay.
    """
    return _RE_ORPHAN_NUMBER.sub("", text).replace(REMOVED_MARK, "")


def fix_leading_street_number(text: str) -> str:
    """Drop a stray letter glued before the house number, or a letter-suffixed number."""
    text = _RE_STRAY_LETTER.sub("", text)
    return _RE_LETTER_SUFFIXED_NUMBER.sub("", text)


def fix_number_alpha_typos(text: str) -> str:
    # Also swallows genuine unit letters such as "12b"
    return _RE_NUMBER_ALPHA_TYPO.sub(r"\1", text)


def collapse_duplicate_postcode_city(text: str) -> str:
    return _RE_DUPLICATE_POSTCODE_CITY.sub(r"\1", text)


def remove_parenthesized_postcode(text: str) -> str:
    return _RE_PARENTHESIZED_POSTCODE.sub("", text)


def tidy_punctuation(text: str) -> str:
    """Collapse repeated commas and whitespace, trim a trailing comma."""
    t = re.sub(r"\s*,(?:\s*,)+", ",", text)
    t = re.sub(r"\s+,", ",", t)
    t = re.sub(r"\s{2,}", " ", t)
    return t.strip().strip(",").strip()


class AddressCleaner(Normalizer):
    """
    Produces a best-effort single-line address for a geocoding text query.

    Handles:
    - Building, office and apartment annotations (leading and inline)
    - Numbers left stranded by those removals
    - Stray letters around the house number and number+letter typos
    - Duplicated "postcode city" clauses and parenthesized postcodes
    - Punctuation and whitespace tidying

    Steps run in a fixed order; later steps assume the earlier ones ran.
    The whole sequence is repeated until the text stops changing, so a later
    step exposing work for an earlier one (a duplicate revealed by removing
    "(31130)") still ends in a stable result.
    """

    STEPS: Sequence[Callable[[str], str]] = (
        strip_building_prefix,
        strip_apartment_prefix,
        partial(remove_inline_building, mark=REMOVED_MARK),
        partial(remove_inline_apartment, mark=REMOVED_MARK),
        strip_orphan_numbers,
        fix_leading_street_number,
        fix_number_alpha_typos,
        collapse_duplicate_postcode_city,
        remove_parenthesized_postcode,
        tidy_punctuation,
    )

    def __init__(self, steps: Optional[Sequence[Callable[[str], str]]] = None):
        """
        Initialize address cleaner.

        Args:
            steps: Optional replacement pipeline (defaults to STEPS)
        """
        self.steps = tuple(steps) if steps is not None else tuple(self.STEPS)

    def clean(self, raw: Optional[str]) -> Optional[str]:
        """
        Clean a raw address.

        Args:
            raw: Free-text address, possibly None

        Returns:
            Cleaned address, or None if nothing usable remains
        """
        if not raw:
            return None

        t = str(raw).replace(REMOVED_MARK, "").strip()
        if not t:
            return None

        # Every default step only deletes text, so this terminates
        while True:
            previous = t
            for step in self.steps:
                t = step(t)
            if t == previous:
                break

        return t or None

    def normalize(self, value: str, context: Optional[str] = None) -> str:
        return self.clean(value) or ""


class StreetNumberStripper(Normalizer):
    """Removes the leading house number ("12", "12B", "12 bis") from an address."""

    def strip_number(self, cleaned_address: str) -> str:
        """
        Derive the street-only variant of a cleaned address.

        Returns the input unchanged when it does not start with a number,
        so callers can compare before/after to decide whether to use it.
        """
        if not cleaned_address:
            return cleaned_address
        stripped = _RE_STREET_NUMBER.sub("", cleaned_address, count=1)
        return stripped or cleaned_address

    def normalize(self, value: str, context: Optional[str] = None) -> str:
        return self.strip_number(value or "")


class PostcodeCityExtractor(Normalizer):
    """
    Extracts a minimal "<postcode> <city>, France" query from a raw address.

    Works on the raw address: cleaning can remove the very postcode or
    city needed here. A city shorter than MIN_CITY_LENGTH characters is
    treated as noise and the match is rejected.
    """

    def __init__(self, country: str = "France", min_city_length: int = MIN_CITY_LENGTH):
        self.country = country
        self.min_city_length = min_city_length

    def extract(self, raw_address: Optional[str]) -> Optional[str]:
        """
        Extract the first valid postcode + city fragment.

        Args:
            raw_address: Original, uncleaned address

        Returns:
            "<postcode> <city>, France", or None if no valid fragment exists
        """
        if not raw_address:
            return None

        for match in _RE_POSTCODE_CITY.finditer(str(raw_address)):
            postcode = match.group(1)
            city = re.sub(r"\s+", " ", match.group(2)).strip(" -'’")
            city = _RE_TRAILING_COUNTRY.sub("", city).strip()
            if len(city) < self.min_city_length:
                continue
            return f"{postcode} {city}, {self.country}"

        return None

    def normalize(self, value: str, context: Optional[str] = None) -> str:
        return self.extract(value) or ""
