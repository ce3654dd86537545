from __future__ import annotations

import pytest

from artisan_geocoding.geocoding.normalizers import (
    REMOVED_MARK,
    AddressCleaner,
    PostcodeCityExtractor,
    StreetNumberStripper,
    collapse_duplicate_postcode_city,
    fix_leading_street_number,
    fix_number_alpha_typos,
    remove_inline_apartment,
    remove_inline_building,
    remove_parenthesized_postcode,
    strip_apartment_prefix,
    strip_building_prefix,
    strip_orphan_numbers,
    tidy_punctuation,
)

FIXTURES = [
    "BAT E PORTE B9, 12 Rue de la Paix, 31000 Toulouse",
    "2A DU TERLON, 31200 Toulouse, 31200 Toulouse",
    "30is Avenue Foch (31130)",
    "BAT B, 10 Rue des Lilas bât C apt 12, 31130 BALMA (31130)",
    "x654 Chemin de Bordeaux, 31100 Toulouse",
    "96or Route de Narbonne, 31400 Toulouse",
    "12 Rue X appt 120, 31000 Toulouse",
    "BUREAU 3, 5 Allée Jean Jaurès, 31000 Toulouse",
    "Place du 8 Mai 1945, 31000 Toulouse",
    "Route Nationale 20, 31120 Portet-sur-Garonne",
    "5 Rue X, 31130 BALMA (31130), 31130 BALMA",
    "5 Rue X, 31200 Toulouse ,31200 Toulouse",
    "5 Rue X 12b, 31000 Toulouse",
]


@pytest.fixture
def cleaner():
    return AddressCleaner()


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("BAT E PORTE B9, 12 Rue de la Paix, 31000 Toulouse", "12 Rue de la Paix, 31000 Toulouse"),
        ("2A DU TERLON, 31200 Toulouse, 31200 Toulouse", "DU TERLON, 31200 Toulouse"),
        ("30is Avenue Foch (31130)", "30 Avenue Foch"),
        ("BAT B, 10 Rue des Lilas bât C apt 12, 31130 BALMA (31130)", "10 Rue des Lilas, 31130 BALMA"),
        ("x654 Chemin de Bordeaux, 31100 Toulouse", "654 Chemin de Bordeaux, 31100 Toulouse"),
        ("  12 Rue de la Paix, 31000 Toulouse  ", "12 Rue de la Paix, 31000 Toulouse"),
        ("Place du 8 Mai 1945, 31000 Toulouse", "Place du 8 Mai 1945, 31000 Toulouse"),
        ("Route Nationale 20, 31120 Portet-sur-Garonne", "Route Nationale 20, 31120 Portet-sur-Garonne"),
        ("Rue du 11 Novembre 1918, 31200 Toulouse", "Rue du 11 Novembre 1918, 31200 Toulouse"),
        ("12 Rue X bât H 360, 31000 Toulouse", "12 Rue X, 31000 Toulouse"),
        ("5 Rue X, 31130 BALMA (31130), 31130 BALMA", "5 Rue X, 31130 BALMA"),
        ("5 Rue X, 31200 Toulouse ,31200 Toulouse", "5 Rue X, 31200 Toulouse"),
    ],
)
def test_clean_literal_fixtures(cleaner, raw, expected):
    assert cleaner.clean(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "\t\n"])
def test_clean_empty_input_is_absent(cleaner, raw):
    assert cleaner.clean(raw) is None


def test_clean_annotation_only_is_absent(cleaner):
    assert cleaner.clean("BAT A,") is None


@pytest.mark.parametrize("raw", FIXTURES)
def test_clean_is_idempotent(cleaner, raw):
    once = cleaner.clean(raw)
    assert cleaner.clean(once) == once


def test_normalize_returns_empty_string_for_absent(cleaner):
    assert cleaner.normalize("") == ""
    assert cleaner.normalize("30is Avenue Foch") == "30 Avenue Foch"


def test_custom_steps_replace_pipeline():
    cleaner = AddressCleaner(steps=[tidy_punctuation])
    assert cleaner.clean("BAT A, 1 Rue X,,") == "BAT A, 1 Rue X"


class TestSteps:
    def test_building_prefix_variants(self):
        assert strip_building_prefix("BAT E PORTE B9, 12 Rue X") == "12 Rue X"
        assert strip_building_prefix("BATIMENT B APT 101, 7 Rue X") == "7 Rue X"
        assert strip_building_prefix("BUREAU 3, 5 Allée X") == "5 Allée X"
        assert strip_building_prefix("APPT 12, 5 Rue X") == "5 Rue X"
        assert strip_building_prefix("5 Rue X") == "5 Rue X"

    def test_apartment_prefix(self):
        assert strip_apartment_prefix("APT 4, 7 Rue X") == "7 Rue X"

    def test_inline_building(self):
        assert remove_inline_building("12 Rue X, bât H no 360, 31000 Toulouse") == "12 Rue X, 31000 Toulouse"
        assert remove_inline_building("12 Rue X bâtiment B3 apt 159, 31000 Toulouse") == "12 Rue X, 31000 Toulouse"

    def test_inline_building_ignores_words_containing_bat(self):
        assert remove_inline_building("3 Rue Sabatier, 31000 Toulouse") == "3 Rue Sabatier, 31000 Toulouse"

    def test_inline_apartment(self):
        assert remove_inline_apartment("12 Rue X appt 120, 31000 Toulouse") == "12 Rue X, 31000 Toulouse"
        assert remove_inline_apartment("12 Rue X, apt 10, 31000 Toulouse") == "12 Rue X, 31000 Toulouse"

    def test_orphan_numbers_only_next_to_removed_annotation(self):
        marked = remove_inline_building("12 Rue X bât H 360, 31000 Toulouse", mark=REMOVED_MARK)
        assert strip_orphan_numbers(marked) == "12 Rue X, 31000 Toulouse"
        assert strip_orphan_numbers("12 Rue X" + REMOVED_MARK + ", 31000 Toulouse") == "12 Rue X, 31000 Toulouse"

    @pytest.mark.parametrize(
        "address",
        [
            "Place du 8 Mai 1945, 31000 Toulouse",
            "Route Nationale 20, 31120 Portet-sur-Garonne",
            "12 Rue X 360, 31000 Toulouse",
        ],
    )
    def test_numbers_in_street_names_are_kept(self, address):
        assert strip_orphan_numbers(address) == address

    def test_leading_street_number(self):
        assert fix_leading_street_number("x654 Chemin de Bordeaux") == "654 Chemin de Bordeaux"
        assert fix_leading_street_number("2A DU TERLON, 31200 Toulouse") == "DU TERLON, 31200 Toulouse"
        assert fix_leading_street_number("12 Rue X") == "12 Rue X"

    def test_number_alpha_typos(self):
        assert fix_number_alpha_typos("96or Route de Narbonne") == "96 Route de Narbonne"
        assert fix_number_alpha_typos("12h Rue X") == "12 Rue X"
        assert fix_number_alpha_typos("31000 Toulouse") == "31000 Toulouse"

    def test_duplicate_postcode_city(self):
        assert collapse_duplicate_postcode_city("31200 Toulouse, 31200 Toulouse") == "31200 Toulouse"
        assert collapse_duplicate_postcode_city("31200 Toulouse, 31130 Balma") == "31200 Toulouse, 31130 Balma"

    def test_parenthesized_postcode(self):
        assert remove_parenthesized_postcode("5 Rue X, BALMA (31130)") == "5 Rue X, BALMA"

    def test_tidy(self):
        assert tidy_punctuation("12 Rue X, , 31000  Toulouse,") == "12 Rue X, 31000 Toulouse"


class TestStreetNumberStripper:
    @pytest.mark.parametrize(
        "address, expected",
        [
            ("12 bis Rue de la Paix", "Rue de la Paix"),
            ("12 ter Rue de la Paix", "Rue de la Paix"),
            ("12B Rue de la Paix", "Rue de la Paix"),
            ("7, Rue de la Paix", "Rue de la Paix"),
            ("12 Rue de la Paix, 31000 Toulouse", "Rue de la Paix, 31000 Toulouse"),
        ],
    )
    def test_strips_leading_number(self, address, expected):
        assert StreetNumberStripper().strip_number(address) == expected

    def test_no_leading_number_is_unchanged(self):
        assert StreetNumberStripper().strip_number("Rue de la Paix") == "Rue de la Paix"

    def test_bare_number_is_unchanged(self):
        assert StreetNumberStripper().strip_number("12") == "12"


class TestPostcodeCityExtractor:
    def test_extracts_postcode_and_city(self):
        extractor = PostcodeCityExtractor()
        assert extractor.extract("12 Rue de la Paix, 31000 Toulouse, France") == "31000 Toulouse, France"

    def test_short_city_is_rejected(self):
        extractor = PostcodeCityExtractor()
        assert extractor.extract("Zone 31000 Ab") is None
        assert extractor.extract("Zone 31000 ab, somewhere") is None

    def test_first_valid_match_wins(self):
        extractor = PostcodeCityExtractor()
        assert extractor.extract("31000 ab, 5 Rue X, 31200 Toulouse") == "31200 Toulouse, France"
        assert extractor.extract("31200 Toulouse, 31130 Balma") == "31200 Toulouse, France"

    def test_end_of_string_and_accents(self):
        extractor = PostcodeCityExtractor()
        assert extractor.extract("Lieu-dit X 31850 Montrabé") == "31850 Montrabé, France"
        assert extractor.extract("3 Rue Y, 31240 L'Union") == "31240 L'Union, France"

    def test_trailing_country_word_is_dropped(self):
        assert PostcodeCityExtractor().extract("5 Rue X, 31000 Toulouse France") == "31000 Toulouse, France"

    def test_works_on_raw_annotated_address(self):
        raw = "BAT E PORTE B9, 12 Rue de la Paix, 31000 Toulouse"
        assert PostcodeCityExtractor().extract(raw) == "31000 Toulouse, France"

    @pytest.mark.parametrize("raw", [None, "", "12 Rue de la Paix"])
    def test_nothing_to_extract(self, raw):
        assert PostcodeCityExtractor().extract(raw) is None
