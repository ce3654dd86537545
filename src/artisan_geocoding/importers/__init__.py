"""Importers that load service providers into the portal database."""

from .artisans import ArtisanImporter, ArtisanRow, ImportSummary, find_column

__all__ = ['ArtisanImporter', 'ArtisanRow', 'ImportSummary', 'find_column']
