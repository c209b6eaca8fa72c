"""Searchable catalog of the TNTVillage release dump."""

__version__ = "0.1.0"
