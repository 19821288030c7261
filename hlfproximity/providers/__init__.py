"""
Catalog providers
"""

from .scryfall_bulk import ScryfallBulkProvider
