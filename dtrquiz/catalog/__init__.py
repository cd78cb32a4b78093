"""
Catalog - Quiz cases and the tool alphabet they are answered in.

This module contains:
- Case / HarmfulEntry / CaseCatalog data model and validation
- JSON catalog loading
- The built-in DTR pathology catalog
"""

from .cases import Case, HarmfulEntry, CaseCatalog, validate_catalog, load_catalog
from .dtr import TOOLS, PATHOLOGY_CASES, create_dtr_catalog

__all__ = [
    "Case",
    "HarmfulEntry",
    "CaseCatalog",
    "validate_catalog",
    "load_catalog",
    "TOOLS",
    "PATHOLOGY_CASES",
    "create_dtr_catalog",
]
