"""
Folio: a polymorphic content store for small publishing sites.
"""
__version__ = "0.1.0"
