"""
Storage engine for the key-value store.
"""

from kafi.engine.store import Store

__all__ = ["Store"]
