"""
Abstract base classes for the key-value store.
"""

from kafi.interfaces.codec import Codec

__all__ = ["Codec"]
