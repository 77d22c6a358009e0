"""
Minimal persistent key-value store.

The whole mapping lives in memory and is written back to a single file:
- open(path) - Load the file (or start empty if it does not exist)
- get(key) / exists(key) - In-memory lookups
- insert(key, value) / remove(key) / clear() - In-memory mutations
- flush() - Rewrite the file as one atomic snapshot, only if something changed
- close() / with-block exit / garbage collection - Flush before release
"""

from kafi.engine.store import Store
from kafi.interfaces.codec import Codec
from kafi.models.codecs import BytesCodec, IntCodec, JsonCodec, SerializableCodec, StrCodec
from kafi.models.exceptions import DecodeError, EncodeError, KafiError, StoreIOError

open = Store.open

__all__ = [
    "Store",
    "open",
    "Codec",
    "BytesCodec",
    "IntCodec",
    "JsonCodec",
    "SerializableCodec",
    "StrCodec",
    "DecodeError",
    "EncodeError",
    "KafiError",
    "StoreIOError",
]
