"""
Data models for the key-value store.
"""

from kafi.models.codecs import BytesCodec, IntCodec, JsonCodec, SerializableCodec, StrCodec
from kafi.models.exceptions import DecodeError, EncodeError, KafiError, StoreIOError
from kafi.models.snapshot import Snapshot

__all__ = [
    "BytesCodec",
    "IntCodec",
    "JsonCodec",
    "SerializableCodec",
    "StrCodec",
    "DecodeError",
    "EncodeError",
    "KafiError",
    "StoreIOError",
    "Snapshot",
]
