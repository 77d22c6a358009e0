"""
Concrete codecs for common key and value types.
"""

import json
from typing import Any

from kafi.interfaces.codec import Codec
from kafi.models.exceptions import DecodeError, EncodeError


class StrCodec(Codec[str]):
    """Text encoded with a fixed character encoding."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def encode(self, value: str) -> bytes:
        if not isinstance(value, str):
            raise EncodeError(f"StrCodec expects str, got {type(value).__name__}")
        try:
            return value.encode(self.encoding)
        except UnicodeEncodeError as e:
            raise EncodeError(f"Cannot encode {value!r} as {self.encoding}: {e}") from e

    def decode(self, data: bytes) -> str:
        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise DecodeError(f"Invalid {self.encoding} text: {e}") from e


class BytesCodec(Codec[bytes]):
    """Raw bytes stored as-is."""

    def encode(self, value: bytes) -> bytes:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise EncodeError(f"BytesCodec expects bytes, got {type(value).__name__}")
        return bytes(value)

    def decode(self, data: bytes) -> bytes:
        return bytes(data)


class IntCodec(Codec[int]):
    """
    Signed integers in big-endian two's complement.

    Uses the minimal number of bytes, so arbitrarily large ints are supported.
    """

    def encode(self, value: int) -> bytes:
        # bool is an int subclass but would not decode back to a bool
        if not isinstance(value, int) or isinstance(value, bool):
            raise EncodeError(f"IntCodec expects int, got {type(value).__name__}")
        length = (value.bit_length() + 8) // 8
        return value.to_bytes(length, "big", signed=True)

    def decode(self, data: bytes) -> int:
        if not data:
            raise DecodeError("Empty integer encoding")
        return int.from_bytes(data, "big", signed=True)


class JsonCodec(Codec[Any]):
    """
    JSON-serializable values (dicts, lists, str, numbers, bool, None).

    Object keys are sorted so equal values always produce equal bytes.
    """

    def encode(self, value: Any) -> bytes:
        try:
            text = json.dumps(value, sort_keys=True, separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError) as e:
            raise EncodeError(f"Value is not JSON serializable: {e}") from e
        return text.encode("utf-8")

    def decode(self, data: bytes) -> Any:
        try:
            return json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(f"Invalid JSON: {e}") from e


class SerializableCodec(Codec[Any]):
    """
    Codec for classes that serialize themselves.

    The class must implement __bytes__ and a from_bytes(data) classmethod.
    """

    def __init__(self, cls: type) -> None:
        """
        Initialize codec.

        Args:
            cls: The class to encode and decode.
        """
        if not callable(getattr(cls, "from_bytes", None)):
            raise TypeError(f"{cls.__name__} must define a from_bytes() classmethod")
        if getattr(cls, "__bytes__", None) is None:
            raise TypeError(f"{cls.__name__} must define __bytes__()")
        self.cls = cls

    def encode(self, value: Any) -> bytes:
        if not isinstance(value, self.cls):
            raise EncodeError(
                f"SerializableCodec expects {self.cls.__name__}, got {type(value).__name__}"
            )
        return bytes(value)

    def decode(self, data: bytes) -> Any:
        try:
            return self.cls.from_bytes(data)
        except DecodeError:
            raise
        except (ValueError, IndexError, UnicodeDecodeError) as e:
            raise DecodeError(f"Cannot decode {self.cls.__name__}: {e}") from e
