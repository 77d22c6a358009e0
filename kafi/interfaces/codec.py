"""
Codec abstract base class for turning keys and values into bytes.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")


class Codec(ABC, Generic[T]):
    """
    Abstract base class for deterministic byte encodings.

    A store is generic over any key/value types that have a codec.
    Keys additionally have to be hashable since they live in a dict.

    Implementations:
    - StrCodec: text
    - BytesCodec: raw bytes
    - IntCodec: signed integers
    - JsonCodec: JSON-serializable values
    - SerializableCodec: classes implementing __bytes__ / from_bytes
    """

    @abstractmethod
    def encode(self, value: T) -> bytes:
        """
        Serialize a value.

        Args:
            value: The value to encode.

        Returns:
            The encoded bytes. Equal values must encode to equal bytes.

        Raises:
            EncodeError: If the value is not supported by this codec.
        """
        pass

    @abstractmethod
    def decode(self, data: bytes) -> T:
        """
        Deserialize a value produced by encode().

        Args:
            data: The encoded bytes.

        Returns:
            The decoded value.

        Raises:
            DecodeError: If the bytes are malformed.
        """
        pass
