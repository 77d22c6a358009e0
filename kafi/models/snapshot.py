"""
Snapshot dataclass for the on-disk image of a store.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from kafi.interfaces.codec import Codec
from kafi.models.exceptions import DecodeError


@dataclass
class Snapshot:
    """
    Complete serialized image of a store's mapping.

    Attributes:
        entries: Encoded (key, value) pairs.
    """

    entries: list[tuple[bytes, bytes]] = field(default_factory=list)

    @classmethod
    def from_mapping(
        cls, data: Mapping[Any, Any], key_codec: Codec, value_codec: Codec
    ) -> "Snapshot":
        """
        Encode every pair of a mapping.

        Raises:
            EncodeError: If a key or value is not supported by its codec.
        """
        entries = [(key_codec.encode(k), value_codec.encode(v)) for k, v in data.items()]
        return cls(entries=entries)

    def to_mapping(self, key_codec: Codec, value_codec: Codec) -> dict[Any, Any]:
        """
        Decode every pair into a dict.

        Raises:
            DecodeError: If a key or value is malformed, or two keys decode equal.
        """
        result: dict[Any, Any] = {}
        for key_bytes, value_bytes in self.entries:
            key = key_codec.decode(key_bytes)
            if key in result:
                raise DecodeError(f"Duplicate key {key!r}")
            result[key] = value_codec.decode(value_bytes)
        return result

    def __bytes__(self) -> bytes:
        """
        Serialize the snapshot.

        Format: [count:4] then per entry [key_len:4][key][value_len:4][value]
        Entries are written in encoded-key order so equal mappings produce equal bytes.
        """
        parts = [len(self.entries).to_bytes(4, "big")]
        for key_bytes, value_bytes in sorted(self.entries):
            parts.append(len(key_bytes).to_bytes(4, "big"))
            parts.append(key_bytes)
            parts.append(len(value_bytes).to_bytes(4, "big"))
            parts.append(value_bytes)
        return b"".join(parts)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Snapshot":
        """Deserialize from bytes, rejecting truncated or trailing data."""
        offset = 0

        def take(length: int, what: str) -> bytes:
            nonlocal offset
            if offset + length > len(data):
                raise DecodeError(
                    f"Truncated {what} at offset {offset}: "
                    f"need {length} bytes, {len(data) - offset} left"
                )
            chunk = data[offset : offset + length]
            offset += length
            return chunk

        count = int.from_bytes(take(4, "entry count"), "big")

        entries = []
        seen: set[bytes] = set()
        for _ in range(count):
            key_len = int.from_bytes(take(4, "key length"), "big")
            key_bytes = take(key_len, "key")
            value_len = int.from_bytes(take(4, "value length"), "big")
            value_bytes = take(value_len, "value")

            if key_bytes in seen:
                raise DecodeError(f"Duplicate key at offset {offset}")
            seen.add(key_bytes)
            entries.append((key_bytes, value_bytes))

        if offset != len(data):
            raise DecodeError(f"{len(data) - offset} trailing bytes after {count} entries")

        return cls(entries=entries)
