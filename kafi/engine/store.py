"""
Store - Persistent in-memory key-value mapping backed by a single file.
"""

import contextlib
import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path
from typing import Generic, TypeVar

from kafi.interfaces.codec import Codec
from kafi.models.codecs import StrCodec
from kafi.models.exceptions import DecodeError, KafiError, StoreIOError
from kafi.models.snapshot import Snapshot

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class Store(Generic[K, V]):
    """
    Persistent key-value store.

    The whole mapping is loaded into memory on open, mutated in memory,
    and written back as one snapshot on flush.

    Provides:
    - get(key) / exists(key): Lookups, never touch disk
    - insert(key, value) / remove(key) / clear(): Mutations, mark the store dirty
    - flush(): Rewrite the backing file if anything changed
    - close(): Flush and release; also runs on context exit and finalization

    Lifecycle:
    - Open (clean) <-> Open (dirty) -> flush -> Open (clean) -> Closed
    - Closing a dirty store flushes it first. A flush failure during
      teardown is logged at CRITICAL and never silently dropped.
    """

    TEMP_SUFFIX = ".tmp"

    def __init__(
        self,
        file_path: str | os.PathLike,
        key_codec: Codec[K] | None = None,
        value_codec: Codec[V] | None = None,
        fsync: bool = True,
    ) -> None:
        """
        Open a store, loading the backing file if it exists.

        Args:
            file_path: Path to the backing file. Not created until the first flush.
            key_codec: Codec for keys (default: StrCodec).
            value_codec: Codec for values (default: StrCodec).
            fsync: Force each snapshot to stable storage before replacing the file.

        Raises:
            ValueError: If file_path is empty.
            TypeError: If file_path is a bytes path or a codec does not implement Codec.
            StoreIOError: If the existing file cannot be read.
            DecodeError: If the existing file is not a valid snapshot.
        """
        # Stays closed until loading succeeds, so a failed open is never flushed
        self._closed = True

        file_path = os.fspath(file_path)
        if not isinstance(file_path, str):
            raise TypeError(
                f"file_path must be str or os.PathLike[str], got {type(file_path).__name__}"
            )
        if not file_path or not file_path.strip():
            raise ValueError("file_path cannot be empty")

        key_codec = key_codec if key_codec is not None else StrCodec()
        value_codec = value_codec if value_codec is not None else StrCodec()
        for name, codec in (("key_codec", key_codec), ("value_codec", value_codec)):
            if not isinstance(codec, Codec):
                raise TypeError(f"{name} must be a Codec, got {type(codec).__name__}")

        self._file_path = file_path
        self._key_codec = key_codec
        self._value_codec = value_codec
        self._fsync = fsync
        self._data: dict[K, V] = self._load()
        self._modified = False
        # Set once a teardown failure has been logged, so it is not reported twice
        self._loss_reported = False
        self._closed = False

    @classmethod
    def open(
        cls,
        file_path: str | os.PathLike,
        key_codec: Codec[K] | None = None,
        value_codec: Codec[V] | None = None,
        fsync: bool = True,
    ) -> "Store[K, V]":
        """
        Open a store at file_path.

        See Store.__init__ for arguments and errors.
        """
        return cls(file_path, key_codec=key_codec, value_codec=value_codec, fsync=fsync)

    @property
    def file_path(self) -> str:
        return self._file_path

    @property
    def modified(self) -> bool:
        return self._modified

    @property
    def closed(self) -> bool:
        return self._closed

    def get_path(self) -> str:
        """Return the backing file path."""
        return self._file_path

    def _load(self) -> dict[K, V]:
        """Read and decode the backing file, or start empty if it does not exist."""
        self._cleanup_temp_file()

        if not os.path.exists(self._file_path):
            logger.debug(f"No store file at {self._file_path}, starting empty")
            return {}

        try:
            with open(self._file_path, "rb") as f:
                buf = f.read()
        except OSError as e:
            raise StoreIOError(self._file_path, "read", e) from e

        if not buf:
            logger.debug(f"Store file {self._file_path} is empty, starting empty")
            return {}

        try:
            data = Snapshot.from_bytes(buf).to_mapping(self._key_codec, self._value_codec)
        except DecodeError as e:
            raise DecodeError(str(e), path=self._file_path) from e

        logger.debug(f"Loaded {len(data)} entries from {self._file_path}")
        return data

    def _cleanup_temp_file(self) -> None:
        """Remove an orphaned temp file left by an interrupted flush."""
        temp_path = self._target_path() + self.TEMP_SUFFIX
        if os.path.exists(temp_path):
            try:
                os.remove(temp_path)
                logger.warning(f"Removed stale temp file {temp_path}")
            except OSError as e:
                logger.warning(f"Failed to remove stale temp file {temp_path}: {e}")

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Store is closed")

    def get(self, key: K, default: V | None = None) -> V | None:
        """
        Retrieve value by key.

        A value codec that can store None (JsonCodec) makes a stored None
        look like a missing key; pass a sentinel default or use exists().

        Args:
            key: The key to look up. Any object equal to (and hashing like)
                 a stored key finds it.
            default: Returned when the key is absent.

        Returns:
            The value if found, default otherwise.
        """
        self._check_open()
        return self._data.get(key, default)

    def exists(self, key: K) -> bool:
        """Check if key exists."""
        self._check_open()
        return key in self._data

    def insert(self, key: K, value: V) -> None:
        """
        Insert or overwrite a key-value pair.

        Always marks the store dirty, even if the value is unchanged.
        Encoding problems surface on the next flush.
        """
        self._check_open()
        self._data[key] = value
        self._mark_modified()

    def remove(self, key: K) -> V | None:
        """
        Remove a key.

        Always marks the store dirty, even when the key was absent.

        Returns:
            The removed value, or None if the key was absent.
        """
        self._check_open()
        self._mark_modified()
        return self._data.pop(key, None)

    def clear(self) -> None:
        """Remove every key. Marks the store dirty."""
        self._check_open()
        self._data.clear()
        self._mark_modified()

    def _mark_modified(self) -> None:
        self._modified = True
        # New changes have not been reported as lost yet
        self._loss_reported = False

    def keys(self) -> list[K]:
        """Return a list of the current keys."""
        self._check_open()
        return list(self._data)

    def __len__(self) -> int:
        self._check_open()
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return self.exists(key)

    def __iter__(self) -> Iterator[tuple[K, V]]:
        """Iterate over (key, value) pairs of a copy of the current mapping."""
        self._check_open()
        return iter(list(self._data.items()))

    def flush(self) -> bool:
        """
        Write the whole mapping to the backing file if it changed.

        The snapshot goes to a temp file first and then replaces the backing
        file, so the file is always either the old or the new snapshot.

        Returns:
            True if a snapshot was written, False if the store was clean.

        Raises:
            EncodeError: If a key or value cannot be encoded. Store stays dirty.
            StoreIOError: If writing fails. Store stays dirty.
        """
        self._check_open()
        if not self._modified:
            logger.debug(f"Store {self._file_path} is clean, skipping flush")
            return False

        payload = bytes(Snapshot.from_mapping(self._data, self._key_codec, self._value_codec))

        try:
            self._write_snapshot(payload)
        except OSError as e:
            raise StoreIOError(self._file_path, "write", e) from e

        self._modified = False
        logger.debug(f"Flushed {len(self._data)} entries ({len(payload)} bytes) to {self._file_path}")
        return True

    def _target_path(self) -> str:
        """Resolve symlinks so the snapshot replaces the file a link points to, not the link."""
        return os.path.realpath(self._file_path)

    def _write_snapshot(self, payload: bytes) -> None:
        """Write payload to a temp file and atomically move it over the backing file."""
        target_path = self._target_path()
        Path(target_path).parent.mkdir(parents=True, exist_ok=True)
        temp_path = target_path + self.TEMP_SUFFIX

        try:
            with open(temp_path, "wb") as f:
                # Keep the permissions of the snapshot being replaced
                if os.path.exists(target_path):
                    os.chmod(temp_path, stat.S_IMODE(os.stat(target_path).st_mode))
                f.write(payload)
                if self._fsync:
                    f.flush()
                    # Use fdatasync if available (Linux), fallback to fsync (macOS/Windows)
                    _sync_data = getattr(os, "fdatasync", os.fsync)
                    _sync_data(f.fileno())
            os.replace(temp_path, target_path)
        except OSError:
            with contextlib.suppress(OSError):
                os.remove(temp_path)
            raise

    def close(self) -> None:
        """
        Flush and close the store.

        If the flush fails the store stays open so the caller can retry.
        Closing an already closed store does nothing.
        """
        if self._closed:
            return
        self.flush()
        self._closed = True
        logger.debug(f"Closed store {self._file_path}")

    def __enter__(self) -> "Store[K, V]":
        self._check_open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            self.close()
        except KafiError:
            logger.critical(
                f"Failed to flush store {self._file_path} on exit. "
                f"{len(self._data)} entries were not persisted!"
            )
            self._loss_reported = True
            raise

    def __del__(self) -> None:
        if getattr(self, "_closed", True) or self._loss_reported:
            return
        try:
            self.close()
        except KafiError:
            # Nobody is left to receive the error
            logger.critical(
                f"Failed to flush store {self._file_path} during finalization. "
                f"{len(self._data)} entries were not persisted!",
                exc_info=True,
            )

    def __repr__(self) -> str:
        state = "closed" if self._closed else ("dirty" if self._modified else "clean")
        return f"Store({self._file_path!r}, {state})"
