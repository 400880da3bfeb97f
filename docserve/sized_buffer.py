"""An in-memory byte sink that refuses to grow past a size limit."""

from __future__ import annotations

import io


class SizeLimitReached(OSError):
    """Raised when a write would take a buffer past its limit."""

    def __init__(self, message: str = "the size limit for the buffer was reached") -> None:
        super().__init__(message)


class SizedBuffer(io.RawIOBase):
    """Writable byte buffer holding at most ``limit`` bytes."""

    def __init__(self, limit: int) -> None:
        super().__init__()
        self.limit = limit
        self._inner = bytearray()

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        """Append all of ``data`` or nothing; return the number of bytes written."""
        if self.closed:
            raise ValueError("I/O operation on closed buffer")
        chunk = bytes(data)
        if len(self._inner) + len(chunk) > self.limit:
            raise SizeLimitReached()
        self._inner.extend(chunk)
        return len(chunk)

    def reserve(self, amount: int) -> int:
        """Return how many of ``amount`` bytes can still be written before the limit."""
        return min(amount, self.limit - len(self._inner))

    def flush(self) -> None:
        """Flush the buffer; fails once the buffer is closed."""
        super().flush()

    def getvalue(self) -> bytes:
        """Return the bytes written so far."""
        return bytes(self._inner)

    def __len__(self) -> int:
        return len(self._inner)