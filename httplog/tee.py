"""Bounded capture buffer for mirrored response bytes."""


class LimitBuffer:
    """Byte buffer that keeps the first ``limit`` bytes written to it.

    Writes past the limit are accepted and dropped, so the buffer never
    pushes back on the response it mirrors.
    """

    def __init__(self, limit: int = 512):
        self.limit = limit
        self._buf = bytearray()
        self._closed = False

    def write(self, data: bytes) -> int:
        if self._closed:
            raise ValueError("write to closed buffer")
        remaining = self.limit - len(self._buf)
        if remaining > 0:
            self._buf += data[:remaining]
        return len(data)

    def read(self) -> bytes:
        """Drain and return the captured bytes."""
        if self._closed:
            raise ValueError("read from closed buffer")
        data = bytes(self._buf)
        self._buf.clear()
        return data

    def close(self) -> None:
        self._closed = True
        self._buf.clear()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def full(self) -> bool:
        return len(self._buf) >= self.limit

    def __len__(self) -> int:
        return len(self._buf)
