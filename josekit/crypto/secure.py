"""Scoped storage for passphrases and HMAC secrets."""

import hmac
from types import TracebackType
from typing import Self


class SecretBuffer:
    """Mutable byte buffer that zeroes its contents on release.

    Use it as a context manager so the bytes are wiped on every exit path:

        with SecretBuffer(passphrase) as secret:
            load(secret.value)

    Values passed in as ``str`` or ``bytes`` are copied; the caller's
    immutable original cannot be wiped.
    """

    __slots__ = ("_buf",)

    def __init__(self, value: bytes | bytearray | str = b"") -> None:
        self._buf = bytearray()
        self.assign(value)

    def assign(self, value: bytes | bytearray | str) -> None:
        """Replace the contents, then wipe the previous bytes.

        The new value is copied before the wipe, so assigning the live
        buffer to itself keeps its contents.
        """
        buf = bytearray(value.encode("utf-8") if isinstance(value, str) else value)
        self.wipe()
        self._buf = buf

    @property
    def value(self) -> bytearray:
        """The live buffer. Do not keep references past the owning scope."""
        return self._buf

    def wipe(self) -> None:
        for i in range(len(self._buf)):
            self._buf[i] = 0
        self._buf = bytearray()

    def __len__(self) -> int:
        return len(self._buf)

    def __bool__(self) -> bool:
        return bool(self._buf)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretBuffer):
            return NotImplemented
        return hmac.compare_digest(self._buf, other._buf)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"SecretBuffer(<{len(self._buf)} bytes>)"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.wipe()

    def __del__(self) -> None:
        self.wipe()
