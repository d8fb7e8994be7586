"""JWT claim set with registered-claim accessors and a fluent checker."""

import copy
import json
from collections.abc import Callable, Iterator, Mapping
from datetime import UTC, datetime
from typing import Any, Self

from josekit.core.errors import InvalidClaim, MalformedClaims, MissingClaim, SealedClaims
from josekit.core.settings import JoseSettings
from josekit.jws.encoding import dump_json

REGISTERED_CLAIMS = ("iss", "sub", "aud", "exp", "nbf", "iat", "jti")

NumericDate = int | float


def to_numeric_date(value: NumericDate | datetime) -> NumericDate:
    """Convert a datetime (naive means UTC) to seconds since the epoch."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return int(value.timestamp())
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise InvalidClaim(f"NumericDate must be a number or datetime, got {type(value).__name__}")
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


class Claims:
    """Ordered claim set. Mutable until sealed; parsed tokens hold sealed claims."""

    __slots__ = ("_data", "_sealed")

    def __init__(self, mapping: Mapping[str, Any] | None = None, **claims: Any) -> None:
        self._data: dict[str, Any] = {}
        self._sealed = False
        for name, value in {**(mapping or {}), **claims}.items():
            self.set(name, value)

    @classmethod
    def from_json(cls, json_text: str | bytes) -> Self:
        """Parse a JSON object into claims."""
        try:
            value = json.loads(json_text)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
            raise MalformedClaims(f"Claims are not valid JSON: {exc}") from exc
        if not isinstance(value, dict):
            raise MalformedClaims(f"Claims must be a JSON object, got {type(value).__name__}")
        return cls(value)

    def to_json(self) -> bytes:
        return dump_json(self._data)

    def as_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)

    # -- mutation -----------------------------------------------------------

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> Self:
        """Make the claim set read-only."""
        self._sealed = True
        return self

    def _ensure_mutable(self) -> None:
        if self._sealed:
            raise SealedClaims()

    def set(self, name: str, value: Any) -> Self:
        self._ensure_mutable()
        if not isinstance(name, str):
            raise InvalidClaim(f"Claim names must be strings, got {type(name).__name__}")
        self._data[name] = value
        return self

    def remove(self, name: str) -> Self:
        self._ensure_mutable()
        self._data.pop(name, None)
        return self

    def issuer(self, value: str) -> Self:
        return self.set("iss", value)

    def subject(self, value: str) -> Self:
        return self.set("sub", value)

    def audience(self, value: str | list[str]) -> Self:
        return self.set("aud", list(value) if isinstance(value, tuple | list) else value)

    def expires_at(self, value: NumericDate | datetime) -> Self:
        return self.set("exp", to_numeric_date(value))

    def not_before(self, value: NumericDate | datetime) -> Self:
        return self.set("nbf", to_numeric_date(value))

    def issued_at(self, value: NumericDate | datetime) -> Self:
        return self.set("iat", to_numeric_date(value))

    def token_id(self, value: str) -> Self:
        return self.set("jti", value)

    # -- access -------------------------------------------------------------

    def get(self, name: str, default: Any = None) -> Any:
        return copy.deepcopy(self._data.get(name, default))

    def has(self, name: str) -> bool:
        return name in self._data

    def _typed(self, name: str, check: Callable[[Any], bool], expected: str) -> Any:
        value = self._data.get(name)
        if value is not None and not check(value):
            raise InvalidClaim(f'Claim "{name}" must be {expected}', claim=name)
        return value

    @property
    def iss(self) -> str | None:
        return self._typed("iss", lambda v: isinstance(v, str), "a string")

    @property
    def sub(self) -> str | None:
        return self._typed("sub", lambda v: isinstance(v, str), "a string")

    @property
    def jti(self) -> str | None:
        return self._typed("jti", lambda v: isinstance(v, str), "a string")

    @property
    def aud(self) -> str | list[str] | None:
        value = self._typed(
            "aud",
            lambda v: isinstance(v, str)
            or (isinstance(v, list) and all(isinstance(i, str) for i in v)),
            "a string or list of strings",
        )
        return list(value) if isinstance(value, list) else value

    @property
    def exp(self) -> NumericDate | None:
        return self._typed("exp", _is_number, "a NumericDate")

    @property
    def nbf(self) -> NumericDate | None:
        return self._typed("nbf", _is_number, "a NumericDate")

    @property
    def iat(self) -> NumericDate | None:
        return self._typed("iat", _is_number, "a NumericDate")

    def check(
        self, *, now: NumericDate | datetime | None = None, leeway: int | None = None
    ) -> "ClaimsChecker":
        return ClaimsChecker(self, now=now, leeway=leeway)

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __getitem__(self, name: str) -> Any:
        return copy.deepcopy(self._data[name])

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Claims):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "sealed" if self._sealed else "open"
        return f"Claims({self._data!r}, {state})"


class ClaimsChecker:
    """Lazy predicate chain over one claim set.

    Each method records a check and returns the checker, so checks can be
    chained. Nothing is evaluated until ``passed()``, ``results()`` or
    ``bool()`` is called; the outcome is the AND of every recorded check.

        ok = claims.check().iss("auth.example.com").aud("api").exp()

    String checks fail when the claim is absent. Time checks pass when the
    claim is absent.
    """

    def __init__(
        self,
        claims: Claims,
        *,
        now: NumericDate | datetime | None = None,
        leeway: int | None = None,
    ) -> None:
        self._claims = claims
        self._now = now
        self._leeway = JoseSettings().clock_leeway_seconds if leeway is None else leeway
        self._checks: list[tuple[str, Callable[[], bool]]] = []

    def _current_time(self) -> NumericDate:
        if self._now is None:
            return datetime.now(UTC).timestamp()
        return to_numeric_date(self._now)

    def _add(self, label: str, predicate: Callable[[], bool]) -> Self:
        self._checks.append((label, predicate))
        return self

    def claim(self, name: str, value: Any) -> Self:
        """Claim ``name`` is present and equal to ``value``."""
        return self._add(
            name, lambda: name in self._claims and self._claims[name] == value
        )

    def iss(self, value: str) -> Self:
        return self.claim("iss", value)

    def sub(self, value: str) -> Self:
        return self.claim("sub", value)

    def jti(self, value: str) -> Self:
        return self.claim("jti", value)

    def aud(self, value: str) -> Self:
        """Audience equals ``value`` or, for a list audience, contains it."""

        def predicate() -> bool:
            aud = self._claims.get("aud")
            if isinstance(aud, list):
                return value in aud
            return aud is not None and aud == value

        return self._add("aud", predicate)

    def exp(self) -> Self:
        """Token is not expired, allowing for leeway."""

        def predicate() -> bool:
            exp = self._claims.exp
            return exp is None or self._current_time() < exp + self._leeway

        return self._add("exp", predicate)

    def nbf(self) -> Self:
        """Token is already valid, allowing for leeway."""

        def predicate() -> bool:
            nbf = self._claims.nbf
            return nbf is None or self._current_time() >= nbf - self._leeway

        return self._add("nbf", predicate)

    def iat(self) -> Self:
        """Token was not issued in the future, allowing for leeway."""

        def predicate() -> bool:
            iat = self._claims.iat
            return iat is None or iat <= self._current_time() + self._leeway

        return self._add("iat", predicate)

    def require(self, *names: str) -> Self:
        """Raise ``MissingClaim`` on evaluation if any of ``names`` is absent."""

        def predicate() -> bool:
            missing = [name for name in names if name not in self._claims]
            if missing:
                raise MissingClaim(f"Missing required claims: {', '.join(missing)}", claims=missing)
            return True

        return self._add("require", predicate)

    def results(self) -> list[tuple[str, bool]]:
        """Evaluate every recorded check individually, in call order."""
        return [(label, predicate()) for label, predicate in self._checks]

    def passed(self) -> bool:
        return all(predicate() for _, predicate in self._checks)

    def __bool__(self) -> bool:
        return self.passed()
