"""Supported JWS signature algorithms and their key requirements."""

from enum import StrEnum
from typing import Any

from cryptography.hazmat.primitives.asymmetric import ec

from josekit.core.errors import UnknownAlgorithm


class KeyFamily(StrEnum):
    """Key type an algorithm signs with."""

    RSA = "RSA"
    HMAC = "HMAC"
    EC = "EC"


class Algorithm(StrEnum):
    """Closed set of JWS algorithms. The value is the canonical ``alg`` string."""

    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"

    @property
    def family(self) -> KeyFamily:
        return _PROFILES[self][0]

    @property
    def digest_bits(self) -> int:
        return _PROFILES[self][1]

    def ec_curve(self) -> ec.EllipticCurve:
        """Return the curve an ECDSA algorithm requires."""
        if self.family is not KeyFamily.EC:
            raise ValueError(f"{self.value} is not an ECDSA algorithm")
        return _EC_CURVES[self]()


_PROFILES: dict[Algorithm, tuple[KeyFamily, int]] = {
    Algorithm.RS256: (KeyFamily.RSA, 256),
    Algorithm.RS384: (KeyFamily.RSA, 384),
    Algorithm.RS512: (KeyFamily.RSA, 512),
    Algorithm.HS256: (KeyFamily.HMAC, 256),
    Algorithm.HS384: (KeyFamily.HMAC, 384),
    Algorithm.HS512: (KeyFamily.HMAC, 512),
    Algorithm.ES256: (KeyFamily.EC, 256),
    Algorithm.ES384: (KeyFamily.EC, 384),
    Algorithm.ES512: (KeyFamily.EC, 512),
}

_EC_CURVES: dict[Algorithm, type[ec.EllipticCurve]] = {
    Algorithm.ES256: ec.SECP256R1,
    Algorithm.ES384: ec.SECP384R1,
    Algorithm.ES512: ec.SECP521R1,
}


def resolve(name: Any) -> Algorithm:
    """Look up an algorithm by its exact, case-sensitive header string."""
    if not isinstance(name, str):
        raise UnknownAlgorithm(f"Algorithm must be a string, got {type(name).__name__}")
    try:
        return Algorithm(name)
    except ValueError as exc:
        raise UnknownAlgorithm(f"Unsupported algorithm {name!r}", alg=name) from exc


def canonical_name(algorithm: Algorithm) -> str:
    """Return the header string for an algorithm."""
    return algorithm.value


def supported_algorithms(family: KeyFamily | None = None) -> list[Algorithm]:
    """List supported algorithms, optionally restricted to one key family."""
    return [alg for alg in Algorithm if family is None or alg.family is family]
