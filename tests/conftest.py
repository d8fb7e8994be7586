"""Shared test fixtures for josekit."""

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from josekit.crypto.algorithms import Algorithm
from josekit.crypto.keys import generate_ec_key, generate_rsa_key


@pytest.fixture(autouse=True)
def _set_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set environment variables for test settings."""
    monkeypatch.setenv("JOSE_CLOCK_LEEWAY_SECONDS", "0")
    monkeypatch.setenv("JOSE_RSA_KEY_SIZE", "1024")


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    """A 1024-bit RSA key shared across the session."""
    return generate_rsa_key(1024)


@pytest.fixture(scope="session")
def rsa_public_key(rsa_key: rsa.RSAPrivateKey) -> rsa.RSAPublicKey:
    return rsa_key.public_key()


@pytest.fixture(scope="session")
def ec_keys() -> dict[Algorithm, ec.EllipticCurvePrivateKey]:
    """One EC key per ES* algorithm, on the matching curve."""
    return {
        alg: generate_ec_key(alg)
        for alg in (Algorithm.ES256, Algorithm.ES384, Algorithm.ES512)
    }
