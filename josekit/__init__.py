"""JOSE/JWT engine: compact JWS signing, parsing, and verification."""

from josekit.core.errors import ErrorKind, JoseError
from josekit.crypto.algorithms import Algorithm, KeyFamily, canonical_name, resolve
from josekit.crypto.binding import KeyBinding
from josekit.crypto.keys import (
    generate_ec_key,
    generate_hmac_secret,
    generate_rsa_key,
    load_private_key,
    load_private_key_from_file,
    load_public_key,
    load_public_key_from_file,
)
from josekit.crypto.secure import SecretBuffer
from josekit.jws.claims import Claims, ClaimsChecker
from josekit.jws.codec import parse, parse_compact, sign_bearer, sign_claims, verify
from josekit.jws.header import Header, decode_header
from josekit.jws.token import JwsToken

__version__ = "0.1.0"

__all__ = [
    "Algorithm",
    "Claims",
    "ClaimsChecker",
    "ErrorKind",
    "Header",
    "JoseError",
    "JwsToken",
    "KeyBinding",
    "KeyFamily",
    "SecretBuffer",
    "canonical_name",
    "decode_header",
    "generate_ec_key",
    "generate_hmac_secret",
    "generate_rsa_key",
    "load_private_key",
    "load_private_key_from_file",
    "load_public_key",
    "load_public_key_from_file",
    "parse",
    "parse_compact",
    "resolve",
    "sign_bearer",
    "sign_claims",
    "verify",
]
