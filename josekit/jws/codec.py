"""Compact JWS serialization: bearer signing, parsing, and verification."""

from josekit.core.errors import (
    MalformedCompactSerialization,
    MalformedSignature,
    MissingBearerPrefix,
)
from josekit.crypto.binding import KeyBinding
from josekit.jws.claims import Claims
from josekit.jws.encoding import decode_segment, encode_segment
from josekit.jws.header import Header, decode_header
from josekit.jws.token import ClaimsValidator, JwsToken

BEARER_PREFIX = "Bearer "
SEGMENT_COUNT = 3


def sign_claims(claims: Claims, binding: KeyBinding) -> str:
    """Sign claims and return the ``header.claims.signature`` compact form."""
    header = Header(alg=binding.algorithm, kid=binding.kid)
    signing_input = f"{encode_segment(header.to_json())}.{encode_segment(claims.to_json())}"
    signature = binding.sign(signing_input.encode("ascii"))
    return f"{signing_input}.{encode_segment(signature)}"


def sign_bearer(claims: Claims, binding: KeyBinding) -> str:
    """Sign claims and return ``Bearer <compact token>``."""
    return BEARER_PREFIX + sign_claims(claims, binding)


def parse(raw: str) -> JwsToken:
    """Parse a ``Bearer <token>`` string. No signature is checked."""
    if not raw.startswith(BEARER_PREFIX):
        raise MissingBearerPrefix()
    token = raw[len(BEARER_PREFIX) :]
    if not token:
        raise MissingBearerPrefix("Bearer prefix is not followed by a token")
    return parse_compact(token)


def _decode(segment: str, position: str) -> bytes:
    try:
        return decode_segment(segment)
    except ValueError as exc:
        raise MalformedCompactSerialization(
            f"The {position} segment is not valid base64url", segment=position
        ) from exc


def parse_compact(token: str) -> JwsToken:
    """Parse a compact JWS without the bearer prefix."""
    segments = token.split(".")
    if len(segments) != SEGMENT_COUNT or not all(segments):
        raise MalformedCompactSerialization(segments=len(segments))
    header_b64, claims_b64, signature_b64 = segments

    header = decode_header(_decode(header_b64, "header"))
    claims = Claims.from_json(_decode(claims_b64, "claims")).seal()
    try:
        signature = decode_segment(signature_b64)
    except ValueError as exc:
        raise MalformedSignature("The signature segment is not valid base64url") from exc

    return JwsToken(raw=token, header=header, claims=claims, signature=signature)


def verify(
    token: JwsToken,
    binding: KeyBinding,
    claims_validator: ClaimsValidator | None = None,
) -> bool:
    """Verify a parsed token against a binding; see ``JwsToken.verify``."""
    return token.verify(binding, claims_validator)
