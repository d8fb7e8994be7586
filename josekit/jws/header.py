"""JOSE header model and decoder."""

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from josekit.core.errors import InvalidOrMissingTyp, MalformedJson, MissingAlg
from josekit.crypto.algorithms import Algorithm, resolve
from josekit.jws.encoding import dump_json

JWT_TYP = "JWT"


class Header(BaseModel):
    """Decoded JOSE header of a compact JWS."""

    model_config = ConfigDict(frozen=True)

    typ: Literal["JWT"] = JWT_TYP
    alg: Algorithm
    kid: str | None = None

    def to_json(self) -> bytes:
        """Serialize with sorted keys; ``kid`` only when set."""
        return dump_json(self.model_dump(mode="json", exclude_none=True), sort_keys=True)


def _load_object(json_text: str | bytes) -> dict[str, Any]:
    try:
        value = json.loads(json_text)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        raise MalformedJson(f"Header is not valid JSON: {exc}") from exc
    if not isinstance(value, dict):
        raise MalformedJson(f"Header must be a JSON object, got {type(value).__name__}")
    return value


def decode_header(json_text: str | bytes) -> Header:
    """Parse and validate a JOSE header. Any violation is a hard failure."""
    raw = _load_object(json_text)

    typ = raw.get("typ")
    if typ != JWT_TYP:
        raise InvalidOrMissingTyp(typ=typ)

    if "alg" not in raw:
        raise MissingAlg()
    alg = resolve(raw["alg"])

    kid = raw.get("kid")
    if kid is not None and not isinstance(kid, str):
        raise MalformedJson('Header "kid" must be a string')

    return Header(alg=alg, kid=kid)
