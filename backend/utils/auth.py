"""Bearer token authentication: RS-signed JWTs verified against one public key loaded at startup."""
import logging
from pathlib import Path
from urllib.parse import urlparse
from uuid import UUID

from fastapi import Depends, Request
from jose import JWTError, jwk, jwt

from schemas.vehicles import AuthInfo

LOG = logging.getLogger(__name__)

# Only asymmetric RSA signatures are accepted; "none" and HMAC tokens never verify.
ALLOWED_ALGORITHMS = ["RS256", "RS384", "RS512"]
WWW_AUTHENTICATE = 'Bearer, charset="UTF-8"'


class AuthenticationError(Exception):
    """The request did not carry a verifiable bearer token. Never shown to the caller."""


def load_public_key(source: str) -> str:
    """Read a PEM public key from a file path or file:// URL and check it parses as an RSA key."""
    if not source:
        raise ValueError("PUBLIC_KEY_PATH is required")
    parsed = urlparse(source)
    if parsed.scheme == "file":
        path = parsed.path
    elif parsed.scheme == "":
        path = source
    else:
        raise ValueError(f"unsupported public key source: {parsed.scheme}")
    if not path:
        raise ValueError("public key location cannot have an empty path")
    pem = Path(path).read_text()
    if "PUBLIC KEY" not in pem:
        raise ValueError(f"{path} does not contain a PEM public key")
    jwk.construct(pem, ALLOWED_ALGORITHMS[0])
    return pem


def parse_bearer_token(header: str | None) -> str:
    """Extract the token from an `Authorization: Bearer <token>` header value."""
    if not header:
        raise AuthenticationError("missing required Authorization header")
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != "bearer":
        raise AuthenticationError("unsupported or malformed Authorization header (only Bearer scheme is supported)")
    token = token.strip()
    if not token:
        raise AuthenticationError("malformed Authorization header missing bearer token")
    return token


class TokenVerifier:
    """Verifies bearer tokens with a fixed public key and extracts the provider identity."""

    def __init__(self, public_key: str):
        self._public_key = public_key

    def authenticate(self, authorization: str | None) -> AuthInfo:
        token = parse_bearer_token(authorization)
        try:
            claims = jwt.decode(
                token,
                self._public_key,
                algorithms=ALLOWED_ALGORITHMS,
                options={"verify_aud": False},
            )
        except JWTError as exc:
            raise AuthenticationError(f"invalid auth token: {exc}") from exc
        provider_id = claims.get("provider_id")
        if not isinstance(provider_id, str):
            raise AuthenticationError("invalid auth token: missing provider_id claim")
        try:
            return AuthInfo(provider_id=UUID(provider_id))
        except ValueError as exc:
            raise AuthenticationError(f"invalid auth token: malformed provider_id {provider_id!r}") from exc


def get_token_verifier(request: Request) -> TokenVerifier:
    """FastAPI dependency: the verifier built at startup."""
    return request.app.state.token_verifier


def get_auth_info(
    request: Request,
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> AuthInfo:
    """FastAPI dependency: authenticate the request. AuthenticationError is rendered as 401 by the app."""
    try:
        return verifier.authenticate(request.headers.get("Authorization"))
    except AuthenticationError as exc:
        LOG.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        raise
