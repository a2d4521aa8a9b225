"""
Bearer-token authentication.

Callers authenticate with a Firebase ID token sent as
``Authorization: Bearer <token>``.  Verification is delegated to an
``IdentityVerifier``; the default ``FirebaseTokenVerifier`` checks the
token signature against Google's published securetoken keys using PyJWT
and maps the claims onto an ``Identity``.  The verifier is a lazily
created process-wide singleton that tests replace via ``init_verifier``.

Three FastAPI dependencies are exposed:

* ``get_optional_identity`` – anonymous callers (or bad tokens) yield ``None``.
* ``get_current_identity`` – raises 401 when no valid token is present.
* ``require_admin`` – additionally raises 403 for non-admin callers.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .errors import Forbidden, Unauthorized
from .permissions import is_admin

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Verified caller identity."""

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    picture: Optional[str] = None


class InvalidToken(Exception):
    """Raised by a verifier when a bearer credential cannot be trusted."""


class IdentityVerifier:
    """Interface for turning a bearer token into an ``Identity``."""

    async def verify(self, token: str) -> Identity:
        raise NotImplementedError


class FirebaseTokenVerifier(IdentityVerifier):
    """Verify Firebase ID tokens (RS256) with PyJWT.

    Signing keys are fetched from ``jwks_url`` and cached by
    ``PyJWKClient``.  The fetch is blocking, so verification runs in the
    thread pool to keep the event loop free.
    """

    def __init__(self, project_id: str, jwks_url: str):
        self.project_id = project_id
        self.issuer = f"https://securetoken.google.com/{project_id}"
        self._jwk_client = jwt.PyJWKClient(jwks_url)

    def _decode(self, token: str) -> Dict[str, Any]:
        signing_key = self._jwk_client.get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=self.project_id,
            issuer=self.issuer,
            options={"require": ["exp", "iat", "sub"]},
        )

    async def verify(self, token: str) -> Identity:
        try:
            claims = await run_in_threadpool(self._decode, token)
        except jwt.PyJWTError as exc:
            raise InvalidToken(str(exc)) from exc
        uid = claims.get("user_id") or claims.get("sub")
        if not uid:
            raise InvalidToken("Token has no subject")
        return identity_from_claims(uid, claims)


def identity_from_claims(uid: str, claims: Dict[str, Any]) -> Identity:
    """Map Firebase token claims onto an ``Identity``."""
    return Identity(
        id=uid,
        email=claims.get("email") or None,
        display_name=claims.get("name") or claims.get("displayName") or None,
        picture=claims.get("picture") or claims.get("photoURL") or None,
    )


_verifier: Optional[IdentityVerifier] = None


def init_verifier(verifier: Optional[IdentityVerifier]) -> None:
    """Inject the verifier used by the auth dependencies (``None`` resets)."""
    global _verifier
    _verifier = verifier


def get_verifier() -> IdentityVerifier:
    global _verifier
    if _verifier is None:
        _verifier = FirebaseTokenVerifier(settings.firebase_project_id, settings.jwks_url)
    return _verifier


security = HTTPBearer(auto_error=False)


async def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Identity]:
    """Return the caller identity if a valid token was sent, else ``None``."""
    if credentials is None:
        return None
    try:
        return await get_verifier().verify(credentials.credentials)
    except InvalidToken as exc:
        logger.debug("Ignoring invalid token on optional-auth route: %s", exc)
        return None


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """Dependency that requires an authenticated caller.

    Raises a 401 when the ``Authorization`` header is missing or the token
    fails verification.
    """
    if credentials is None:
        raise Unauthorized("Missing auth token")
    try:
        return await get_verifier().verify(credentials.credentials)
    except InvalidToken as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise Unauthorized("Invalid auth token") from exc


async def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Dependency that only lets allowlisted admins through."""
    if not is_admin(identity):
        raise Forbidden()
    return identity
