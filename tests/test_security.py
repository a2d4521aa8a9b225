import time
from unittest.mock import MagicMock

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from camptogether_api.app.core.security import (
    FirebaseTokenVerifier,
    Identity,
    InvalidToken,
    identity_from_claims,
)

PROJECT_ID = "camp-test"


@pytest.fixture(scope="module")
def private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def token_verifier(private_key):
    firebase_verifier = FirebaseTokenVerifier(PROJECT_ID, "https://keys.invalid/jwks")
    signing_key = MagicMock()
    signing_key.key = private_key.public_key()
    firebase_verifier._jwk_client = MagicMock()
    firebase_verifier._jwk_client.get_signing_key_from_jwt.return_value = signing_key
    return firebase_verifier


def _token(private_key, **overrides):
    now = int(time.time())
    claims = {
        "iss": f"https://securetoken.google.com/{PROJECT_ID}",
        "aud": PROJECT_ID,
        "sub": "uid-123",
        "user_id": "uid-123",
        "email": "camper@example.com",
        "name": "Casey Camper",
        "picture": "https://img.example/c.png",
        "iat": now - 10,
        "exp": now + 3600,
    }
    claims.update(overrides)
    claims = {key: value for key, value in claims.items() if value is not None}
    return jwt.encode(claims, private_key, algorithm="RS256", headers={"kid": "test-key"})


@pytest.mark.asyncio
async def test_valid_token_yields_identity(token_verifier, private_key):
    identity = await token_verifier.verify(_token(private_key))
    assert identity == Identity(
        id="uid-123",
        email="camper@example.com",
        display_name="Casey Camper",
        picture="https://img.example/c.png",
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"aud": "someone-else"},
        {"iss": "https://securetoken.google.com/someone-else"},
        {"exp": int(time.time()) - 60},
        {"sub": None, "user_id": None},
    ],
)
async def test_untrusted_claims_are_rejected(token_verifier, private_key, overrides):
    with pytest.raises(InvalidToken):
        await token_verifier.verify(_token(private_key, **overrides))


@pytest.mark.asyncio
async def test_signature_from_other_key_is_rejected(token_verifier):
    other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    with pytest.raises(InvalidToken):
        await token_verifier.verify(_token(other_key))


@pytest.mark.asyncio
async def test_garbage_token_is_rejected(token_verifier):
    token_verifier._jwk_client.get_signing_key_from_jwt.side_effect = jwt.DecodeError("Not enough segments")
    with pytest.raises(InvalidToken):
        await token_verifier.verify("not-a-jwt")


def test_identity_from_claims_fallbacks():
    identity = identity_from_claims("u1", {"displayName": "Legacy", "photoURL": "p.png", "email": ""})
    assert identity == Identity(id="u1", email=None, display_name="Legacy", picture="p.png")
