"""Tests for the PyJWT token codec."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest
from tenant_auth.infra.jwt.keys import KeyMaterial, generate_key_pair, public_jwks
from tenant_auth.infra.jwt.token_codec import JWTTokenCodec
from tenant_auth.models.role import Role
from tenant_auth.services._shared.errors import InvalidTokenError
from tenant_auth.services.sessions.dto import TokenClaims

REFRESH_SECRET = "unit-test-refresh-secret-0123456789abcdef"


@pytest.fixture(scope="module")
def pem_pair() -> tuple[str, str]:
    return generate_key_pair()


@pytest.fixture()
def keys(pem_pair) -> KeyMaterial:
    private_pem, public_pem = pem_pair
    return KeyMaterial(
        private_key=private_pem,
        public_key=public_pem,
        refresh_secret=REFRESH_SECRET,
        key_id="kid-1",
    )


@pytest.fixture()
def codec(keys) -> JWTTokenCodec:
    return JWTTokenCodec(keys)


def _encode_access(keys: KeyMaterial, **payload) -> str:
    now = datetime.now(UTC)
    body = {
        "sub": "1",
        "role": "admin",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=5)).timestamp()),
        "iss": keys.issuer,
    }
    body.update(payload)
    return jwt.encode(body, keys.private_key, algorithm="RS256", headers={"kid": keys.key_id})


class TestAccessTokens:
    def test_round_trip_claims(self, codec):
        token = codec.issue_access_token(TokenClaims(sub="42", role=Role.MANAGER))

        claims = codec.verify_access_token(token)

        assert claims.sub == "42"
        assert claims.user_id == 42
        assert claims.role is Role.MANAGER
        assert claims.session_id is None

    def test_header_and_payload_shape(self, codec, keys):
        token = codec.issue_access_token(TokenClaims(sub="7", role=Role.CUSTOMER))

        header = jwt.get_unverified_header(token)
        payload = jwt.decode(token, options={"verify_signature": False})

        assert header["alg"] == "RS256"
        assert header["kid"] == "kid-1"
        assert payload["role"] == "customer"
        assert payload["iss"] == keys.issuer
        assert payload["exp"] - payload["iat"] == 3600

    def test_expired_token_rejected(self, keys):
        codec = JWTTokenCodec(keys, access_ttl=timedelta(seconds=-1))
        token = codec.issue_access_token(TokenClaims(sub="1", role=Role.ADMIN))
        with pytest.raises(InvalidTokenError, match="expired"):
            codec.verify_access_token(token)

    def test_tampered_payload_rejected(self, codec):
        token = codec.issue_access_token(TokenClaims(sub="1", role=Role.CUSTOMER))
        header, payload, signature = token.split(".")
        forged = jwt.utils.base64url_encode(
            b'{"sub":"1","role":"admin","iat":1,"exp":9999999999,"iss":"auth-service"}'
        ).decode()
        with pytest.raises(InvalidTokenError):
            codec.verify_access_token(".".join([header, forged, signature]))

    def test_other_key_pair_rejected(self, codec, keys):
        other_private, _ = generate_key_pair()
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": "1",
                "role": "admin",
                "iat": int(now.timestamp()),
                "exp": int((now + timedelta(minutes=5)).timestamp()),
                "iss": keys.issuer,
            },
            other_private,
            algorithm="RS256",
        )
        with pytest.raises(InvalidTokenError):
            codec.verify_access_token(token)

    def test_refresh_token_not_accepted_as_access(self, codec):
        refresh = codec.issue_refresh_token(
            TokenClaims(sub="1", role=Role.ADMIN, session_id="3")
        )
        with pytest.raises(InvalidTokenError):
            codec.verify_access_token(refresh)

    def test_unknown_role_rejected(self, codec, keys):
        with pytest.raises(InvalidTokenError, match="Unknown role"):
            codec.verify_access_token(_encode_access(keys, role="root"))

    def test_wrong_issuer_rejected(self, codec, keys):
        with pytest.raises(InvalidTokenError):
            codec.verify_access_token(_encode_access(keys, iss="someone-else"))

    @pytest.mark.parametrize("sub", ["abc", "²", "١٢", "-1"])
    def test_non_numeric_subject_rejected(self, codec, keys, sub):
        with pytest.raises(InvalidTokenError, match="subject"):
            codec.verify_access_token(_encode_access(keys, sub=sub))

    @pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c"])
    def test_garbage_rejected(self, codec, garbage):
        with pytest.raises(InvalidTokenError):
            codec.verify_access_token(garbage)


class TestRefreshTokens:
    def test_round_trip_with_session_id(self, codec):
        token = codec.issue_refresh_token(
            TokenClaims(sub="5", role=Role.CUSTOMER, session_id="11")
        )

        claims = codec.verify_refresh_token(token)

        assert jwt.get_unverified_header(token)["alg"] == "HS256"
        assert claims.sub == "5"
        assert claims.session_id == "11"

    def test_issue_requires_session_id(self, codec):
        with pytest.raises(ValueError):
            codec.issue_refresh_token(TokenClaims(sub="5", role=Role.CUSTOMER))

    def test_access_token_not_accepted_as_refresh(self, codec):
        access = codec.issue_access_token(TokenClaims(sub="5", role=Role.CUSTOMER))
        with pytest.raises(InvalidTokenError):
            codec.verify_refresh_token(access)

    def test_wrong_secret_rejected(self, codec, keys):
        other = JWTTokenCodec(
            KeyMaterial(
                private_key=keys.private_key,
                public_key=keys.public_key,
                refresh_secret="a-completely-different-secret-value-here",
            )
        )
        token = other.issue_refresh_token(TokenClaims(sub="5", role=Role.ADMIN, session_id="1"))
        with pytest.raises(InvalidTokenError):
            codec.verify_refresh_token(token)

    @pytest.mark.parametrize("session_id", ["²", "١٢", "x1"])
    def test_non_ascii_digit_session_id_rejected(self, codec, session_id):
        token = codec.issue_refresh_token(
            TokenClaims(sub="5", role=Role.CUSTOMER, session_id=session_id)
        )
        with pytest.raises(InvalidTokenError, match="session id"):
            codec.verify_refresh_token(token)

    def test_missing_id_claim_rejected(self, codec, keys):
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": "5",
                "role": "customer",
                "iat": int(now.timestamp()),
                "exp": int((now + timedelta(minutes=5)).timestamp()),
                "iss": keys.issuer,
            },
            REFRESH_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            codec.verify_refresh_token(token)


class _StaticJWKClient:
    """Stand-in for :class:`jwt.PyJWKClient` serving a fixed key set."""

    def __init__(self, jwks: dict) -> None:
        self.jwk_set = jwt.PyJWKSet.from_dict(jwks)
        self.calls = 0

    def get_signing_key_from_jwt(self, token: str) -> jwt.PyJWK:
        self.calls += 1
        kid = jwt.get_unverified_header(token).get("kid")
        for key in self.jwk_set.keys:
            if key.key_id == kid:
                return key
        raise jwt.PyJWKClientError(f"Unable to find a signing key that matches: {kid!r}")


class TestJWKSResolution:
    def test_verifies_through_key_set(self, keys):
        client = _StaticJWKClient(public_jwks(keys))
        codec = JWTTokenCodec(keys, jwks_client=client)
        token = codec.issue_access_token(TokenClaims(sub="9", role=Role.ADMIN))

        assert codec.verify_access_token(token).user_id == 9
        assert client.calls == 1

    def test_unknown_kid_rejected(self, keys):
        client = _StaticJWKClient(public_jwks(keys))
        codec = JWTTokenCodec(keys, jwks_client=client)
        token = _encode_access(keys)
        token_other_kid = jwt.encode(
            jwt.decode(token, options={"verify_signature": False}),
            keys.private_key,
            algorithm="RS256",
            headers={"kid": "rotated-away"},
        )
        with pytest.raises(InvalidTokenError):
            codec.verify_access_token(token_other_kid)
