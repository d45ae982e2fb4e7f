"""Health and JWKS endpoints plus request correlation."""

from __future__ import annotations

import fakeredis
import jwt

from tenant_auth.models.role import Role
from tenant_auth.services.sessions.dto import TokenClaims


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["db"] == "ok"
    assert "redis" not in body


def test_health_reports_redis(app, client, monkeypatch):
    monkeypatch.setitem(app.extensions, "redis_client", fakeredis.FakeRedis())
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json()["redis"] == "ok"


def test_health_degraded_when_redis_is_down(app, client, monkeypatch):
    server = fakeredis.FakeServer()
    server.connected = False
    monkeypatch.setitem(app.extensions, "redis_client", fakeredis.FakeRedis(server=server))
    resp = client.get("/health")
    assert resp.status_code == 503
    body = resp.get_json()
    assert body["status"] == "degraded"
    assert body["redis"] == "fail"


def test_jwks_verifies_issued_tokens(client, codec):
    resp = client.get("/.well-known/jwks.json")

    assert resp.status_code == 200
    (jwk,) = resp.get_json()["keys"]
    assert jwk["kid"] == "test-key"
    assert jwk["alg"] == "RS256"

    token = codec.issue_access_token(TokenClaims(sub="1", role=Role.ADMIN))
    key = jwt.PyJWK.from_dict(jwk).key
    payload = jwt.decode(token, key, algorithms=["RS256"], issuer="auth-service")
    assert payload["role"] == "admin"


def test_request_id_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert resp.headers["X-Request-ID"] == "req-123"


def test_unknown_route_is_problem_json(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.mimetype == "application/problem+json"
