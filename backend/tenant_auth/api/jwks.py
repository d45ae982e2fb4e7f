"""Public key distribution for access-token verifiers."""

from __future__ import annotations

from flask import Blueprint, current_app

from tenant_auth.api.deps import json_response
from tenant_auth.infra.jwt.keys import public_jwks

bp = Blueprint("jwks", __name__)


@bp.get("/jwks.json")
def jwks():
    """Serve the RS256 public key as a JSON Web Key Set."""

    response = json_response(public_jwks(current_app.extensions["key_material"]))
    response.headers["Cache-Control"] = "public, max-age=3600"
    return response
