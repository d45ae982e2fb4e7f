"""Key material for signing tokens: PEM loading, generation and JWKS export."""

from __future__ import annotations

import base64
import hashlib
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm

log = logging.getLogger(__name__)

ACCESS_TOKEN_ALGORITHM = "RS256"
REFRESH_TOKEN_ALGORITHM = "HS256"
DEFAULT_ISSUER = "auth-service"


class KeyMaterialError(RuntimeError):
    """Raised at startup when signing keys are missing or unreadable."""


@dataclass(frozen=True, slots=True)
class KeyMaterial:
    """
    Everything the token codec needs to sign and verify.

    :param private_key: PEM-encoded RSA private key (access tokens).
    :param public_key: PEM-encoded RSA public key (access tokens).
    :param refresh_secret: Shared secret for HS256 refresh tokens.
    :param issuer: ``iss`` claim stamped on and required from every token.
    :param key_id: ``kid`` header of access tokens.
    :param jwks_uri: Optional JWKS endpoint used to resolve verification keys.
    """

    private_key: str
    public_key: str
    refresh_secret: str
    issuer: str = DEFAULT_ISSUER
    key_id: str = ""
    jwks_uri: str | None = None

    def __repr__(self) -> str:
        return f"KeyMaterial(issuer={self.issuer!r}, key_id={self.key_id!r}, jwks_uri={self.jwks_uri!r})"


def generate_key_pair(bits: int = 2048) -> tuple[str, str]:
    """
    Generate a fresh RSA key pair.

    :param bits: Modulus size; 2048 or more.
    :returns: ``(private_pem, public_pem)`` as text.
    """
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=bits)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return private_pem.decode("ascii"), public_pem.decode("ascii")


def derive_key_id(public_pem: str) -> str:
    """Return a stable key id: SHA-256 of the DER public key, base64url, 16 chars."""
    public_key = serialization.load_pem_public_key(public_pem.encode("ascii"))
    der = public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    digest = hashlib.sha256(der).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")[:16]


def _read_pem(config: Mapping[str, Any], inline_key: str, path_key: str) -> str:
    inline = config.get(inline_key)
    if inline:
        # Env vars commonly carry escaped newlines
        return str(inline).replace("\\n", "\n")
    path = config.get(path_key)
    if not path:
        raise KeyMaterialError(f"Neither {inline_key} nor {path_key} is configured.")
    try:
        return Path(path).read_text(encoding="ascii")
    except OSError as exc:
        raise KeyMaterialError(f"Cannot read {path_key}={path!r}: {exc.strerror}") from exc


def load_key_material(config: Mapping[str, Any]) -> KeyMaterial:
    """
    Build :class:`KeyMaterial` from application settings.

    Reads ``JWT_PRIVATE_KEY`` / ``JWT_PUBLIC_KEY`` (inline PEM) or the
    ``*_PATH`` files, plus ``REFRESH_TOKEN_SECRET``, ``JWT_ISSUER``,
    ``JWT_KEY_ID`` and ``JWKS_URI``.

    :param config: Mapping such as ``app.config``.
    :returns: Validated key material.
    :raises KeyMaterialError: If any key is missing, unreadable or malformed.
    """
    private_pem = _read_pem(config, "JWT_PRIVATE_KEY", "JWT_PRIVATE_KEY_PATH")
    public_pem = _read_pem(config, "JWT_PUBLIC_KEY", "JWT_PUBLIC_KEY_PATH")

    try:
        private_key = serialization.load_pem_private_key(private_pem.encode("ascii"), password=None)
        public_key = serialization.load_pem_public_key(public_pem.encode("ascii"))
    except (ValueError, TypeError) as exc:
        raise KeyMaterialError(f"Malformed PEM key material: {exc}") from exc
    if not isinstance(private_key, rsa.RSAPrivateKey) or not isinstance(
        public_key, rsa.RSAPublicKey
    ):
        raise KeyMaterialError("Access token keys must be RSA keys.")

    refresh_secret = config.get("REFRESH_TOKEN_SECRET")
    if not refresh_secret:
        raise KeyMaterialError("REFRESH_TOKEN_SECRET is not configured.")

    key_id = config.get("JWT_KEY_ID") or derive_key_id(public_pem)
    material = KeyMaterial(
        private_key=private_pem,
        public_key=public_pem,
        refresh_secret=str(refresh_secret),
        issuer=config.get("JWT_ISSUER") or DEFAULT_ISSUER,
        key_id=key_id,
        jwks_uri=config.get("JWKS_URI") or None,
    )
    log.info("keys.loaded", extra={"key_id": material.key_id, "jwks_uri": material.jwks_uri})
    return material


def public_jwks(keys: KeyMaterial) -> dict[str, list[dict[str, Any]]]:
    """
    Export the public key as a JSON Web Key Set.

    :param keys: Loaded key material.
    :returns: ``{"keys": [jwk]}`` with ``kid``, ``alg`` and ``use`` set.
    """
    public_key = serialization.load_pem_public_key(keys.public_key.encode("ascii"))
    jwk = RSAAlgorithm.to_jwk(public_key, as_dict=True)
    jwk.update({"kid": keys.key_id, "alg": ACCESS_TOKEN_ALGORITHM, "use": "sig"})
    return {"keys": [jwk]}
