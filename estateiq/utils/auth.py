"""
Credential and token helpers.

Password hashing uses bcrypt. Session tokens come from ``secrets``. Google
identity tokens are handled by google-auth: verified against Google's keys when
a client id is configured, otherwise decoded without checking the signature.
"""

import secrets
from dataclasses import dataclass
from typing import Any, Dict, Optional

import bcrypt
from google.auth import exceptions as google_exceptions
from google.auth import jwt as google_jwt
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token

from estateiq.config import BCRYPT_ROUNDS
from estateiq.errors import TokenDecodeError

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored hash is not a bcrypt hash
        return False


def generate_session_token() -> str:
    """64 hex characters (256 bits) from the OS CSPRNG."""
    return secrets.token_hex(32)


def decode_google_credential(credential: Any) -> Dict[str, Any]:
    """
    Decode the payload of a Google ID token WITHOUT verifying its signature.

    Raises:
        TokenDecodeError: wrong segment count, bad base64url or bad JSON
    """
    if not isinstance(credential, str):
        raise TokenDecodeError("Invalid JWT format")
    try:
        decoded = google_jwt.decode(credential, verify=False)
    except (ValueError, google_exceptions.GoogleAuthError) as e:
        raise TokenDecodeError("Failed to decode JWT token") from e

    if not isinstance(decoded, dict):
        raise TokenDecodeError("Failed to decode JWT token")
    return decoded


def verify_google_credential(credential: str, client_id: str) -> Dict[str, Any]:
    """
    Verify a Google ID token's signature, issuer, audience and expiry against
    Google's published keys.

    Raises:
        TokenDecodeError: if google-auth rejects the token
    """
    try:
        return google_id_token.verify_oauth2_token(credential, google_requests.Request(), client_id)
    except ValueError as e:
        raise TokenDecodeError(f"Invalid Google credential: {e}") from e


@dataclass
class GoogleProfile:
    """Fields of a Google identity token that the account model uses."""
    google_id: str
    email: str
    first_name: str
    last_name: str
    avatar_url: Optional[str] = None


def extract_google_profile(claims: Dict[str, Any]) -> GoogleProfile:
    google_id = claims.get("sub")
    email = claims.get("email")
    if not google_id or not email or not isinstance(email, str):
        raise TokenDecodeError("Google credential is missing the subject or email")

    name = claims.get("name") or ""
    name_parts = name.split(" ") if isinstance(name, str) and name else []
    first_name = claims.get("given_name") or (name_parts[0] if name_parts else "") or "User"
    last_name = claims.get("family_name") or " ".join(name_parts[1:])

    return GoogleProfile(
        google_id=str(google_id),
        email=email,
        first_name=first_name,
        last_name=last_name,
        avatar_url=claims.get("picture"),
    )
