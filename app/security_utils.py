"""
Security Utilities
Password hashing, API tokens and Mercure tokens using industry-standard libraries
"""

import logging
import secrets
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError
from jose import jwt as jose_jwt

# Password hashing
from passlib.context import CryptContext

from .config import BCRYPT_ROUNDS, JWT_ALGORITHM, JWT_TTL_SECONDS, SECRET_KEY

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

# Prefixes of values that are already password hashes (bcrypt / argon2)
HASHED_PASSWORD_PREFIXES = ("$2y$", "$argon2", "$2a$", "$2b$")


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def is_password_hashed(password: str) -> bool:
    return password.startswith(HASHED_PASSWORD_PREFIXES)


def hash_password_bcrypt(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password_bcrypt(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify password against bcrypt hash"""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False


# ============================================================================
# TOKEN GENERATION & VALIDATION
# ============================================================================


def generate_secure_token(nbytes: int = 32) -> str:
    """Generate a cryptographically secure random hex token (2 * nbytes chars)"""
    return secrets.token_hex(nbytes)


def create_jwt_token(
    data: dict[str, Any],
    expires_delta: Optional[timedelta] = None,
    secret: str = SECRET_KEY,
) -> str:
    """
    Create a JWT token

    Args:
        data: Data to encode in the token
        expires_delta: Token expiration time (default JWT_TTL_SECONDS)
        secret: Signing key
    """
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(seconds=JWT_TTL_SECONDS)

    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta, "iat": int(time.time())})
    return jose_jwt.encode(to_encode, secret, algorithm=JWT_ALGORITHM)


def verify_jwt_token(token: str, secret: str = SECRET_KEY) -> Optional[dict[str, Any]]:
    """
    Verify and decode a JWT token

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jose_jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None


def create_access_token(user_id: int, email: str, roles: list[str]) -> str:
    """Bearer token returned by the login endpoint"""
    return create_jwt_token({"sub": str(user_id), "username": email, "roles": roles})
