import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models import User
from .security_utils import verify_jwt_token

logger = logging.getLogger(__name__)

security = HTTPBearer()


def resolve_token_user(token: str, db: Session) -> User:
    """Decode an API bearer token and load its user"""
    payload = verify_jwt_token(token)
    if not payload:
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    subject = payload.get("sub")
    if not subject or not str(subject).isdigit():
        logger.warning("⚠️ Token without a usable subject")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    user = db.get(User, int(subject))
    if not user:
        logger.warning(f"⚠️ Token subject {subject} no longer exists")
        raise HTTPException(status_code=401, detail="User not found")

    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    return resolve_token_user(credentials.credentials, db)
