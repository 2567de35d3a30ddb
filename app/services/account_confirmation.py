"""
Account confirmation tokens and the activation e-mail.

A fresh token replaces any previous one for the user; confirming activates
and approves the account and consumes the token.
"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ..config import ACCOUNT_CONFIRMATION_TTL_HOURS, BACKGROUND_JOBS_ENABLED
from ..email_service import EmailServiceError, send_account_confirmation_email
from ..models import AccountConfirmationToken, User, utcnow
from ..security_utils import generate_secure_token

logger = logging.getLogger(__name__)


def issue_confirmation_token(db: Session, user: User) -> str:
    """Drop the user's previous tokens and store a new one"""
    db.query(AccountConfirmationToken).filter(AccountConfirmationToken.user_id == user.id).delete(
        synchronize_session=False
    )

    token = AccountConfirmationToken(
        user_id=user.id,
        token=generate_secure_token(32),
        expires_at=utcnow() + timedelta(hours=ACCOUNT_CONFIRMATION_TTL_HOURS),
    )
    db.add(token)
    db.commit()

    logger.info(f"🔑 Confirmation token issued for user #{user.id}")
    return token.token


def confirm_account(db: Session, token: Optional[str]) -> User:
    """
    Raises:
        HTTPException 400 when the token is unknown or expired
    """
    confirmation = None
    if token:
        confirmation = (
            db.query(AccountConfirmationToken).filter(AccountConfirmationToken.token == token).first()
        )

    if not confirmation or confirmation.expires_at < utcnow():
        raise HTTPException(status_code=400, detail="Token is invalid or expired")

    user = confirmation.user
    user.active = True
    user.approved = True
    db.delete(confirmation)
    db.commit()

    logger.info(f"✅ Account #{user.id} confirmed")
    return user


async def dispatch_confirmation_email(email: str, user_name: Optional[str], token: str) -> None:
    """
    Queue the confirmation e-mail on the arq worker, or send it inline when
    the queue is disabled or unreachable. Delivery failures are logged only.
    """
    if BACKGROUND_JOBS_ENABLED:
        from arq import create_pool

        from ..worker import get_redis_settings

        try:
            pool = await create_pool(get_redis_settings())
            await pool.enqueue_job("send_confirmation_email_task", email, user_name, token)
            logger.info(f"📋 Confirmation e-mail queued for {email}")
            return
        except Exception as queue_err:
            logger.warning(f"⚠️ Failed to queue confirmation e-mail, sending inline: {queue_err}")

    try:
        await send_account_confirmation_email(email, user_name, token)
    except EmailServiceError as e:
        logger.error(f"❌ Confirmation e-mail to {email} not sent: {e}")
