"""
User presence (online / offline) with Mercure notifications.

Driven from two places:
- POST /api/users/ping and /api/users/offline, called by the frontend
- the stale-user sweep (arq cron and mark_users_offline.py) for browsers that
  vanished without saying goodbye

Topic "user-status:{userId}" is public, so subscription tokens never need it.
"""

import logging
from datetime import timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from .. import mercure
from ..config import PRESENCE_OFFLINE_THRESHOLD_MINUTES
from ..models import User, utcnow

logger = logging.getLogger(__name__)


def format_last_seen(user: User) -> Optional[str]:
    if user.last_seen is None:
        return None
    return user.last_seen.replace(tzinfo=timezone.utc, microsecond=0).isoformat()


class UserPresenceService:
    """
    Status changes are queued on the session and released on commit; the
    caller sends them with mercure.publish_after_response or
    hub.publish_all.
    """

    def __init__(self, db: Session):
        self.db = db

    def mark_online(self, user: User) -> None:
        """Refresh last_seen; publish only on an offline -> online transition"""
        was_online = user.is_online

        user.is_online = True
        user.last_seen = utcnow()
        if not was_online:
            logger.info(f"🟢 User #{user.id} is online")
            self.queue_status(user)
        self.db.commit()

    def mark_offline(self, user: User) -> None:
        if not user.is_online:
            return

        user.is_online = False
        logger.info(f"⚪ User #{user.id} is offline")
        self.queue_status(user)
        self.db.commit()

    def queue_status(self, user: User) -> None:
        mercure.queue_update(
            self.db,
            mercure.Update(
                topics=mercure.user_status_topic(user.id),
                data={
                    "type": "online" if user.is_online else "offline",
                    "data": {
                        "id": user.id,
                        "isOnline": user.is_online,
                        "lastSeen": format_last_seen(user),
                    },
                },
                private=False,
            ),
        )


def find_stale_online_users(db: Session, threshold_minutes: int) -> list[User]:
    threshold = utcnow() - timedelta(minutes=threshold_minutes)
    return (
        db.query(User)
        .filter(User.is_online.is_(True), User.last_seen < threshold)
        .order_by(User.id)
        .all()
    )


def mark_stale_users_offline(db: Session, threshold_minutes: int = PRESENCE_OFFLINE_THRESHOLD_MINUTES) -> int:
    """
    Mark offline every online user whose last heartbeat is older than the
    threshold. Returns the number of users switched.
    """
    users = find_stale_online_users(db, threshold_minutes)
    if not users:
        logger.info("No users to mark offline")
        return 0

    service = UserPresenceService(db)
    for user in users:
        last_seen = user.last_seen.strftime("%H:%M:%S") if user.last_seen else "never"
        service.mark_offline(user)
        logger.info(f"Offline: user #{user.id} (lastSeen: {last_seen})")

    return len(users)
