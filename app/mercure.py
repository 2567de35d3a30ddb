"""
Mercure hub client

The hub keeps Server-Sent Events connections open to browsers; the backend
only POSTs updates to it. Private updates are delivered only to subscribers
whose JWT lists the topic in its "mercure.subscribe" claim.

Topics:
- chat:{chatId}        private, chat message created/updated/deleted
- user-status:{userId} public, online/offline transitions

Updates produced inside a request are queued on the SQLAlchemy session,
released when it commits, and sent with httpx.AsyncClient from a background
task after the response.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional, Union

import httpx
from fastapi import BackgroundTasks
from jose import jwt as jose_jwt
from sqlalchemy.orm import Session

from .config import (
    JWT_ALGORITHM,
    MERCURE_ENABLED,
    MERCURE_PUBLISHER_JWT_SECRET,
    MERCURE_SUBSCRIBE_TTL_SECONDS,
    MERCURE_SUBSCRIBER_JWT_SECRET,
    MERCURE_URL,
)

logger = logging.getLogger(__name__)

# session.info keys: updates waiting for commit, then committed and not yet sent
PENDING_UPDATES = "mercure_pending_updates"
COMMITTED_UPDATES = "mercure_committed_updates"


def chat_topic(chat_id: int) -> str:
    return f"chat:{chat_id}"


def user_status_topic(user_id: int) -> str:
    return f"user-status:{user_id}"


@dataclass
class Update:
    topics: Union[str, list[str]]
    data: Any
    private: bool = False

    @property
    def topic_list(self) -> list[str]:
        return [self.topics] if isinstance(self.topics, str) else list(self.topics)

    def encoded_data(self) -> str:
        return self.data if isinstance(self.data, str) else json.dumps(self.data, ensure_ascii=False)


def create_publisher_token() -> str:
    return jose_jwt.encode(
        {"mercure": {"publish": ["*"]}}, MERCURE_PUBLISHER_JWT_SECRET, algorithm=JWT_ALGORITHM
    )


def create_subscriber_token(topics: list[str], ttl: int = MERCURE_SUBSCRIBE_TTL_SECONDS) -> str:
    """Short-lived token allowing a browser to subscribe to the given topics only"""
    return jose_jwt.encode(
        {"mercure": {"subscribe": list(topics)}, "exp": int(time.time()) + ttl},
        MERCURE_SUBSCRIBER_JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )


class MercureHub:
    """Publishes updates to the hub over HTTP"""

    def __init__(self, url: str = MERCURE_URL, enabled: bool = MERCURE_ENABLED, timeout: float = 5.0):
        self.url = url
        self.enabled = enabled
        self.timeout = timeout

    async def publish(self, update: Update) -> Optional[str]:
        """
        Send one update to the hub.

        Returns the update id assigned by the hub, or None when publishing is
        disabled or failed. Failures are logged, never raised: a lost
        real-time event must not fail the request that caused it.
        """
        if not self.enabled:
            logger.debug(f"Mercure disabled, dropping update for {update.topic_list}")
            return None

        form = {"topic": update.topic_list, "data": update.encoded_data()}
        if update.private:
            form["private"] = "on"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.url,
                    data=form,
                    headers={"Authorization": f"Bearer {create_publisher_token()}"},
                )
            if response.status_code != 200:
                logger.error(
                    f"❌ Mercure publish failed for {update.topic_list}: HTTP {response.status_code}"
                )
                return None
            logger.debug(f"📡 Published to {update.topic_list}: {response.text}")
            return response.text
        except httpx.HTTPError as e:
            logger.error(f"❌ Mercure hub unreachable for {update.topic_list}: {e}")
            return None

    async def publish_all(self, updates: list[Update]) -> None:
        for update in updates:
            await self.publish(update)


# Global hub instance
hub = MercureHub()


# ============================================================================
# SESSION OUTBOX
# ============================================================================


def queue_update(session: Session, update: Update) -> None:
    """Hold an update until the session commits (see listeners)"""
    session.info.setdefault(PENDING_UPDATES, []).append(update)


def take_committed_updates(session: Session) -> list[Update]:
    return session.info.pop(COMMITTED_UPDATES, [])


def publish_after_response(background_tasks: BackgroundTasks, session: Session) -> None:
    """Send the updates committed by this request once the response is out"""
    updates = take_committed_updates(session)
    if updates:
        background_tasks.add_task(hub.publish_all, updates)
