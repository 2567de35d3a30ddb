"""
ORM event listeners

- User.password: plain values are hashed on assignment
- TechSupport before_insert: default status and least-loaded admin assignment
- Session after_flush: review rating recomputation and chat message events
- Session after_commit / after_rollback: queued Mercure updates are released
  for sending once the transaction that produced them has committed

Import this module once at start-up to register the listeners.
"""

import logging
from itertools import chain

from sqlalchemy import String, cast, event, func, select, update
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from . import mercure
from .domain.chats.schemas import ChatMessageResponse
from .models import ROLE_ADMIN, ChatMessage, Review, TechSupport, User
from .security_utils import hash_password_bcrypt, is_password_hashed

logger = logging.getLogger(__name__)


# ============================================================================
# USER PASSWORD
# ============================================================================


@event.listens_for(User.password, "set", retval=True)
def hash_password_on_set(target, value, oldvalue, initiator):
    if not value or is_password_hashed(value):
        return value
    return hash_password_bcrypt(value)


# ============================================================================
# TECH SUPPORT ASSIGNMENT
# ============================================================================


def find_least_loaded_admin_id(connection):
    """
    Admin with the fewest active tech-support tickets.

    Ties go to the lowest user id. Returns None when there are no admins.
    """
    admin_ids = connection.execute(
        select(User.id).where(cast(User.roles, String).like(f"%{ROLE_ADMIN}%")).order_by(User.id)
    ).scalars().all()
    if not admin_ids:
        return None

    loads = dict(
        connection.execute(
            select(TechSupport.administrant_id, func.count(TechSupport.id))
            .where(
                TechSupport.administrant_id.in_(admin_ids),
                TechSupport.status.in_(TechSupport.ACTIVE_STATUSES),
            )
            .group_by(TechSupport.administrant_id)
        ).all()
    )

    least_loaded, min_load = None, None
    for admin_id in admin_ids:
        load = loads.get(admin_id, 0)
        if min_load is None or load < min_load:
            least_loaded, min_load = admin_id, load
    return least_loaded


@event.listens_for(TechSupport, "before_insert")
def assign_least_loaded_admin(mapper, connection, target):
    if target.status is None:
        target.status = "new"

    admin_id = find_least_loaded_admin_id(connection)
    if admin_id is None:
        logger.warning("⚠️ No admins available, tech support ticket left unassigned")
        return

    target.administrant_id = admin_id
    logger.info(f"🎯 Tech support ticket assigned to admin #{admin_id}")


# ============================================================================
# REVIEW RATINGS
# ============================================================================


def _review_targets(session):
    targets = set()
    for obj in chain(session.new, session.dirty, session.deleted):
        if not isinstance(obj, Review) or obj.type not in Review.TYPES:
            continue
        if obj.target_user_id is not None:
            targets.add((obj.type, obj.target_user_id))
    return targets


def compute_user_rating(connection, review_type: str, user_id: int):
    """Mean of the user's ratings for this review type, 2 decimals, capped at 5"""
    target_column = Review.client_id if review_type == "client" else Review.master_id
    average = connection.execute(
        select(func.avg(Review.rating)).where(
            Review.type == review_type,
            Review.rating.isnot(None),
            target_column == user_id,
        )
    ).scalar()
    if average is None:
        return None
    return min(round(float(average), 2), 5.0)


@event.listens_for(Session, "after_flush")
def recalculate_review_ratings(session, flush_context):
    targets = _review_targets(session)
    if not targets:
        return

    connection = session.connection()
    for review_type, user_id in targets:
        rating = compute_user_rating(connection, review_type, user_id)
        connection.execute(update(User.__table__).where(User.__table__.c.id == user_id).values(rating=rating))

        # Keep an already loaded User in sync without marking it dirty
        user = session.identity_map.get(session.identity_key(User, user_id))
        if user is not None:
            set_committed_value(user, "rating", rating)

        logger.debug(f"⭐ Rating of user #{user_id} ({review_type}) recalculated: {rating}")


# ============================================================================
# CHAT MESSAGE EVENTS
# ============================================================================


def _chat_update(event_type: str, chat_id: int, data: dict) -> mercure.Update:
    return mercure.Update(
        topics=mercure.chat_topic(chat_id),
        data={"type": event_type, "data": data},
        private=True,
    )


@event.listens_for(Session, "after_flush")
def collect_chat_message_events(session, flush_context):
    for obj in session.new:
        if isinstance(obj, ChatMessage) and obj.chat_id:
            data = ChatMessageResponse.from_message(obj).model_dump(mode="json")
            mercure.queue_update(session, _chat_update("created", obj.chat_id, data))

    for obj in session.dirty:
        if isinstance(obj, ChatMessage) and obj.chat_id and session.is_modified(obj):
            data = ChatMessageResponse.from_message(obj).model_dump(mode="json")
            mercure.queue_update(session, _chat_update("updated", obj.chat_id, data))

    for obj in session.deleted:
        if isinstance(obj, ChatMessage) and obj.chat_id:
            deleted = {"id": obj.id, "chatId": obj.chat_id}
            mercure.queue_update(session, _chat_update("deleted", obj.chat_id, deleted))


# ============================================================================
# MERCURE OUTBOX
# ============================================================================


@event.listens_for(Session, "after_commit")
def release_committed_updates(session):
    pending = session.info.pop(mercure.PENDING_UPDATES, None)
    if pending:
        session.info.setdefault(mercure.COMMITTED_UPDATES, []).extend(pending)


@event.listens_for(Session, "after_rollback")
def discard_pending_updates(session):
    dropped = session.info.pop(mercure.PENDING_UPDATES, None)
    if dropped:
        logger.info(f"↩️ Dropped {len(dropped)} Mercure updates after rollback")
