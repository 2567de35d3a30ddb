"""Chat service - Business logic for chats, messages and subscriptions"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ... import mercure
from ...access import check_access, check_blacklist
from ...config import MERCURE_PUBLIC_URL
from ...models import ROLE_CLIENT, ROLE_MASTER, Chat, ChatMessage, Ticket, User, utcnow
from ...shared.iri import extract_entity
from .repository import ChatMessageRepository, ChatRepository
from .schemas import ChatCreate, ChatMessageCreate, ChatMessageUpdate, ChatUpdate

logger = logging.getLogger(__name__)


def _is_client_or_master(user: User) -> bool:
    return user.has_role(ROLE_CLIENT) or user.has_role(ROLE_MASTER)


class ChatService:
    """Service layer for chat business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ChatRepository()

    def _get_chat_or_404(self, chat_id: int, detail: str = "Chat not found") -> Chat:
        chat = self.repo.get_chat_by_id(self.db, chat_id)
        if not chat:
            raise HTTPException(status_code=404, detail=detail)
        return chat

    def get_chats(self, user: User) -> list[Chat]:
        check_access(user)
        return self.repo.get_chats_for_user(self.db, user.id)

    def get_chat(self, chat_id: int, user: User) -> Chat:
        check_access(user)
        chat = self._get_chat_or_404(chat_id)
        if not chat.has_participant(user):
            raise HTTPException(status_code=403, detail="Ownership doesn't match")
        return chat

    def create_chat(self, data: ChatCreate, user: User) -> Chat:
        """
        Open a chat with another user. Allowed shapes:
        - no ticket, both sides clients or masters
        - client -> master about the master's service ticket
        - master -> client about the client's request ticket
        """
        check_access(user)

        reply_author = extract_entity(self.db, data.replyAuthor, User, "users")
        ticket = extract_entity(self.db, data.ticket, Ticket, "tickets") if data.ticket is not None else None

        if reply_author.id == user.id:
            raise HTTPException(status_code=403, detail="You cannot post a chat with yourself")

        check_blacklist(user, assumed_user=reply_author)

        ticket_id = ticket.id if ticket else None
        if self.repo.find_existing_chat(self.db, user.id, reply_author.id, ticket_id):
            raise HTTPException(status_code=409, detail="Chat already exists")

        if ticket is None:
            allowed = _is_client_or_master(user) and _is_client_or_master(reply_author)
        elif user.has_role(ROLE_CLIENT) and reply_author.has_role(ROLE_MASTER):
            allowed = ticket.master_id == reply_author.id
        elif user.has_role(ROLE_MASTER) and reply_author.has_role(ROLE_CLIENT):
            allowed = ticket.author_id == reply_author.id
        else:
            allowed = False

        if not allowed:
            raise HTTPException(
                status_code=400, detail="Probably ticket's author/master doesn't match to reply author"
            )

        chat = self.repo.create_chat(
            self.db, active=True, author_id=user.id, reply_author_id=reply_author.id, ticket_id=ticket_id
        )
        logger.info(f"💬 Chat #{chat.id} opened by user #{user.id} with user #{reply_author.id}")
        return chat

    def update_chat(self, chat_id: int, data: ChatUpdate, user: User) -> Chat:
        check_access(user)
        chat = self._get_chat_or_404(chat_id, "Resource not found")

        if not chat.has_participant(user):
            raise HTTPException(status_code=400, detail="Ownership doesn't match")

        check_blacklist(chat.author, assumed_user=chat.reply_author)

        return self.repo.update_chat(self.db, chat, active=data.active)

    def delete_chat(self, chat_id: int, user: User) -> None:
        check_access(user)
        chat = self._get_chat_or_404(chat_id, "Resource not found")

        if not chat.has_participant(user):
            raise HTTPException(status_code=400, detail="Ownership doesn't match")

        self.repo.delete_chat(self.db, chat)
        logger.info(f"🗑️ Chat #{chat_id} removed by user #{user.id}")

    def create_subscribe_token(self, chat_id: int, user: User) -> dict:
        """Short-lived Mercure token for the private topic of one chat"""
        check_access(user)
        chat = self._get_chat_or_404(chat_id, "Resource not found")

        if not chat.has_participant(user):
            raise HTTPException(status_code=403, detail="Ownership doesn't match")

        topic = mercure.chat_topic(chat.id)
        return {
            "token": mercure.create_subscriber_token([topic]),
            "topic": topic,
            "hubUrl": MERCURE_PUBLIC_URL,
        }


class ChatMessageService:
    """Service layer for chat message business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ChatMessageRepository()

    def _get_message_or_404(self, message_id: int, detail: str) -> ChatMessage:
        message = self.repo.get_message_by_id(self.db, message_id)
        if not message:
            raise HTTPException(status_code=404, detail=detail)
        return message

    def get_message(self, message_id: int, user: User) -> ChatMessage:
        check_access(user)
        message = self._get_message_or_404(message_id, "Chat message not found")
        if not message.chat or not message.chat.has_participant(user):
            raise HTTPException(status_code=403, detail="Ownership doesn't match")
        return message

    def create_message(self, data: ChatMessageCreate, user: User) -> ChatMessage:
        check_access(user)

        if not data.chat:
            raise HTTPException(status_code=400, detail="Wrong chat format")
        if not data.text or not data.text.strip():
            raise HTTPException(status_code=400, detail="Empty message text")

        chat = extract_entity(self.db, data.chat, Chat, "chats")
        if not chat.has_participant(user):
            raise HTTPException(status_code=403, detail="Ownership doesn't match")

        check_access(chat.reply_author)
        check_blacklist(chat.author, assumed_user=chat.reply_author)

        reply_to_id = None
        if data.replyTo is not None:
            reply_to = extract_entity(self.db, data.replyTo, ChatMessage, "chat-messages")
            if reply_to.chat_id != chat.id:
                raise HTTPException(status_code=400, detail="Replied message belongs to another chat")
            reply_to_id = reply_to.id

        message = self.repo.create_message(self.db, chat, user, data.text, reply_to_id)
        logger.info(f"✉️ Message #{message.id} posted to chat #{chat.id} by user #{user.id}")
        return message

    def update_message(self, message_id: int, data: ChatMessageUpdate, user: User) -> ChatMessage:
        """Edit text and/or replace the image set of a message"""
        check_access(user)
        message = self._get_message_or_404(message_id, "Chat message not found")

        chat = message.chat
        if data.chat is not None:
            chat = extract_entity(self.db, data.chat, Chat, "chats")
            if chat.id != message.chat_id:
                raise HTTPException(status_code=400, detail="Message doesn't belong to this chat")
        if chat is None:
            raise HTTPException(status_code=404, detail="Chat not found")

        if not data.text and not data.images:
            raise HTTPException(status_code=400, detail="Nothing to update")

        if not chat.has_participant(user):
            raise HTTPException(status_code=403, detail="Ownership doesn't match")

        if data.text:
            message.text = data.text

        if data.images is not None:
            names = [item.image for item in data.images if item.image]
            if self.repo.sync_images(message, names, user):
                message.updated_at = utcnow()

        return self.repo.save(self.db, message)

    def delete_message(self, message_id: int, user: User) -> None:
        check_access(user)
        message = self._get_message_or_404(message_id, "Resource not found")

        if message.author_id != user.id:
            raise HTTPException(status_code=403, detail="Ownership doesn't match")

        self.repo.delete_message(self.db, message)
        logger.info(f"🗑️ Message #{message_id} removed by user #{user.id}")
