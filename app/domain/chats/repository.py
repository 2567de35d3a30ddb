"""Chat repository - Database operations for chats and chat messages"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Chat, ChatImage, ChatMessage, User


class ChatRepository:
    """Repository for chat database operations"""

    @staticmethod
    def get_chat_by_id(db: Session, chat_id: int) -> Optional[Chat]:
        return db.get(Chat, chat_id)

    @staticmethod
    def get_chats_for_user(db: Session, user_id: int) -> list[Chat]:
        """Chats the user started or was invited to, newest first"""
        return (
            db.query(Chat)
            .filter(or_(Chat.author_id == user_id, Chat.reply_author_id == user_id))
            .order_by(Chat.updated_at.desc(), Chat.id.desc())
            .all()
        )

    @staticmethod
    def find_existing_chat(
        db: Session, first_user_id: int, second_user_id: int, ticket_id: Optional[int]
    ) -> Optional[Chat]:
        """A chat between the two users about the same ticket, in either direction"""
        ticket_filter = Chat.ticket_id.is_(None) if ticket_id is None else Chat.ticket_id == ticket_id
        return (
            db.query(Chat)
            .filter(
                or_(
                    (Chat.author_id == first_user_id) & (Chat.reply_author_id == second_user_id),
                    (Chat.author_id == second_user_id) & (Chat.reply_author_id == first_user_id),
                ),
                ticket_filter,
            )
            .first()
        )

    @staticmethod
    def create_chat(db: Session, **chat_data) -> Chat:
        chat = Chat(**chat_data)
        db.add(chat)
        db.commit()
        db.refresh(chat)
        return chat

    @staticmethod
    def update_chat(db: Session, chat: Chat, **updates) -> Chat:
        for key, value in updates.items():
            if value is not None and hasattr(chat, key):
                setattr(chat, key, value)

        db.commit()
        db.refresh(chat)
        return chat

    @staticmethod
    def delete_chat(db: Session, chat: Chat) -> None:
        db.delete(chat)
        db.commit()


class ChatMessageRepository:
    """Repository for chat message database operations"""

    @staticmethod
    def get_message_by_id(db: Session, message_id: int) -> Optional[ChatMessage]:
        return db.get(ChatMessage, message_id)

    @staticmethod
    def create_message(db: Session, chat: Chat, author: User, text: str, reply_to_id: Optional[int]) -> ChatMessage:
        message = ChatMessage(text=text, chat=chat, author=author, reply_to_id=reply_to_id)
        db.add(message)
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def sync_images(message: ChatMessage, image_names: list[str], author: User) -> bool:
        """
        Make the message's images match `image_names`: keep matching rows,
        drop the others and add the missing ones. Returns True on any change.
        """
        changed = False
        for chat_image in list(message.images):
            if chat_image.image not in image_names:
                message.images.remove(chat_image)
                changed = True

        existing = {chat_image.image for chat_image in message.images}
        for name in image_names:
            if name not in existing:
                message.images.append(ChatImage(image=name, author_id=author.id))
                existing.add(name)
                changed = True

        return changed

    @staticmethod
    def save(db: Session, message: ChatMessage) -> ChatMessage:
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def delete_message(db: Session, message: ChatMessage) -> None:
        db.delete(message)
        db.commit()
