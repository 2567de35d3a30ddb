"""Chat domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel

from ...models import Chat, ChatMessage
from ...shared.iri import iri

# A related resource given as "/api/{route}/{id}" or as a bare id
IriOrId = Union[str, int]


class ChatCreate(BaseModel):
    replyAuthor: Optional[IriOrId] = None
    ticket: Optional[IriOrId] = None


class ChatUpdate(BaseModel):
    active: bool


class ChatResponse(BaseModel):
    id: int
    active: Optional[bool]
    author: Optional[str]
    replyAuthor: Optional[str]
    ticket: Optional[str]
    messageCount: int = 0
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_chat(cls, chat: Chat) -> "ChatResponse":
        return cls(
            id=chat.id,
            active=chat.active,
            author=iri("users", chat.author_id),
            replyAuthor=iri("users", chat.reply_author_id),
            ticket=iri("tickets", chat.ticket_id),
            messageCount=len(chat.messages),
            createdAt=chat.created_at,
            updatedAt=chat.updated_at,
        )


class ChatSubscribeResponse(BaseModel):
    token: str
    topic: str
    hubUrl: str


class ChatImageItem(BaseModel):
    image: str


class ChatImageResponse(BaseModel):
    id: Optional[int] = None
    image: str


class ChatMessageCreate(BaseModel):
    chat: Optional[IriOrId] = None
    text: Optional[str] = None
    replyTo: Optional[IriOrId] = None


class ChatMessageUpdate(BaseModel):
    """images replaces the whole set, matched by file name"""

    chat: Optional[IriOrId] = None
    text: Optional[str] = None
    images: Optional[list[ChatImageItem]] = None


class ChatMessageResponse(BaseModel):
    id: Optional[int]
    text: Optional[str]
    chat: Optional[str]
    author: Optional[str]
    replyTo: Optional[str] = None
    images: list[ChatImageResponse] = []
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_message(cls, message: ChatMessage) -> "ChatMessageResponse":
        return cls(
            id=message.id,
            text=message.text,
            chat=iri("chats", message.chat_id),
            author=iri("users", message.author_id),
            replyTo=iri("chat-messages", message.reply_to_id),
            images=[ChatImageResponse(id=image.id, image=image.image) for image in message.images],
            createdAt=message.created_at,
            updatedAt=message.updated_at,
        )
