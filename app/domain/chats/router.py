"""Chat router - FastAPI endpoints for chats, messages and Mercure subscriptions"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Response
from sqlalchemy.orm import Session

from ... import mercure
from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import (
    ChatCreate,
    ChatMessageCreate,
    ChatMessageResponse,
    ChatMessageUpdate,
    ChatResponse,
    ChatSubscribeResponse,
    ChatUpdate,
)
from .service import ChatMessageService, ChatService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chats", tags=["Chats"])
messages_router = APIRouter(prefix="/api/chat-messages", tags=["Chats"])


def get_chat_service(db: Session = Depends(get_db)) -> ChatService:
    """Dependency injection for ChatService"""
    return ChatService(db)


def get_chat_message_service(db: Session = Depends(get_db)) -> ChatMessageService:
    """Dependency injection for ChatMessageService"""
    return ChatMessageService(db)


# ============================================================================
# CHATS
# ============================================================================


@router.get("/me", response_model=list[ChatResponse])
async def get_my_chats(
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    return [ChatResponse.from_chat(chat) for chat in service.get_chats(current_user)]


@router.get("/{chat_id}", response_model=ChatResponse)
async def get_chat(
    chat_id: int,
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    return ChatResponse.from_chat(service.get_chat(chat_id, current_user))


@router.get("/{chat_id}/messages", response_model=list[ChatMessageResponse])
async def get_chat_messages(
    chat_id: int,
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    """Chat history, oldest first"""
    chat = service.get_chat(chat_id, current_user)
    return [ChatMessageResponse.from_message(message) for message in chat.messages]


@router.get("/{chat_id}/subscribe", response_model=ChatSubscribeResponse)
async def get_chat_subscribe_token(
    chat_id: int,
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    """
    Mercure token (1 hour) allowing the browser to subscribe to "chat:{id}".

    The chat topic is private, so the hub only streams it to holders of a JWT
    whose "mercure.subscribe" claim lists it.
    """
    return service.create_subscribe_token(chat_id, current_user)


@router.post("", response_model=ChatResponse, status_code=201)
async def create_chat(
    data: ChatCreate,
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    return ChatResponse.from_chat(service.create_chat(data, current_user))


@router.patch("/{chat_id}", response_model=ChatResponse)
async def update_chat(
    chat_id: int,
    data: ChatUpdate,
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    return ChatResponse.from_chat(service.update_chat(chat_id, data, current_user))


@router.delete("/{chat_id}", status_code=204)
async def delete_chat(
    chat_id: int,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    service.delete_chat(chat_id, current_user)
    mercure.publish_after_response(background_tasks, service.db)
    return Response(status_code=204)


# ============================================================================
# MESSAGES
# ============================================================================


@messages_router.get("/{message_id}", response_model=ChatMessageResponse)
async def get_chat_message(
    message_id: int,
    current_user: User = Depends(get_current_user),
    service: ChatMessageService = Depends(get_chat_message_service),
):
    return ChatMessageResponse.from_message(service.get_message(message_id, current_user))


@messages_router.post("", response_model=ChatMessageResponse, status_code=201)
async def create_chat_message(
    data: ChatMessageCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    service: ChatMessageService = Depends(get_chat_message_service),
):
    message = service.create_message(data, current_user)
    mercure.publish_after_response(background_tasks, service.db)
    return ChatMessageResponse.from_message(message)


@messages_router.patch("/{message_id}", response_model=ChatMessageResponse)
async def update_chat_message(
    message_id: int,
    data: ChatMessageUpdate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    service: ChatMessageService = Depends(get_chat_message_service),
):
    message = service.update_message(message_id, data, current_user)
    mercure.publish_after_response(background_tasks, service.db)
    return ChatMessageResponse.from_message(message)


@messages_router.delete("/{message_id}", status_code=204)
async def delete_chat_message(
    message_id: int,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    service: ChatMessageService = Depends(get_chat_message_service),
):
    service.delete_message(message_id, current_user)
    mercure.publish_after_response(background_tasks, service.db)
    return Response(status_code=204)
