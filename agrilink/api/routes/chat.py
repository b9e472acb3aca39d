"""Chat Routes — conversations between a buyer and a product's seller."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.api import serializers
from agrilink.api.dependencies import get_current_user
from agrilink.core.domain_types import MessageType
from agrilink.infrastructure.database import get_db
from agrilink.models.user import User
from agrilink.schemas.chat import ConversationStart, MessageCreate
from agrilink.services.chat_service import ChatService

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])


@router.get("/conversations")
async def list_conversations(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    conversations = await ChatService(db).list_conversations(user)
    return {
        "conversations": [serializers.conversation(c, user.id) for c in conversations],
    }


@router.post("/conversations")
async def start_conversation(
    body: ConversationStart,
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    conversation, created = await ChatService(db).start_conversation(user, body.product_id)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return {
        "conversation": serializers.conversation(conversation, user.id),
        "existing": not created,
    }


@router.get("/conversations/{conversation_id}")
async def get_conversation(
    conversation_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    conversation = await ChatService(db).get_conversation(user, conversation_id)
    return {"conversation": serializers.conversation(conversation, user.id)}


@router.patch("/conversations/{conversation_id}")
async def mark_conversation_read(
    conversation_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    updated = await ChatService(db).mark_read(user, conversation_id)
    return {"message": "Conversation marked as read", "updated": updated}


@router.get("/conversations/{conversation_id}/messages")
async def list_messages(
    conversation_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    messages = await ChatService(db).list_messages(user, conversation_id)
    return {"messages": [serializers.message(m) for m in messages]}


@router.post("/messages", status_code=status.HTTP_201_CREATED)
async def send_message(
    body: MessageCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    message = await ChatService(db).send_message(
        user, body.conversation_id, body.content, MessageType(body.message_type),
    )
    return {"message": serializers.message(message)}
