"""Chat Service — buyer/seller conversations and messages.

Invariants:
    - Only the two participants read or write a conversation
    - Sending requires a verified email and updates last_message, its time,
      and the unread count
    - Mark-read flips the other party's messages and resets unread_count
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.domain_types import ConversationId, MessageType, ProductId
from agrilink.core.errors import BusinessRuleError, PermissionDeniedError, ResourceNotFoundError
from agrilink.core.trust import check_email_verified
from agrilink.models.conversation import Conversation, Message
from agrilink.models.user import User
from agrilink.services.product_service import ProductService

logger = logging.getLogger(__name__)


class ChatService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_conversations(self, user: User) -> list[Conversation]:
        result = await self.db.execute(
            select(Conversation)
            .where(
                or_(Conversation.buyer_id == user.id, Conversation.seller_id == user.id),
                Conversation.is_active.is_(True),
            )
            .order_by(
                Conversation.last_message_time.desc().nulls_last(),
                Conversation.created_at.desc(),
            ),
        )
        return list(result.scalars().all())

    async def start_conversation(self, user: User, product_id: ProductId) -> tuple[Conversation, bool]:
        """(conversation, created) for the caller and the product's seller."""
        product = await ProductService(self.db).get_product(product_id)
        if product.seller_id == user.id:
            raise BusinessRuleError("You cannot start a conversation with yourself", "SELF_CONVERSATION")

        result = await self.db.execute(
            select(Conversation).where(
                Conversation.buyer_id == user.id,
                Conversation.seller_id == product.seller_id,
                Conversation.product_id == product.id,
            ).limit(1),
        )
        conversation = result.scalar_one_or_none()
        if conversation:
            return conversation, False

        conversation = Conversation(
            buyer_id=user.id, seller_id=product.seller_id, product_id=product.id,
        )
        self.db.add(conversation)
        await self.db.commit()
        await self.db.refresh(conversation)
        logger.info(
            "Conversation started",
            extra={"user_id": user.id, "conversation_id": conversation.id},
        )
        return conversation, True

    async def get_conversation(self, user: User, conversation_id: ConversationId) -> Conversation:
        conversation = await self.db.get(Conversation, conversation_id)
        if not conversation:
            raise ResourceNotFoundError("Conversation", str(conversation_id))
        if user.id not in (conversation.buyer_id, conversation.seller_id):
            raise PermissionDeniedError("You are not a participant in this conversation")
        return conversation

    async def list_messages(self, user: User, conversation_id: ConversationId) -> list[Message]:
        await self.get_conversation(user, conversation_id)
        result = await self.db.execute(
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc()),
        )
        return list(result.scalars().all())

    async def send_message(
        self,
        user: User,
        conversation_id: ConversationId,
        content: str,
        message_type: MessageType = MessageType.TEXT,
    ) -> Message:
        conversation = await self.get_conversation(user, conversation_id)
        action = "send_message" if conversation.last_message is None else "reply_message"
        check_email_verified(user.email_verified, action)

        now = datetime.now(timezone.utc)
        message = Message(
            conversation_id=conversation.id, sender_id=user.id,
            content=content, message_type=message_type.value, created_at=now,
        )
        self.db.add(message)
        conversation.last_message = content
        conversation.last_message_time = now
        conversation.unread_count = (conversation.unread_count or 0) + 1
        await self.db.commit()
        await self.db.refresh(message)
        logger.info(
            "Message sent",
            extra={"user_id": user.id, "conversation_id": conversation.id},
        )
        return message

    async def mark_read(self, user: User, conversation_id: ConversationId) -> int:
        conversation = await self.get_conversation(user, conversation_id)
        result = await self.db.execute(
            update(Message)
            .where(
                Message.conversation_id == conversation.id,
                Message.sender_id != user.id,
                Message.is_read.is_(False),
            )
            .values(is_read=True),
        )
        conversation.unread_count = 0
        await self.db.commit()
        return result.rowcount or 0
