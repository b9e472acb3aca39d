"""ORM Models — SQLAlchemy declarative models for all marketplace entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the aggregate root for profile, verification, rating and business details

Design Decisions:
    - One file per entity (satellite one-to-ones grouped with their owner)
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from agrilink.models.location import Location  # noqa: F401
from agrilink.models.category import Category  # noqa: F401
from agrilink.models.user import User, UserProfile  # noqa: F401
from agrilink.models.user_verification import UserVerification, UserRating  # noqa: F401
from agrilink.models.business_details import BusinessDetails  # noqa: F401
from agrilink.models.product import Product, ProductImage  # noqa: F401
from agrilink.models.conversation import Conversation, Message  # noqa: F401
from agrilink.models.offer import (  # noqa: F401
    Offer, OfferTimelineEvent, OfferReview, OfferComplaint,
)
from agrilink.models.notification import Notification  # noqa: F401
from agrilink.models.verification_request import VerificationRequest  # noqa: F401
from agrilink.models.address import Address  # noqa: F401
from agrilink.models.saved_product import SavedProduct  # noqa: F401
from agrilink.models.user_report import UserReport  # noqa: F401
from agrilink.models.maintenance_schedule import MaintenanceSchedule  # noqa: F401
from agrilink.models.seller_custom_option import SellerCustomOption  # noqa: F401
from agrilink.models.user_social import UserSocial  # noqa: F401
