"""UserBusiness Domain Entity

Assignment of a user to the business they operate.
"""

from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, String, UniqueConstraint
from src.domain.base import BaseModel, generate_uuid


class UserBusiness(BaseModel, table=True):
    """Membership row: a user operates on exactly one business"""

    __tablename__ = "user_businesses"
    __table_args__ = (
        UniqueConstraint('user_id', 'business_id', name='uq_user_business'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    user_id: str = Field(index=True, description="User identifier")

    business_id: str = Field(
        sa_column=Column(String, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False),
        description="Assigned business"
    )
