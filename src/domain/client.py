"""Client Domain Entity

Borrower belonging to exactly one business.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, String
from src.domain.base import BaseModel, generate_uuid


class Client(BaseModel, table=True):
    """Client - borrower registered under a single business"""

    __tablename__ = "clients"

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Client identifier (UUID)"
    )

    business_id: str = Field(
        sa_column=Column(String, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True),
        description="Owning business"
    )

    full_name: str = Field(
        sa_column=Column(String(150), nullable=False),
        description="Client full name"
    )

    document_number: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Identity document number"
    )

    phone: Optional[str] = Field(
        default=None,
        sa_column=Column(String(30), nullable=True),
        description="Contact phone"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Creation timestamp"
    )
