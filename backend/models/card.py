# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Card ORM model."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func

from database import Base


class Card(Base):
    __tablename__ = "cards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    card_holder_name = Column(String(255), nullable=False)
    # "<hex iv>:<hex ciphertext>" – never plaintext (see core.security)
    card_number = Column(Text, nullable=False)
    expiry_date = Column(String(16), nullable=False)
    cvv = Column(Text, nullable=False)
    card_type = Column(String(32), nullable=False)
    bank_name = Column(String(255), nullable=True)
    card_color = Column(String(64), nullable=False, default="from-gray-900 to-gray-800")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
