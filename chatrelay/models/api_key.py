"""ApiKey SQLAlchemy model"""
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from chatrelay.core.database import Base


class ApiKey(Base):
    """
    ApiKey model stores the login key of a user.

    Fields:
    - id: int primary key
    - user_id: str foreign key to users.id (unique=True)
    - key: HMAC-SHA256 digest of the plain key (unique=True)
    - created_at: datetime
    """

    __tablename__ = "api_keys"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    key = Column(String(128), nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="api_key")
