from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from database import Base
from models.audit_mixin import TimestampMixin


class Sesion(Base, TimestampMixin):
    """A signed-in session. The id is the JWT ``jti`` claim; sign-out sets revoked_at."""
    __tablename__ = "sesiones"

    id = Column(String(36), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="sesiones")
