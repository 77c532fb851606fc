"""UserSession model for cookie-backed login sessions."""

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from tasktracker.core.db.session import Base


class UserSession(Base):
    """A persisted login session; the id doubles as the client-held token."""

    __tablename__ = "sessions"

    id = Column(String(255), primary_key=True)
    user_id = Column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    user = relationship("User", back_populates="sessions")

    def __repr__(self) -> str:
        return f"<UserSession(id={self.id[:6]}..., user_id={self.user_id}, expires_at={self.expires_at})>"
