"""
Magazine Portal Server - Activity Log Database Model

Append-only audit trail of notable user actions.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from models.database.base import Base


class ActivityLog(Base):
    """
    Activity_logs table - login, comment, selection, download and admin actions
    """
    __tablename__ = "activity_logs"

    log_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)
    action_type = Column(String(50), nullable=False)
    action_details = Column(Text, nullable=True)
    log_timestamp = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationship to user
    user = relationship("User", back_populates="activity_logs")

    __table_args__ = (
        Index('idx_activity_logs_timestamp', 'log_timestamp'),
    )
