"""
Magazine Portal Server - Comment Database Model

Review comments left by coordinators. Append-only.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, Text, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship

from models.database.base import Base


class Comment(Base):
    """
    Comments table - review comments attached to a submission
    """
    __tablename__ = "comments"

    comment_id = Column(Integer, primary_key=True, autoincrement=True)
    submission_id = Column(Integer, ForeignKey("submissions.submission_id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    comment_text = Column(Text, nullable=False)
    commented_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    is_read = Column(Boolean, nullable=False, default=False)

    # Relationships
    submission = relationship("Submission", back_populates="comments")
    user = relationship("User", back_populates="comments")

    __table_args__ = (
        Index('idx_comments_submission', 'submission_id'),
    )
