"""
Magazine Portal Server - Submission Database Model

Submission model for student articles and images.
faculty_id is copied from the owner at creation time and never changes.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from models.database.base import Base


# Submission lifecycle states
STATUS_SUBMITTED = "Submitted"
STATUS_SELECTED = "Selected"
STATUS_REJECTED = "Rejected"
SUBMISSION_STATUSES = [STATUS_SUBMITTED, STATUS_SELECTED, STATUS_REJECTED]


class Submission(Base):
    """
    Submissions table - one row per uploaded article or image
    """
    __tablename__ = "submissions"

    submission_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    faculty_id = Column(Integer, ForeignKey("faculties.faculty_id"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    file_path = Column(String(255), nullable=False)  # Relative to the upload root
    file_type = Column(String(10), nullable=False)  # pdf, doc, docx, jpg, jpeg, png
    academic_year = Column(String(10), nullable=False)
    submitted_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    status = Column(String(20), nullable=False, default=STATUS_SUBMITTED)
    selected = Column(Boolean, nullable=False, default=False)
    terms_accepted = Column(Boolean, nullable=False)

    # Relationships
    user = relationship("User", back_populates="submissions")
    faculty = relationship("Faculty", back_populates="submissions")
    comments = relationship("Comment", back_populates="submission")

    __table_args__ = (
        CheckConstraint("status IN ('Submitted', 'Selected', 'Rejected')", name="ck_submissions_status"),
        # Index for coordinator worklists and faculty statistics
        Index('idx_submissions_faculty', 'faculty_id'),
        # Index for student listings
        Index('idx_submissions_user', 'user_id'),
        # Index for manager and public listings
        Index('idx_submissions_status', 'status'),
    )
