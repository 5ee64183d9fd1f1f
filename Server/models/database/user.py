"""
Magazine Portal Server - User Database Model

User model for authentication and authorization.
Stores user credentials, faculty membership and role assignment.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from models.database.base import Base


class User(Base):
    """
    Users table - stores user credentials and authentication info
    """
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False)  # Stored lower-cased
    password = Column(String(255), nullable=False)  # bcrypt hash, or legacy plain text until first login
    faculty_id = Column(Integer, ForeignKey("faculties.faculty_id"), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.role_id"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    last_login = Column(DateTime, nullable=True)

    # Relationship to role
    role = relationship("Role", back_populates="users")
    # Relationship to faculty
    faculty = relationship("Faculty", back_populates="users")
    # Relationship to submissions
    submissions = relationship("Submission", back_populates="user")
    # Relationship to comments
    comments = relationship("Comment", back_populates="user")
    # Relationship to activity logs
    activity_logs = relationship("ActivityLog", back_populates="user")
