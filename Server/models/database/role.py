"""
Magazine Portal Server - Role Database Model

Role reference rows. Seeded with the four portal roles; application code
works with the UserRole enum and only uses these rows for joins and display.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from models.database.base import Base


class Role(Base):
    """
    Roles table - stores role definitions
    """
    __tablename__ = "roles"

    role_id = Column(Integer, primary_key=True, autoincrement=False)
    role_name = Column(String(100), nullable=False)
    description = Column(String, nullable=False)

    # Relationship to users
    users = relationship("User", back_populates="role")
