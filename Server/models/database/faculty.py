"""
Magazine Portal Server - Faculty Database Model

Faculty reference data. Read-only from the submission workflow's perspective.
"""

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from models.database.base import Base


class Faculty(Base):
    """
    Faculties table - stores university faculties
    """
    __tablename__ = "faculties"

    faculty_id = Column(Integer, primary_key=True, autoincrement=True)
    faculty_name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    coordinator_id = Column(Integer, nullable=True)

    users = relationship("User", back_populates="faculty")
    submissions = relationship("Submission", back_populates="faculty")
