"""
Magazine Portal Server - Academic Setting Database Model

Submission and final edit deadlines for the active academic year.
Only one row is read; updates replace it.
"""

from sqlalchemy import Column, Integer, String, Date

from models.database.base import Base


class AcademicSetting(Base):
    """
    Academic_settings table - deadlines for the active academic year
    """
    __tablename__ = "academic_settings"

    setting_id = Column(Integer, primary_key=True, autoincrement=True)
    academic_year = Column(String(10), nullable=False)
    submission_deadline = Column(Date, nullable=False)
    final_edit_deadline = Column(Date, nullable=False)
