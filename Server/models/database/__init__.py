"""
Magazine Portal Server - Database Models Package

This package contains all SQLAlchemy database model definitions.
All models share a common declarative base for proper table relationships.
"""

# Import Base first
from models.database.base import Base

# Import all models
from models.database.role import Role
from models.database.faculty import Faculty
from models.database.user import User
from models.database.submission import (
    Submission,
    STATUS_SUBMITTED, STATUS_SELECTED, STATUS_REJECTED, SUBMISSION_STATUSES
)
from models.database.comment import Comment
from models.database.activity_log import ActivityLog
from models.database.academic_setting import AcademicSetting
from models.database.setting import Setting

# Export all models and Base
__all__ = [
    'Base',
    'Role',
    'Faculty',
    'User',
    'Submission',
    'Comment',
    'ActivityLog',
    'AcademicSetting',
    'Setting',
    'STATUS_SUBMITTED',
    'STATUS_SELECTED',
    'STATUS_REJECTED',
    'SUBMISSION_STATUSES',
]
