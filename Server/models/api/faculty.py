"""
Magazine Portal Server - Faculty API Models
"""

from typing import Optional

from models.api.camel_model import CamelModel


class FacultyResponse(CamelModel):
    faculty_id: int
    faculty_name: str
    description: Optional[str] = None
