"""
Magazine Portal Server - Faculty Endpoints
"""

from typing import List
from fastapi import APIRouter, Depends

from database import GetDatabaseManager
from managers.database_manager import DatabaseManager
from models.api import FacultyResponse
from reporting import ListFaculties


# Create router instance
router = APIRouter()


@router.get("/faculties", response_model=List[FacultyResponse], tags=["Faculties"])
async def list_faculties(db_manager: DatabaseManager = Depends(GetDatabaseManager)):
    """
    List all faculties, used by the registration form
    """
    return ListFaculties(db_manager)
