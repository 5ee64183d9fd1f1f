"""
Magazine Portal Server - Database Manager

This module manages database connection, initialization, and password hashing.
One DatabaseManager is created at startup, stored on the application state
and handed to each component that needs the store.
"""

import logging
import secrets
import string
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
import bcrypt

from models.database import (
    Base, Role, Faculty, User, AcademicSetting, Setting
)
from models.auth.user_role import UserRole

logger = logging.getLogger(__name__)


DEFAULT_ADMIN_EMAIL = "admin@university.edu"

DEFAULT_ROLES = {
    UserRole.ADMIN: ("Admin", "System administrator with all privileges"),
    UserRole.MANAGER: ("Marketing Manager", "University Marketing Manager who oversees the process"),
    UserRole.COORDINATOR: ("Marketing Coordinator", "Faculty Marketing Coordinator who manages the process for their Faculty"),
    UserRole.STUDENT: ("Student", "Student who can submit articles and images"),
}

DEFAULT_FACULTIES = [
    (1, "Arts & Humanities", "Faculty of Arts and Humanities"),
    (2, "Business", "Faculty of Business"),
    (3, "Education", "Faculty of Education"),
    (4, "Engineering", "Faculty of Engineering"),
    (5, "Health Sciences", "Faculty of Health Sciences"),
    (6, "Law", "Faculty of Law"),
    (7, "Science", "Faculty of Science"),
    (8, "Social Sciences", "Faculty of Social Sciences"),
]

DEFAULT_ACADEMIC_SETTING = {
    "academic_year": "2024-2025",
    "submission_deadline": date(2025, 5, 25),
    "final_edit_deadline": date(2025, 6, 23),
}

DEFAULT_SETTINGS = {
    "password_expiry": "90",  # days
    "max_login_attempts": "5",
    "session_timeout": "30",  # minutes
    "email_notifications": "true",
    "comment_notifications": "true",
    "status_change_notifications": "true",
    "deadline_reminders": "true",
}

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


class DatabaseManager:
    """
    Manages database connection, initialization, and operations
    """

    def __init__(self, database_url: str = "sqlite:///database/magazine.db"):
        """
        Initialize database manager

        Args:
            database_url: SQLAlchemy database URL
        """
        self.database_url = database_url
        url = make_url(database_url)

        connect_args = {}
        if url.get_backend_name() == "sqlite":
            # Ensure database directory exists
            if url.database and url.database != ":memory:":
                db_dir = Path(url.database).parent
                if str(db_dir) != '.':
                    db_dir.mkdir(parents=True, exist_ok=True)
            # Sessions are used from the request thread pool
            connect_args["check_same_thread"] = False

        self.engine = create_engine(database_url, echo=False, connect_args=connect_args)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False)

    def InitializeDatabase(self, reset: bool = False) -> Optional[str]:
        """
        Initialize the database with all tables and default data
        Creates tables if they don't exist, seeds roles, faculties,
        academic settings and portal settings, and creates a default admin
        user on first run. Seeding runs in one transaction.

        Args:
            reset: Drop all tables before recreating them

        Returns:
            str: Generated admin password if admin user was created, None otherwise
        """
        if reset:
            logger.warning("Dropping all tables before initialization")
            Base.metadata.drop_all(bind=self.engine)

        # Create all tables
        Base.metadata.create_all(bind=self.engine)

        # Get a session
        session = self.SessionLocal()
        admin_password = None

        try:
            self.PopulateDefaultRoles(session)
            self.PopulateDefaultFaculties(session)
            session.flush()

            existing_admin = session.query(User).filter(User.email == DEFAULT_ADMIN_EMAIL).first()
            if not existing_admin:
                admin_password = self.GenerateRandomPassword()
                admin_user = User(
                    first_name="Admin",
                    last_name="User",
                    email=DEFAULT_ADMIN_EMAIL,
                    password=self.HashPassword(admin_password),
                    faculty_id=DEFAULT_FACULTIES[0][0],
                    role_id=UserRole.ADMIN.role_id,
                    created_at=datetime.now(timezone.utc)
                )
                session.add(admin_user)
                logger.info(f"Created default admin user {DEFAULT_ADMIN_EMAIL}")

            if session.query(AcademicSetting).count() == 0:
                session.add(AcademicSetting(**DEFAULT_ACADEMIC_SETTING))
                logger.info(f"Added default academic settings for {DEFAULT_ACADEMIC_SETTING['academic_year']}")

            self.PopulateDefaultSettings(session)

            # Commit all changes
            session.commit()

        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        return admin_password

    def PopulateDefaultRoles(self, session):
        """
        Populate the four portal roles
        Only adds roles that don't already exist

        Args:
            session: SQLAlchemy session
        """
        for role, (role_name, description) in DEFAULT_ROLES.items():
            existing = session.query(Role).filter(Role.role_id == role.role_id).first()
            if not existing:
                session.add(Role(role_id=role.role_id, role_name=role_name, description=description))
                logger.info(f"Added default role: {role_name}")

    def PopulateDefaultFaculties(self, session):
        """
        Populate the default faculties
        Only adds faculties that don't already exist

        Args:
            session: SQLAlchemy session
        """
        for faculty_id, name, description in DEFAULT_FACULTIES:
            existing = session.query(Faculty).filter(Faculty.faculty_id == faculty_id).first()
            if not existing:
                session.add(Faculty(faculty_id=faculty_id, faculty_name=name, description=description))
                logger.info(f"Added default faculty: {name}")

    def PopulateDefaultSettings(self, session):
        """
        Populate default security and notification settings
        Only adds settings that don't already exist

        Args:
            session: SQLAlchemy session
        """
        for key, value in DEFAULT_SETTINGS.items():
            existing = session.query(Setting).filter(Setting.key == key).first()
            if not existing:
                session.add(Setting(key=key, value=value))
                logger.info(f"Added default setting: {key} = {value}")

    @staticmethod
    def GenerateRandomPassword(length: int = 12) -> str:
        """
        Generate a secure random password

        Args:
            length: Password length (default 12)

        Returns:
            str: Generated password
        """
        # Use a mix of uppercase, lowercase, digits, and special characters
        alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
        password = ''.join(secrets.choice(alphabet) for _ in range(length))
        return password

    @staticmethod
    def HashPassword(password: str) -> str:
        """
        Hash a password using bcrypt
        Truncates to 72 bytes to comply with bcrypt's maximum password length

        Args:
            password: Plain text password

        Returns:
            str: Hashed password (as string)
        """
        # Bcrypt has a maximum password length of 72 bytes
        password_bytes = password.encode('utf-8')[:72]

        # Generate salt and hash the password
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password_bytes, salt)

        # Return as string for database storage
        return hashed.decode('utf-8')

    @staticmethod
    def VerifyPassword(plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against a hash
        Truncates to 72 bytes to comply with bcrypt's maximum password length

        Args:
            plain_password: Plain text password to verify
            hashed_password: Stored password hash (as string)

        Returns:
            bool: True if password matches, False otherwise
        """
        password_bytes = plain_password.encode('utf-8')[:72]
        hashed_bytes = hashed_password.encode('utf-8')

        try:
            return bcrypt.checkpw(password_bytes, hashed_bytes)
        except ValueError:
            # Malformed hash
            return False

    @staticmethod
    def IsPasswordHash(stored_password: str) -> bool:
        """
        Check whether a stored password is a bcrypt hash
        Rows created before hashing was introduced hold plain text

        Args:
            stored_password: Value of the users.password column

        Returns:
            bool: True for a bcrypt hash
        """
        return (
            stored_password is not None
            and len(stored_password) == 60
            and stored_password.startswith(BCRYPT_PREFIXES)
        )

    def GetSession(self):
        """
        Get a new database session

        Returns:
            Session: SQLAlchemy session
        """
        return self.SessionLocal()

    def Dispose(self) -> None:
        """
        Release all pooled connections
        Called on server shutdown
        """
        self.engine.dispose()
        logger.info("Database connections released")
