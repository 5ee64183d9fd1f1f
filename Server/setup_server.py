#!/usr/bin/env python3
"""
Magazine Portal Server - Setup Script

This script initializes the portal server for deployment:
1. Creates the database schema (optionally dropping it first)
2. Seeds roles, faculties, academic and portal settings
3. Creates the default admin user
4. Initializes the upload directory

Configuration is read from the environment or a .env file
(DATABASE_URL, UPLOAD_ROOT).

Usage:
    python setup_server.py [--reset] [--yes]
"""

import sys
import argparse
from pathlib import Path

# Ensure we can import from the same directory
sys.path.insert(0, str(Path(__file__).parent))

from config import LoadConfig, ServerConfig
from managers.database_manager import DatabaseManager, DEFAULT_ADMIN_EMAIL
from file_storage import InitializeStorage


def print_header():
    """Print script header"""
    print("=" * 70)
    print("Magazine Portal Server - Setup Script")
    print("=" * 70)
    print()


def print_section(title):
    """Print section header"""
    print()
    print("-" * 70)
    print(f"  {title}")
    print("-" * 70)


def initialize_database(config: ServerConfig, reset: bool):
    """
    Initialize the database with schema and default data

    Args:
        config: Server configuration
        reset: Drop all tables first

    Returns:
        str or None: Admin password if created, None otherwise
    """
    print_section("Database Initialization")

    print(f"-> Database: {config.database_url}")
    if reset:
        print("-> Existing tables will be DROPPED and recreated.")
    else:
        print("  Existing database will be updated with any missing tables/settings.")
    print()

    db_manager = DatabaseManager(config.database_url)
    try:
        admin_password = db_manager.InitializeDatabase(reset=reset)

        print()
        print("[OK] Database initialization complete!")

        return admin_password

    except Exception as e:
        print(f"[ERROR] Database initialization failed: {str(e)}")
        raise
    finally:
        db_manager.Dispose()


def initialize_storage(config: ServerConfig):
    """Initialize the upload directory"""
    print_section("Upload Storage Initialization")

    storage_path = Path(config.upload_root)
    print(f"-> Initializing storage at: {storage_path.absolute()}")
    print()

    try:
        InitializeStorage(config.upload_root)
        print("[OK] Upload directory ready")

    except Exception as e:
        print(f"[ERROR] Storage initialization failed: {str(e)}")
        raise


def print_admin_credentials(password):
    """
    Print admin credentials prominently

    Args:
        password: Generated admin password
    """
    print()
    print("!" * 70)
    print("!" + " " * 68 + "!")
    print("!  IMPORTANT: SAVE THESE CREDENTIALS - PASSWORD SHOWN ONLY ONCE!  !")
    print("!" + " " * 68 + "!")
    print("!" * 70)
    print()
    print(f"  Admin Email:    {DEFAULT_ADMIN_EMAIL}")
    print(f"  Admin Password: {password}")
    print()
    print("!" * 70)
    print()
    print("  -> Use the /api/users/me/password endpoint to change the password")


def print_next_steps(config: ServerConfig):
    """Print next steps for server deployment"""
    print_section("Next Steps")

    print(f"""
1. Set JWT_SECRET in the environment or .env file so that tokens survive
   a restart.

2. Start the server:

   python server.py

   Or with uvicorn directly:

   uvicorn server:CreateApp --factory --host {config.host} --port {config.port}

3. Point the frontend at http://<host>:{config.port}/api and set FRONTEND_URL
   to the frontend origin for CORS.
""")


def main():
    """Main setup script entry point"""
    parser = argparse.ArgumentParser(description="Initialize the magazine portal database and storage")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables")
    parser.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")
    args = parser.parse_args()

    print_header()
    config = LoadConfig()

    print("This script will initialize the database, create the upload")
    print("directory and configure default settings.")
    print()

    # Confirm before proceeding
    if not args.yes:
        try:
            prompt = "DROP ALL DATA and continue? (y/N): " if args.reset else "Continue with setup? (Y/n): "
            response = input(prompt).strip().lower()
            if (args.reset and response != 'y') or (not args.reset and response == 'n'):
                print("\nSetup cancelled.")
                sys.exit(0)
        except KeyboardInterrupt:
            print("\n\nSetup cancelled.")
            sys.exit(0)

    # Initialize database
    try:
        admin_password = initialize_database(config, args.reset)
    except Exception:
        print("\n[ERROR] Setup failed during database initialization")
        sys.exit(1)

    # Initialize storage
    try:
        initialize_storage(config)
    except Exception:
        print("\n[ERROR] Setup failed during storage initialization")
        sys.exit(1)

    print()
    print("=" * 70)
    print("[OK] Magazine Portal Server Setup Complete!")
    print("=" * 70)

    # Display admin credentials if this was first-time setup
    if admin_password:
        print_admin_credentials(admin_password)
    else:
        print()
        print("  Admin account already exists - no new admin account created.")
        print()

    print_next_steps(config)


if __name__ == "__main__":
    main()
