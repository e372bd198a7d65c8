#!/usr/bin/env python
"""Database initialization script for the phone auth backend.

Creates all tables from the SQLAlchemy models. For managed databases prefer
the Alembic migrations (``flask --app wsgi db upgrade``).

Usage:
    python init_db.py
"""

import os
import sys
from sqlalchemy.exc import SQLAlchemyError
from phone_auth import create_app, db


def init_database():
    """Initialize the database by creating all tables."""
    config_name = os.getenv('FLASK_ENV', 'development')
    app = create_app(config_name)

    print(f"\n{'='*60}")
    print(f"Database Initialization for {config_name.upper()} Environment")
    print(f"{'='*60}\n")

    with app.app_context():
        try:
            print(f"Database URI: {app.config['SQLALCHEMY_DATABASE_URI']}\n")
            db.create_all()

            tables_info = [
                ("users", "Registered phone accounts"),
                ("verification_codes", "Pending one-time verification codes"),
            ]

            print("Created tables:")
            for table_name, description in tables_info:
                print(f"  - {table_name:<25} {description}")

            print("\nNext steps:")
            print("  1. Start the server: python wsgi.py")
            print("  2. Request a code: POST /api/auth/send-verification-code")
            print()
            return True

        except SQLAlchemyError as e:
            print(f"Error creating database: {type(e).__name__}: {e}\n")
            return False


if __name__ == '__main__':
    success = init_database()
    sys.exit(0 if success else 1)
