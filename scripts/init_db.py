#!/usr/bin/env python3
"""
Database initialization script
Creates all tables, optionally seeds demo markets and bootstraps the first admin
"""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Load .env file
from dotenv import load_dotenv
load_dotenv()

from sarradabet.models import Base, engine, SessionLocal
from sarradabet.repositories import AdminRepository, BetRepository, CategoryRepository
from sarradabet.schemas import AdminCreate
from sarradabet.services.admins import AdminService
from sarradabet.errors import AppError
import logging
from sqlalchemy import text, inspect

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_MARKETS = [
    {
        "category": "Futebol",
        "title": "Quem vence o clássico?",
        "description": "Tempo regulamentar",
        "odds": [("Mandante", 2.1), ("Visitante", 3.4), ("Empate", 3.2)],
    },
    {
        "category": "Futebol",
        "title": "Mais de 2.5 gols?",
        "description": None,
        "odds": [("Sim", 1.9), ("Não", 1.95)],
    },
    {
        "category": "Reality Show",
        "title": "Quem sai no paredão?",
        "description": "Eliminação de domingo",
        "odds": [("Participante A", 1.6), ("Participante B", 2.6)],
    },
]


def init_database(drop_existing: bool = False):
    """
    Initialize database tables

    Args:
        drop_existing: If True, drops all tables first (DANGER: data loss!)
    """
    logger.info("Initializing SarradaBet database...")

    if drop_existing:
        logger.warning("Dropping all existing tables!")
        response = input("Are you sure? This will delete all data. Type 'yes' to confirm: ")
        if response.lower() != 'yes':
            logger.info("Aborted.")
            return False

        Base.metadata.drop_all(bind=engine)
        logger.info("Existing tables dropped")

    # Create all tables
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")

    # List created tables
    inspector = inspect(engine)
    tables = inspector.get_table_names()
    logger.info("Tables: %s", ", ".join(tables))

    return True


def seed_demo_data():
    """Add a few open markets for development"""
    logger.info("Seeding demo markets...")

    db = SessionLocal()

    try:
        categories = CategoryRepository(db)
        bets = BetRepository(db)
        for market in DEMO_MARKETS:
            category = categories.get_or_create(market["category"])
            bet = bets.create_with_odds(
                title=market["title"],
                description=market["description"],
                category_id=category.id,
                odds=[{"title": title, "value": value} for title, value in market["odds"]],
            )
            logger.info("  bet %d: %s", bet.id, bet.title)

        logger.info("Demo data seeded")

    except Exception as e:
        logger.error("Error seeding data: %s", e)
        db.rollback()

    finally:
        db.close()


def create_admin(username: str, email: str, password: str):
    """Bootstrap an admin account (the API needs one to create others)"""
    db = SessionLocal()
    try:
        result = AdminService(AdminRepository(db)).create(
            AdminCreate(username=username, email=email, password=password)
        )
        logger.info("Admin %d created: %s", result.id, result.username)
        return True
    except AppError as e:
        details = (e.context or {}).get("errors") or []
        logger.error("Could not create admin: %s %s", e.message, "; ".join(details))
        return False
    finally:
        db.close()


def check_connection():
    """Test database connection"""
    try:
        db = SessionLocal()
        db.execute(text("SELECT 1"))
        db.close()
        logger.info("Database connection successful")
        return True
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        return False


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Initialize SarradaBet database")
    parser.add_argument("--drop", action="store_true", help="Drop existing tables (DANGER!)")
    parser.add_argument("--seed", action="store_true", help="Seed demo markets")
    parser.add_argument("--check", action="store_true", help="Only check connection")
    parser.add_argument("--admin-username", help="Create an admin with this username")
    parser.add_argument("--admin-email", help="Email for --admin-username")
    parser.add_argument("--admin-password", default=os.getenv("ADMIN_PASSWORD"),
                        help="Password for --admin-username (or ADMIN_PASSWORD)")

    args = parser.parse_args()

    if args.check:
        sys.exit(0 if check_connection() else 1)

    if not check_connection():
        logger.error("Cannot initialize database - connection failed")
        sys.exit(1)

    if not init_database(drop_existing=args.drop):
        sys.exit(1)

    if args.seed:
        seed_demo_data()

    if args.admin_username:
        if not (args.admin_email and args.admin_password):
            parser.error("--admin-username needs --admin-email and --admin-password")
        if not create_admin(args.admin_username, args.admin_email, args.admin_password):
            sys.exit(1)

    logger.info("Database initialization complete!")
