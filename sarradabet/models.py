"""
Database models for SarradaBet
SQLAlchemy ORM with PostgreSQL
"""

from sqlalchemy import (
    create_engine,
    Column,
    Integer,
    String,
    Float,
    DateTime,
    JSON,
    Text,
    ForeignKey,
    func,
    select,
)
from sqlalchemy.orm import sessionmaker, relationship, column_property, declarative_base
from datetime import datetime

from sarradabet.config import settings

DATABASE_URL = settings.DATABASE_URL

# SQLite (local dev / tests) needs to be shareable across threads
connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(DATABASE_URL, pool_pre_ping=True, echo=False, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# Dependency for FastAPI
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Bet lifecycle values
BET_STATUS_OPEN = "open"
BET_STATUS_CLOSED = "closed"
BET_STATUS_RESOLVED = "resolved"
BET_STATUSES = (BET_STATUS_OPEN, BET_STATUS_CLOSED, BET_STATUS_RESOLVED)

ODD_RESULT_WON = "won"
ODD_RESULT_LOST = "lost"


class Category(Base):
    """Grouping for bets (e.g. "Football", "Politics")"""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), unique=True, nullable=False, index=True)

    bets = relationship("Bet", back_populates="category")

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Bet(Base):
    """A market users can vote on; owns one or more odds"""

    __tablename__ = "bets"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(50), nullable=False)
    description = Column(Text)
    status = Column(String(20), nullable=False, default=BET_STATUS_OPEN, index=True)  # open | closed | resolved
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    # Markets synchronised from the scheduling service
    external_match_id = Column(String, unique=True, index=True)
    market_metadata = Column("metadata", JSON)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    resolved_at = Column(DateTime)

    # Relationships
    category = relationship("Category", back_populates="bets")
    odds = relationship(
        "Odd", back_populates="bet", order_by="Odd.id", cascade="all, delete-orphan"
    )

    @property
    def total_votes(self) -> int:
        return sum(odd.total_votes or 0 for odd in self.odds)


class Odd(Base):
    """A wagering option on a bet with its decimal payout multiplier"""

    __tablename__ = "odds"

    id = Column(Integer, primary_key=True, index=True)
    bet_id = Column(Integer, ForeignKey("bets.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    value = Column(Float, nullable=False)  # decimal odds, 1.01 - 1000
    result = Column(String(10))  # won | lost | null while unsettled

    bet = relationship("Bet", back_populates="odds")
    votes = relationship("Vote", back_populates="odd")


class Vote(Base):
    """A single vote on an odd; never updated once written"""

    __tablename__ = "votes"

    id = Column(Integer, primary_key=True, index=True)
    odd_id = Column(Integer, ForeignKey("odds.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    odd = relationship("Odd", back_populates="votes")


# Vote count loaded with every Odd row
Odd.total_votes = column_property(
    select(func.count(Vote.id))
    .where(Vote.odd_id == Odd.id)
    .correlate_except(Vote)
    .scalar_subquery()
)


class Admin(Base):
    """Back-office user; only used for authentication"""

    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# Create all tables
def init_db():
    """Initialize database tables"""
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    init_db()
