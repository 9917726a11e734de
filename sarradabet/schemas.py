"""
Pydantic request/response schemas for the SarradaBet API.

Using explicit schemas instead of raw dicts prevents mass-assignment
on ORM models and generates accurate OpenAPI docs.  JSON keys are
camelCase on the wire; Python attributes stay snake_case.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

BetStatusLiteral = Literal["open", "closed", "resolved"]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def dump(self) -> dict:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

class CategoryCreate(CamelModel):
    """Payload for POST /api/v1/categories."""

    title: str = Field(..., min_length=1, max_length=100)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be blank")
        return v


class CategoryUpdate(CamelModel):
    """Payload for PUT /api/v1/categories/{id}."""

    title: Optional[str] = Field(None, min_length=1, max_length=100)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("title cannot be blank")
        return v


class CategorySummary(CamelModel):
    id: int
    title: str


class CategoryResponse(CamelModel):
    id: int
    title: str
    created_at: datetime
    updated_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Bets and odds
# ---------------------------------------------------------------------------

class OddCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=100)
    # Range and realism are enforced by the bet service so the error
    # message names the rule that failed
    value: float = Field(..., gt=0, description="Decimal odds, 1.01 - 1000")


class BetCreate(CamelModel):
    """
    Payload for POST /api/v1/bets.

    Every bet is created ``open``; status changes go through the
    close/resolve endpoints.
    """

    title: str = Field(..., min_length=2, max_length=50)
    description: Optional[str] = Field(None, max_length=1000)
    odds: list[OddCreate] = Field(..., min_length=1)
    category_id: int = Field(..., gt=0, description="FK to categories.id")

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Who wins the final?",
                "description": "Regular time only",
                "categoryId": 1,
                "odds": [
                    {"title": "Home", "value": 2.0},
                    {"title": "Away", "value": 3.0},
                ],
            }
        }
    }


class BetUpdate(CamelModel):
    """Payload for PUT /api/v1/bets/{id}.  Only supplied fields change."""

    title: Optional[str] = Field(None, min_length=2, max_length=50)
    description: Optional[str] = Field(None, max_length=1000)
    odds: Optional[list[OddCreate]] = Field(None, min_length=1)
    category_id: Optional[int] = Field(None, gt=0)
    status: Optional[BetStatusLiteral] = None


class ResolveBetRequest(CamelModel):
    """Payload for PATCH /api/v1/bets/{id}/resolve."""

    winning_odd_id: int = Field(..., gt=0)


class OddResponse(CamelModel):
    id: int
    title: str
    value: float
    bet_id: int
    result: Optional[Literal["won", "lost"]] = None
    total_votes: int = 0


class BetResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    status: BetStatusLiteral
    category_id: int
    category: Optional[CategorySummary] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    external_match_id: Optional[str] = None
    market_metadata: Optional[dict[str, Any]] = Field(None, serialization_alias="metadata")
    odds: list[OddResponse] = []
    total_votes: int = 0


# ---------------------------------------------------------------------------
# Votes
# ---------------------------------------------------------------------------

class VoteCreate(CamelModel):
    """Payload for POST /api/v1/votes."""

    odd_id: int = Field(..., gt=0)


class VoteResponse(CamelModel):
    id: int
    odd_id: int
    created_at: datetime
    odd: Optional[OddResponse] = None


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

class AdminLogin(CamelModel):
    """Payload for POST /api/v1/admin/login.  ``username`` may be an email."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminCreate(CamelModel):
    username: str
    email: str
    password: str


class AdminUpdate(CamelModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class AdminResponse(CamelModel):
    id: int
    username: str
    email: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class AuthToken(CamelModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int  # seconds


class AdminWithToken(AdminResponse):
    token: AuthToken


class AdminStats(CamelModel):
    total_bets: int
    total_categories: int
    total_votes: int
    active_bets: int
