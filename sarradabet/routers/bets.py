"""Bet endpoints: CRUD, filtered listing, close and resolve."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sarradabet.core.pagination import PageParams
from sarradabet.models import get_db
from sarradabet.repositories.bets import BetRepository
from sarradabet.responses import page_params, success_response
from sarradabet.schemas import BetCreate, BetResponse, BetUpdate, ResolveBetRequest
from sarradabet.services.bets import BetService
from sarradabet.services.events import get_event_gateway

router = APIRouter(prefix="/bets", tags=["bets"])


def get_bet_service(db: Session = Depends(get_db)) -> BetService:
    return BetService(BetRepository(db), events=get_event_gateway())


def _bet(bet) -> dict:
    return BetResponse.model_validate(bet).dump()


def _split_statuses(status: Optional[List[str]]) -> Optional[List[str]]:
    """Accept both ``?status=open&status=closed`` and ``?status=open,closed``."""
    if not status:
        return None
    return [s.strip() for value in status for s in value.split(",") if s.strip()]


@router.get("")
def list_bets(
    params: PageParams = Depends(page_params),
    status: Optional[List[str]] = Query(None),
    category_id: Optional[int] = Query(None, alias="categoryId", gt=0),
    search: Optional[str] = Query(None, max_length=100),
    service: BetService = Depends(get_bet_service),
):
    page = service.find_all(
        params, status=_split_statuses(status), category_id=category_id, search=search
    )
    return success_response(
        [_bet(b) for b in page.items],
        message="Bets retrieved successfully",
        meta=page.meta,
    )


@router.post("")
def create_bet(body: BetCreate, service: BetService = Depends(get_bet_service)):
    bet = service.create(body)
    return success_response({"bet": _bet(bet)}, message="Bet created successfully", status_code=201)


@router.get("/status/{status}")
def list_bets_by_status(status: str, service: BetService = Depends(get_bet_service)):
    bets = service.find_by_status(status)
    return success_response(
        [_bet(b) for b in bets],
        message=f"Bets with status '{status}' retrieved successfully",
    )


@router.get("/category/{category_id}")
def list_bets_by_category(category_id: int, service: BetService = Depends(get_bet_service)):
    bets = service.find_by_category(category_id)
    return success_response(
        [_bet(b) for b in bets],
        message="Bets by category retrieved successfully",
    )


@router.get("/{bet_id}")
def get_bet(bet_id: int, service: BetService = Depends(get_bet_service)):
    bet = service.find_by_id(bet_id)
    return success_response({"bet": _bet(bet)}, message="Bet retrieved successfully")


@router.put("/{bet_id}")
def update_bet(bet_id: int, body: BetUpdate, service: BetService = Depends(get_bet_service)):
    bet = service.update(bet_id, body)
    return success_response({"bet": _bet(bet)}, message="Bet updated successfully")


@router.delete("/{bet_id}")
def delete_bet(bet_id: int, service: BetService = Depends(get_bet_service)):
    service.delete(bet_id)
    return success_response(None, message="Bet deleted successfully")


@router.patch("/{bet_id}/close")
def close_bet(bet_id: int, service: BetService = Depends(get_bet_service)):
    bet = service.close(bet_id)
    return success_response({"bet": _bet(bet)}, message="Bet closed successfully")


@router.patch("/{bet_id}/resolve")
def resolve_bet(
    bet_id: int,
    body: ResolveBetRequest,
    service: BetService = Depends(get_bet_service),
):
    bet = service.resolve(bet_id, body.winning_odd_id)
    return success_response({"bet": _bet(bet)}, message="Bet resolved successfully")
