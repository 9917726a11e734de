"""Vote endpoints.  Votes are append-only: no update or delete route."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sarradabet.core.pagination import PageParams
from sarradabet.models import get_db
from sarradabet.repositories.votes import VoteRepository
from sarradabet.responses import page_params, success_response
from sarradabet.schemas import VoteCreate, VoteResponse
from sarradabet.services.events import get_event_gateway
from sarradabet.services.votes import VoteService

router = APIRouter(prefix="/votes", tags=["votes"])


def get_vote_service(db: Session = Depends(get_db)) -> VoteService:
    return VoteService(VoteRepository(db), events=get_event_gateway())


def _vote(vote) -> dict:
    return VoteResponse.model_validate(vote).dump()


@router.get("")
def list_votes(
    params: PageParams = Depends(page_params),
    odd_id: Optional[int] = Query(None, alias="oddId", gt=0),
    bet_id: Optional[int] = Query(None, alias="betId", gt=0),
    service: VoteService = Depends(get_vote_service),
):
    page = service.find_all(params, odd_id=odd_id, bet_id=bet_id)
    return success_response(
        [_vote(v) for v in page.items],
        message="Votes retrieved successfully",
        meta=page.meta,
    )


@router.post("")
def create_vote(body: VoteCreate, service: VoteService = Depends(get_vote_service)):
    vote = service.create(body.odd_id)
    return success_response({"vote": _vote(vote)}, message="Vote created successfully", status_code=201)


@router.get("/{vote_id}")
def get_vote(vote_id: int, service: VoteService = Depends(get_vote_service)):
    vote = service.find_by_id(vote_id)
    return success_response({"vote": _vote(vote)}, message="Vote retrieved successfully")
