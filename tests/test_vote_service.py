"""Tests for VoteService: only open bets take votes; accepted votes are announced."""

import pytest
from unittest.mock import MagicMock

from sarradabet.errors import BadRequestError, ConflictError, NotFoundError
from sarradabet.services.events import WAGER_ACCEPTED
from sarradabet.services.votes import VoteService


def _odd(odd_id=10, bet_id=1, status="open", value=2.5):
    odd = MagicMock()
    odd.id = odd_id
    odd.bet_id = bet_id
    odd.value = value
    odd.bet.status = status
    return odd


def _service(odd=None):
    repo = MagicMock()
    repo.find_odd.return_value = odd
    vote = MagicMock()
    vote.id = 77
    repo.create_for_odd.return_value = vote
    events = MagicMock()
    return VoteService(repo, events=events), repo, events


def test_vote_on_open_bet():
    service, repo, events = _service(_odd())
    vote = service.create(10)

    assert vote.id == 77
    repo.create_for_odd.assert_called_once_with(10)
    subject, envelope = events.publish_quietly.call_args.args
    assert subject == WAGER_ACCEPTED
    payload = envelope["payload"]
    assert payload["wagerId"] == "77"
    assert payload["betId"] == "1"
    assert payload["oddId"] == "10"
    assert payload["potentialPayout"] == pytest.approx(25.0)


@pytest.mark.parametrize("status", ["closed", "resolved"])
def test_vote_on_closed_or_resolved_bet_rejected(status):
    service, repo, events = _service(_odd(status=status))
    with pytest.raises(ConflictError):
        service.create(10)
    repo.create_for_odd.assert_not_called()
    events.publish_quietly.assert_not_called()


def test_vote_on_unknown_odd():
    service, repo, _ = _service(None)
    with pytest.raises(NotFoundError) as exc:
        service.create(404)
    assert exc.value.message == "Odd with id 404 not found"
    repo.create_for_odd.assert_not_called()


def test_vote_invalid_odd_id():
    service, repo, _ = _service(_odd())
    with pytest.raises(BadRequestError):
        service.create(0)
    repo.find_odd.assert_not_called()


def test_find_all_forwards_filters():
    service, repo, _ = _service()
    service.find_all(odd_id=3, bet_id=None)
    params = repo.find_filtered.call_args.args[0]
    assert params.page == 1 and params.limit == 10
    assert repo.find_filtered.call_args.kwargs == {"odd_id": 3, "bet_id": None}
