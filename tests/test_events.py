"""Tests for event envelopes and the best-effort gateway client."""

import pytest
import requests
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from sarradabet.services.events import (
    ANONYMOUS_USER_ID,
    BET_MARKET_CREATED,
    EventGatewayClient,
    bet_market_created_payload,
    wager_accepted_payload,
)


def _bet(**overrides):
    fields = dict(
        id=3,
        status="open",
        title="Flamengo vs Palmeiras",
        description=None,
        external_match_id=None,
        created_at=datetime(2025, 11, 12, 10, 0, 0, 123456),
        odds=[
            SimpleNamespace(id=7, title="Flamengo", value=2.5),
            SimpleNamespace(id=8, title="Palmeiras", value=2.9),
        ],
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------

def test_market_created_envelope():
    envelope = bet_market_created_payload(_bet())

    assert envelope["schemaVersion"] == "v1"
    assert envelope["source"] == "sarradabet"
    assert envelope["occurredAt"].endswith("Z")
    payload = envelope["payload"]
    assert payload["betId"] == "3"
    assert payload["createdAt"] == "2025-11-12T10:00:00Z"
    assert payload["limits"] == {"minStake": 1, "maxStake": 1000}
    assert payload["odds"] == [
        {"oddId": "7", "outcome": "Flamengo", "value": 2.5},
        {"oddId": "8", "outcome": "Palmeiras", "value": 2.9},
    ]
    assert "matchId" not in payload
    assert "description" not in payload


def test_market_created_includes_match_and_description():
    payload = bet_market_created_payload(_bet(external_match_id="m-1", description="Final"))["payload"]
    assert payload["matchId"] == "m-1"
    assert payload["description"] == "Final"


def test_event_ids_are_unique():
    assert bet_market_created_payload(_bet())["eventId"] != bet_market_created_payload(_bet())["eventId"]


def test_wager_accepted_envelope():
    payload = wager_accepted_payload(wager_id=1, bet_id=2, odd_id=3, stake=10.0, potential_payout=25.0)["payload"]
    assert payload["wagerId"] == "1"
    assert payload["userId"] == ANONYMOUS_USER_ID
    assert payload["currency"] == "BRL"
    assert payload["channel"] == "web"
    assert payload["potentialPayout"] == 25.0


# ---------------------------------------------------------------------------
# Gateway client
# ---------------------------------------------------------------------------

def test_disabled_client_sends_nothing():
    client = EventGatewayClient(endpoint=None)
    with patch("sarradabet.services.events.requests.post") as post:
        client.publish(BET_MARKET_CREATED, {"x": 1})
    post.assert_not_called()
    assert client.enabled is False


def test_publish_posts_to_subject_url():
    client = EventGatewayClient("http://gateway:8080/", api_key="k-123")
    with patch("sarradabet.services.events.requests.post") as post:
        post.return_value = MagicMock(status_code=202)
        client.publish(BET_MARKET_CREATED, {"x": 1})

    url = post.call_args.args[0]
    kwargs = post.call_args.kwargs
    assert url == "http://gateway:8080/events/betting.bet.market.created.v1"
    assert kwargs["headers"]["X-API-Key"] == "k-123"
    assert kwargs["timeout"] == EventGatewayClient.TIMEOUT_SECONDS
    assert kwargs["json"] == {"x": 1}


def test_publish_quietly_swallows_transport_errors():
    client = EventGatewayClient("http://gateway:8080")
    with patch("sarradabet.services.events.requests.post", side_effect=requests.ConnectionError("down")) as post:
        assert client.publish_quietly(BET_MARKET_CREATED, {}) is False
    # no retry
    assert post.call_count == 1


def test_publish_quietly_swallows_http_errors():
    client = EventGatewayClient("http://gateway:8080")
    response = MagicMock()
    response.raise_for_status.side_effect = requests.HTTPError("500")
    with patch("sarradabet.services.events.requests.post", return_value=response):
        assert client.publish_quietly(BET_MARKET_CREATED, {}) is False


def test_publish_quietly_reports_success():
    client = EventGatewayClient("http://gateway:8080")
    with patch("sarradabet.services.events.requests.post", return_value=MagicMock()):
        assert client.publish_quietly(BET_MARKET_CREATED, {}) is True
