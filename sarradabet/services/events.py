"""
Outbound domain events.

Events are published to an HTTP event gateway when ``EVENT_GATEWAY_URL``
is configured.  Publication is fire-and-forget: a failed POST is logged
and dropped, never retried, and never fails the request that caused it.

Envelope shape (schema version v1)::

    {
        "eventId": "<uuid4>",
        "schemaVersion": "v1",
        "occurredAt": "2025-11-12T10:00:00Z",
        "source": "sarradabet",
        "payload": {...}
    }
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

import requests

from sarradabet.config import settings

logger = logging.getLogger(__name__)

SOURCE = "sarradabet"
SCHEMA_VERSION = "v1"

BET_MARKET_CREATED = "betting.bet.market.created.v1"
WAGER_ACCEPTED = "betting.wager.accepted.v1"

ANONYMOUS_USER_ID = "00000000-0000-0000-0000-000000000000"
DEFAULT_STAKE = 10.0
MIN_STAKE = 1
MAX_STAKE = 1000


def _iso(ts: datetime) -> str:
    return ts.replace(microsecond=0).isoformat() + "Z"


def _envelope(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "eventId": str(uuid.uuid4()),
        "schemaVersion": SCHEMA_VERSION,
        "occurredAt": _iso(datetime.utcnow()),
        "source": SOURCE,
        "payload": payload,
    }


# ---------------------------------------------------------------------------
# Envelope factories
# ---------------------------------------------------------------------------

def bet_market_created_payload(bet) -> Dict[str, Any]:
    """Announce a newly opened market with its prices and stake limits."""
    payload: Dict[str, Any] = {
        "betId": str(bet.id),
        "status": bet.status,
        "marketType": "moneyline",
        "title": bet.title,
        "odds": [
            {"oddId": str(odd.id), "outcome": odd.title, "value": odd.value}
            for odd in bet.odds
        ],
        "limits": {"minStake": MIN_STAKE, "maxStake": MAX_STAKE},
        "createdAt": _iso(bet.created_at or datetime.utcnow()),
    }
    if bet.external_match_id:
        payload["matchId"] = str(bet.external_match_id)
    if bet.description:
        payload["description"] = bet.description
    return _envelope(payload)


def wager_accepted_payload(
    wager_id: Any,
    bet_id: Any,
    odd_id: Any,
    stake: float = DEFAULT_STAKE,
    potential_payout: Optional[float] = None,
    user_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Announce an accepted vote as a nominal wager (votes carry no money)."""
    return _envelope({
        "wagerId": str(wager_id),
        "betId": str(bet_id),
        "oddId": str(odd_id),
        "userId": user_id or ANONYMOUS_USER_ID,
        "stake": stake,
        "potentialPayout": potential_payout if potential_payout is not None else stake * 2,
        "currency": "BRL",
        "acceptedAt": _iso(datetime.utcnow()),
        "channel": "web",
    })


# ---------------------------------------------------------------------------
# Gateway client
# ---------------------------------------------------------------------------

class EventGatewayClient:
    """POSTs events to ``{endpoint}/events/{subject}``; no-op when disabled."""

    TIMEOUT_SECONDS = 3

    def __init__(self, endpoint: Optional[str] = None, api_key: Optional[str] = None):
        self.endpoint = endpoint.rstrip("/") if endpoint else None
        self.api_key = api_key

    @classmethod
    def from_settings(cls) -> "EventGatewayClient":
        return cls(settings.EVENT_GATEWAY_URL, settings.EVENT_GATEWAY_API_KEY)

    @property
    def enabled(self) -> bool:
        return bool(self.endpoint)

    def publish(self, subject: str, payload: Dict[str, Any]) -> None:
        """Send one event.  Raises ``requests.RequestException`` on failure."""
        if not self.enabled:
            return

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key

        resp = requests.post(
            f"{self.endpoint}/events/{subject}",
            json=payload,
            headers=headers,
            timeout=self.TIMEOUT_SECONDS,
        )
        resp.raise_for_status()

    def publish_quietly(self, subject: str, payload: Dict[str, Any]) -> bool:
        """Best-effort publish: returns False instead of raising."""
        try:
            self.publish(subject, payload)
            return True
        except requests.RequestException as exc:
            logger.warning("Event %s not delivered: %s", subject, exc)
            return False


_client: Optional[EventGatewayClient] = None


def get_event_gateway() -> EventGatewayClient:
    """Process-wide client built from settings."""
    global _client
    if _client is None:
        _client = EventGatewayClient.from_settings()
    return _client
