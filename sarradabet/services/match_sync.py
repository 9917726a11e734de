"""
Scheduled-match consumer.

Listens on ``scheduling.match.scheduled.v1`` and keeps one betting market
per scheduled match.  Markets are keyed by ``Bet.external_match_id`` so a
re-delivered or rescheduled match updates its market instead of creating
a duplicate.

Message shape (only the fields we read)::

    {
      "payload": {
        "matchId": "m-123",
        "homeTeam": {"name": "Flamengo"},
        "awayTeam": {"name": "Palmeiras"},
        "competition": {"name": "Brasileirão"}
      }
    }
"""

import json
import logging
import threading
from typing import Any, Dict, Optional, Union

from kafka import KafkaConsumer
from sqlalchemy.orm import Session

from sarradabet.config import settings
from sarradabet.core.odds_math import validate_odds_values
from sarradabet.models import Bet, SessionLocal
from sarradabet.repositories.bets import BetRepository
from sarradabet.repositories.categories import CategoryRepository

logger = logging.getLogger(__name__)

MATCH_TOPIC = "scheduling.match.scheduled.v1"
AUTO_CATEGORY = "Auto Generated"
DEFAULT_DESCRIPTION = "Auto-generated market"

# Opening prices for home / away / draw.  Overround ~4.8%.
HOME_PRICE = 2.5
AWAY_PRICE = 2.9
DRAW_PRICE = 3.3

TITLE_MAX = 50
POLL_TIMEOUT_MS = 1000
POLL_RETRY_SECONDS = 1.0


def _name(team: Any, fallback: str) -> str:
    if isinstance(team, dict) and team.get("name"):
        return str(team["name"])
    return fallback


def sync_scheduled_match(db: Session, event: Dict[str, Any]) -> Optional[Bet]:
    """
    Upsert the market for one scheduled-match event.

    Returns the created/updated bet, or None when the event carries no
    ``matchId``.
    """
    payload = event.get("payload") if isinstance(event, dict) else None
    if not isinstance(payload, dict) or not payload.get("matchId"):
        logger.warning("Match event missing matchId; skipping")
        return None

    match_id = str(payload["matchId"])
    home = _name(payload.get("homeTeam"), "Home")
    away = _name(payload.get("awayTeam"), "Away")
    title = f"{home} vs {away}"[:TITLE_MAX]
    competition = payload.get("competition")
    description = _name(competition, DEFAULT_DESCRIPTION)

    bets = BetRepository(db)
    existing = bets.find_by_external_match_id(match_id)
    if existing is not None:
        bet = bets.update_fields(
            existing, title=title, description=description, market_metadata=payload
        )
        logger.info("Match %s: market %d refreshed", match_id, bet.id)
        return bet

    odds = [
        {"title": home[:100], "value": HOME_PRICE},
        {"title": away[:100], "value": AWAY_PRICE},
        {"title": "Draw", "value": DRAW_PRICE},
    ]
    validate_odds_values(o["value"] for o in odds)

    category = CategoryRepository(db).get_or_create(AUTO_CATEGORY)
    bet = bets.create_with_odds(
        title=title,
        description=description,
        category_id=category.id,
        odds=odds,
        external_match_id=match_id,
        market_metadata=payload,
    )
    logger.info("Match %s: market %d created", match_id, bet.id)
    return bet


class MatchEventConsumer:
    """
    Kafka consumer running on a daemon thread.

    Usage:
        consumer = MatchEventConsumer.from_settings()
        consumer.start()   # no-op when KAFKA_BROKERS is unset
        ...
        consumer.stop()
    """

    def __init__(
        self,
        brokers: Optional[str],
        client_id: str = "sarradabet-api",
        group_id: str = "sarradabet-match-consumers",
        session_factory=SessionLocal,
    ):
        self.brokers = [b.strip() for b in (brokers or "").split(",") if b.strip()]
        self.client_id = client_id
        self.group_id = group_id
        self.session_factory = session_factory
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._consumer = None

    @classmethod
    def from_settings(cls) -> "MatchEventConsumer":
        return cls(
            brokers=settings.KAFKA_BROKERS,
            client_id=settings.KAFKA_CLIENT_ID,
            group_id=settings.KAFKA_CONSUMER_GROUP,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.brokers)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        if not self.enabled:
            logger.info("Kafka brokers not configured; match event consumer disabled")
            return False
        if self.running:
            return True

        self._consumer = KafkaConsumer(
            MATCH_TOPIC,
            bootstrap_servers=self.brokers,
            client_id=self.client_id,
            group_id=self.group_id,
            auto_offset_reset="latest",
        )
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="match-event-consumer", daemon=True)
        self._thread.start()
        logger.info("Match event consumer started on %s", ",".join(self.brokers))
        return True

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None
        if self._consumer is not None:
            self._consumer.close()
            self._consumer = None
        logger.info("Match event consumer stopped")

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                batches = self._consumer.poll(timeout_ms=POLL_TIMEOUT_MS)
            except Exception:
                # Broker hiccups are transient; keep the thread alive
                logger.error("Match event poll failed; retrying", exc_info=True)
                self._stop.wait(POLL_RETRY_SECONDS)
                continue
            for records in batches.values():
                for record in records:
                    self.handle_message(record.value)

    def handle_message(self, raw: Union[bytes, str, None]) -> Optional[Bet]:
        """Decode and apply one message.  Bad messages are logged and skipped."""
        if not raw:
            return None
        try:
            event = json.loads(raw)
        except (TypeError, ValueError, UnicodeDecodeError):
            logger.warning("Discarding malformed match event: %r", raw[:200])
            return None

        db = self.session_factory()
        try:
            return sync_scheduled_match(db, event)
        except Exception:
            db.rollback()
            logger.error("Failed to process match scheduled event", exc_info=True)
            return None
        finally:
            db.close()
