"""Tests for turning scheduled-match events into betting markets."""

import json
import time
from unittest.mock import MagicMock, patch

from sarradabet.core.odds_math import validate_odds_values
from sarradabet.models import Bet, Category
from sarradabet.services.match_sync import (
    AUTO_CATEGORY,
    MATCH_TOPIC,
    MatchEventConsumer,
    sync_scheduled_match,
)


def _event(match_id="m-100", home="Flamengo", away="Palmeiras", competition="Brasileirão"):
    payload = {"matchId": match_id}
    if home:
        payload["homeTeam"] = {"name": home}
    if away:
        payload["awayTeam"] = {"name": away}
    if competition:
        payload["competition"] = {"name": competition}
    return {"eventId": "e-1", "payload": payload}


# ---------------------------------------------------------------------------
# sync_scheduled_match
# ---------------------------------------------------------------------------

def test_new_match_creates_market(db):
    bet = sync_scheduled_match(db, _event())

    assert bet.title == "Flamengo vs Palmeiras"
    assert bet.description == "Brasileirão"
    assert bet.status == "open"
    assert bet.external_match_id == "m-100"
    assert bet.market_metadata["matchId"] == "m-100"
    assert bet.category.title == AUTO_CATEGORY
    assert [o.title for o in bet.odds] == ["Flamengo", "Palmeiras", "Draw"]
    # Opening prices must pass the same check as admin-created markets
    validate_odds_values(o.value for o in bet.odds)


def test_redelivered_match_updates_in_place(db):
    first = sync_scheduled_match(db, _event())
    second = sync_scheduled_match(db, _event(home="Fluminense", competition="Copa do Brasil"))

    assert second.id == first.id
    assert db.query(Bet).count() == 1
    assert db.query(Category).filter(Category.title == AUTO_CATEGORY).count() == 1
    assert second.title == "Fluminense vs Palmeiras"
    assert second.description == "Copa do Brasil"
    # odds are left alone on refresh
    assert len(second.odds) == 3


def test_missing_team_names_fall_back(db):
    bet = sync_scheduled_match(db, _event(home=None, away=None, competition=None))
    assert bet.title == "Home vs Away"
    assert bet.description == "Auto-generated market"


def test_event_without_match_id_skipped(db):
    assert sync_scheduled_match(db, {"payload": {"homeTeam": {"name": "X"}}}) is None
    assert sync_scheduled_match(db, {}) is None
    assert db.query(Bet).count() == 0


def test_long_titles_truncated(db):
    bet = sync_scheduled_match(db, _event(home="A" * 40, away="B" * 40))
    assert len(bet.title) == 50


# ---------------------------------------------------------------------------
# MatchEventConsumer
# ---------------------------------------------------------------------------

def test_consumer_disabled_without_brokers():
    consumer = MatchEventConsumer(brokers=None)
    with patch("sarradabet.services.match_sync.KafkaConsumer") as kafka:
        assert consumer.start() is False
    kafka.assert_not_called()
    assert consumer.running is False


def test_consumer_subscribes_to_match_topic():
    consumer = MatchEventConsumer(brokers="k1:9092, k2:9092", group_id="g")
    kafka_instance = MagicMock()
    kafka_instance.poll.side_effect = lambda **kw: time.sleep(0.01) or {}
    with patch("sarradabet.services.match_sync.KafkaConsumer", return_value=kafka_instance) as kafka:
        assert consumer.start() is True
        consumer.stop()

    assert kafka.call_args.args == (MATCH_TOPIC,)
    assert kafka.call_args.kwargs["bootstrap_servers"] == ["k1:9092", "k2:9092"]
    assert kafka.call_args.kwargs["group_id"] == "g"
    kafka_instance.close.assert_called_once()


def test_consumer_keeps_polling_after_broker_error():
    consumer = MatchEventConsumer(brokers="k1:9092")
    calls = {"n": 0}

    def _poll(**kw):
        calls["n"] += 1
        if calls["n"] == 1:
            raise RuntimeError("transient broker error")
        time.sleep(0.01)
        return {}

    kafka_instance = MagicMock()
    kafka_instance.poll.side_effect = _poll
    with patch("sarradabet.services.match_sync.KafkaConsumer", return_value=kafka_instance), \
         patch("sarradabet.services.match_sync.POLL_RETRY_SECONDS", 0.01):
        consumer.start()
        deadline = time.time() + 2
        while calls["n"] < 3 and time.time() < deadline:
            time.sleep(0.01)
        still_running = consumer.running
        consumer.stop()

    assert still_running is True
    assert calls["n"] >= 3


def test_handle_message_applies_event(db, session_factory):
    consumer = MatchEventConsumer(brokers=None, session_factory=session_factory)
    consumer.handle_message(json.dumps(_event(match_id="m-7")).encode())

    assert db.query(Bet).filter(Bet.external_match_id == "m-7").count() == 1


def test_handle_message_skips_malformed_json(db, session_factory):
    consumer = MatchEventConsumer(brokers=None, session_factory=session_factory)
    assert consumer.handle_message(b"{not json") is None
    assert consumer.handle_message(None) is None
    assert db.query(Bet).count() == 0


def test_handle_message_survives_processing_errors():
    session = MagicMock()
    consumer = MatchEventConsumer(brokers=None, session_factory=lambda: session)
    with patch("sarradabet.services.match_sync.sync_scheduled_match", side_effect=RuntimeError("boom")):
        assert consumer.handle_message(json.dumps(_event())) is None
    session.rollback.assert_called_once()
    session.close.assert_called_once()
