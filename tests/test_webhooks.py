"""
Tests for the signed call lifecycle webhook.
"""
import json
import time
from unittest.mock import patch

import pytest

import order_bot.config as config_mod
from order_bot.models import Call, CallStatus, Customer, Order, OrderItem
from order_bot.services.calls import call_status_for_disconnect

from conftest import RESTAURANT_PHONE, TEST_RETELL_API_KEY, sign_retell_payload, tool_call

CALLER = "+15551234567"


def started(call_id="call_1", to_number=RESTAURANT_PHONE, from_number=CALLER):
    return {
        "event": "call_started",
        "data": {"call_id": call_id, "to_number": to_number, "from_number": from_number, "agent_id": "agent_tonys"},
    }


def ended(call_id="call_1", transcript_with_tool_calls=None, reason="user_hangup"):
    return {
        "event": "call_ended",
        "data": {
            "call_id": call_id,
            "disconnection_reason": reason,
            "duration_ms": 95000,
            "transcript": "Agent: Thanks for calling Tony's!\nUser: I'd like two cheese pizzas.",
            "transcript_with_tool_calls": transcript_with_tool_calls or [],
            "recording_url": "https://recordings.example.com/call_1.wav",
        },
    }


def pizza_transcript():
    return [
        {"role": "agent", "content": "Thanks for calling Tony's!"},
        tool_call("set_order_type", order_type="delivery"),
        tool_call("add_to_order", item_name="Cheese Pizza", quantity=2),
        tool_call("set_delivery_address", address="1 Main St"),
        tool_call("set_customer_info", name="Sam", phone="+15551234567"),
    ]


class TestCallStatusMapping:

    @pytest.mark.parametrize("reason,expected", [
        ("voicemail_reached", CallStatus.VOICEMAIL),
        ("dial_failed", CallStatus.ERROR),
        ("call_failed", CallStatus.ERROR),
        ("error", CallStatus.ERROR),
        ("error_llm_websocket_open", CallStatus.ERROR),
        ("user_hangup", CallStatus.COMPLETED),
        ("agent_hangup", CallStatus.COMPLETED),
        (None, CallStatus.COMPLETED),
    ])
    def test_disconnect_reason_mapping(self, reason, expected):
        assert call_status_for_disconnect(reason) == expected


class TestSignatureGuard:

    def test_tampered_signature_rejected_without_writes(self, post_webhook, db_session, restaurant):
        body = json.dumps(started()).encode("utf-8")
        good = sign_retell_payload(body, TEST_RETELL_API_KEY)
        tampered = good[:-1] + ("0" if good[-1] != "0" else "1")

        resp = post_webhook(started(), signature=tampered)
        assert resp.status_code == 401
        assert db_session.query(Call).count() == 0

    def test_wrong_key_rejected(self, post_webhook, db_session, restaurant):
        body = json.dumps(started()).encode("utf-8")
        signature = sign_retell_payload(body, "some_other_key")
        assert post_webhook(started(), signature=signature).status_code == 401
        assert db_session.query(Call).count() == 0

    def test_missing_signature_rejected(self, client, restaurant):
        resp = client.post("/webhooks/retell", json=started())
        assert resp.status_code == 401

    def test_stale_signature_rejected(self, post_webhook, restaurant):
        body = json.dumps(started()).encode("utf-8")
        an_hour_ago = int(time.time() * 1000) - 60 * 60 * 1000
        signature = sign_retell_payload(body, TEST_RETELL_API_KEY, an_hour_ago)
        assert post_webhook(started(), signature=signature).status_code == 401

    def test_unconfigured_key_fails_closed(self, post_webhook, monkeypatch, restaurant):
        monkeypatch.setattr(config_mod, "RETELL_API_KEY", "")
        assert post_webhook(started(), signature="v=1,d=abc").status_code == 503

    def test_versioned_path(self, post_webhook, db_session, restaurant):
        resp = post_webhook(started(), path="/api/v1/webhooks/retell")
        assert resp.status_code == 200
        assert db_session.query(Call).count() == 1


class TestPayloadErrors:

    def test_invalid_json(self, client):
        body = b"{not json"
        signature = sign_retell_payload(body, TEST_RETELL_API_KEY)
        resp = client.post("/webhooks/retell", content=body, headers={"x-retell-signature": signature})
        assert resp.status_code == 400

    def test_event_without_call_id(self, post_webhook, restaurant):
        resp = post_webhook({"event": "call_started", "data": {"to_number": RESTAURANT_PHONE}})
        assert resp.status_code == 400

    def test_unknown_event_is_acknowledged(self, post_webhook):
        resp = post_webhook({"event": "transcript_updated", "data": {"call_id": "call_1"}})
        assert resp.status_code == 200
        assert resp.json() == {"received": True}


class TestCallStarted:

    def test_creates_call(self, post_webhook, db_session, restaurant):
        resp = post_webhook(started())
        assert resp.status_code == 200
        assert resp.json() == {"received": True}

        call = db_session.query(Call).one()
        assert call.retell_call_id == "call_1"
        assert call.restaurant_id == restaurant.id
        assert call.caller_phone == CALLER
        assert call.status == "in_progress"
        assert call.started_at is not None

    def test_unknown_dialed_number_is_a_noop(self, post_webhook, db_session, restaurant):
        resp = post_webhook(started(to_number="+15550009999"))
        assert resp.status_code == 200
        assert db_session.query(Call).count() == 0

    def test_repeat_delivery_keeps_one_row(self, post_webhook, db_session, restaurant):
        post_webhook(started())
        post_webhook(started())
        assert db_session.query(Call).count() == 1


class TestCallEnded:

    def test_end_to_end_delivery_order(self, post_webhook, db_session, restaurant):
        post_webhook(started())
        resp = post_webhook(ended(transcript_with_tool_calls=pizza_transcript()))
        assert resp.status_code == 200

        order = db_session.query(Order).one()
        assert order.order_type == "delivery"
        assert order.delivery_address == "1 Main St"
        assert order.subtotal == 20.0
        assert order.tax == 1.6
        assert order.delivery_fee == 3.0
        assert order.total == 24.6

        item = db_session.query(OrderItem).one()
        assert item.name == "Cheese Pizza"
        assert item.quantity == 2
        assert item.unit_price == 10.0
        assert item.item_total == 20.0

        customer = db_session.query(Customer).one()
        assert customer.phone == "+15551234567"
        assert customer.name == "Sam"

        call = db_session.query(Call).one()
        assert call.order_id == order.id
        assert call.customer_id == customer.id
        assert call.status == "completed"
        assert call.duration_ms == 95000
        assert call.recording_url == "https://recordings.example.com/call_1.wav"
        assert call.disconnection_reason == "user_hangup"
        assert call.ended_at is not None
        assert "two cheese pizzas" in call.transcript

    def test_duplicate_delivery_creates_one_order(self, post_webhook, db_session, restaurant):
        post_webhook(started())
        payload = ended(transcript_with_tool_calls=pizza_transcript())
        assert post_webhook(payload).status_code == 200
        assert post_webhook(payload).status_code == 200

        assert db_session.query(Order).count() == 1
        assert db_session.query(OrderItem).count() == 1

    def test_call_without_items_places_no_order(self, post_webhook, db_session, restaurant):
        post_webhook(started())
        transcript = [
            {"role": "user", "content": "What time do you close?"},
            tool_call("get_order_summary"),
        ]
        assert post_webhook(ended(transcript_with_tool_calls=transcript)).status_code == 200

        assert db_session.query(Order).count() == 0
        call = db_session.query(Call).one()
        assert call.status == "completed"
        assert call.order_id is None

    def test_voicemail_status(self, post_webhook, db_session, restaurant):
        post_webhook(started())
        post_webhook(ended(reason="voicemail_reached"))
        assert db_session.query(Call).one().status == "voicemail"

    def test_unknown_call_is_a_noop(self, post_webhook, db_session, restaurant):
        resp = post_webhook(ended(call_id="never_started", transcript_with_tool_calls=pizza_transcript()))
        assert resp.status_code == 200
        assert db_session.query(Order).count() == 0
        assert db_session.query(Call).count() == 0

    def test_persistence_failure_is_internal_error_and_retryable(self, post_webhook, db_session, restaurant):
        post_webhook(started())
        payload = ended(transcript_with_tool_calls=pizza_transcript())

        with patch("order_bot.services.order._add_order_items", side_effect=RuntimeError("db down")):
            resp = post_webhook(payload)
        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal error"}
        assert db_session.query(Order).count() == 0
        assert db_session.query(Call).one().order_id is None

        # Vendor retry succeeds
        assert post_webhook(payload).status_code == 200
        db_session.expire_all()
        assert db_session.query(Order).count() == 1


class TestCallAnalyzed:

    def test_analysis_after_end_keeps_terminal_fields(self, post_webhook, db_session, restaurant):
        post_webhook(started())
        post_webhook(ended(transcript_with_tool_calls=pizza_transcript()))
        analysis = {"call_summary": "Ordered two pizzas", "user_sentiment": "Positive"}
        assert post_webhook({"event": "call_analyzed", "data": {"call_id": "call_1", "call_analysis": analysis}}).status_code == 200

        call = db_session.query(Call).one()
        assert call.call_analysis == analysis
        assert call.status == "completed"
        assert call.order_id is not None
        assert call.duration_ms == 95000

    def test_analysis_before_end_is_not_clobbered(self, post_webhook, db_session, restaurant):
        post_webhook(started())
        analysis = {"call_summary": "Ordered two pizzas"}
        post_webhook({"event": "call_analyzed", "data": {"call_id": "call_1", "call_analysis": analysis}})
        post_webhook(ended(transcript_with_tool_calls=pizza_transcript()))

        call = db_session.query(Call).one()
        assert call.call_analysis == analysis
        assert call.order_id is not None

    def test_unknown_call_is_a_noop(self, post_webhook, db_session):
        resp = post_webhook({"event": "call_analyzed", "data": {"call_id": "nope", "call_analysis": {}}})
        assert resp.status_code == 200
        assert db_session.query(Call).count() == 0
