"""Gateway adapters: re-pricing and withdrawing open payments."""

import asyncio
from types import SimpleNamespace

import stripe

from app.gateways.manual import ManualGateway
from app.gateways.stripe_gateway import StripeGateway
from app.services.gateway_service import GatewayService


class TestManualGateway:
    def test_payment_carries_amount(self):
        result = asyncio.run(
            ManualGateway().create_payment(2088, "usd", "abc", "Booking ABC")
        )
        assert result.success
        assert result.transaction_id == "manual_abc"
        assert result.amount == 2088

    def test_update_keeps_transaction(self):
        result = asyncio.run(ManualGateway().update_payment("manual_abc", 1044))
        assert result.transaction_id == "manual_abc"
        assert result.amount == 1044

    def test_cancel(self):
        assert asyncio.run(ManualGateway().cancel_payment("manual_abc")).success

    def test_partial_refund(self):
        result = asyncio.run(ManualGateway().process_refund("manual_abc", 500, "Early check-out"))
        assert result.refund_id == "refund_manual_abc"
        assert result.amount == 500


class TestStripeGateway:
    def gateway(self):
        gateway = StripeGateway()
        gateway.secret_key = "sk_test_123"
        return gateway

    def test_update_modifies_intent_amount(self, monkeypatch):
        calls = []

        def modify(intent_id, **params):
            calls.append((intent_id, params))
            return SimpleNamespace(id=intent_id, amount=params["amount"], client_secret="cs_1", status="requires_payment_method")

        monkeypatch.setattr(stripe.PaymentIntent, "modify", modify)
        result = asyncio.run(self.gateway().update_payment("pi_1", 3132))
        assert calls == [("pi_1", {"amount": 3132})]
        assert result.success
        assert result.amount == 3132
        assert result.client_secret == "cs_1"

    def test_cancel_reports_status(self, monkeypatch):
        monkeypatch.setattr(
            stripe.PaymentIntent, "cancel", lambda intent_id: SimpleNamespace(id=intent_id, status="canceled")
        )
        assert asyncio.run(self.gateway().cancel_payment("pi_1")).success

    def test_stripe_error_returned_not_raised(self, monkeypatch):
        def modify(intent_id, **params):
            raise stripe.InvalidRequestError("already succeeded", param="amount")

        monkeypatch.setattr(stripe.PaymentIntent, "modify", modify)
        result = asyncio.run(self.gateway().update_payment("pi_1", 3132))
        assert not result.success
        assert "already succeeded" in result.error_message

    def test_unconfigured(self):
        gateway = StripeGateway()
        gateway.secret_key = None
        result = asyncio.run(gateway.cancel_payment("pi_1"))
        assert result.error_message == "Stripe not configured"


def test_service_routes_update_to_selected_gateway():
    service = GatewayService(default_gateway="manual")
    result = asyncio.run(service.update_payment("manual_abc", 700))
    assert result.amount == 700
