"""Tests for Stripe webhook handlers."""

import json
from unittest.mock import MagicMock, patch

from django.test import Client, TestCase, override_settings

import stripe

from apps.web.payments.gateways import MockPaymentGateway
from apps.web.payments.models import PaymentStatus, PaymentTransition, TransitionSource
from apps.web.payments.services import refund_reservation_payment
from apps.web.reservations.models import DepositStatus
from apps.web.reservations.tests.factories import ReservationFactory
from savoria_schemas import GatewayRefund

from .factories import CompletedPaymentFactory, ReservationPaymentFactory


def _intent(reservation_id, status="succeeded", **extra) -> dict:
    """A PaymentIntent payload as Stripe sends it in webhook events."""
    data = {
        "id": "pi_test123",
        "object": "payment_intent",
        "amount": 2500,
        "currency": "usd",
        "status": status,
        "metadata": {"reservationId": str(reservation_id)},
    }
    data.update(extra)
    return data


@override_settings(STRIPE_WEBHOOK_SECRET="whsec_test123")
class TestStripeWebhook(TestCase):
    """Tests for the Stripe webhook endpoint."""

    def setUp(self):
        self.http_client = Client()
        self.url = "/payments/webhooks/stripe"
        self.reservation = ReservationFactory()

    def _make_webhook_request(
        self, event_type: str, data: dict, signature: str = "valid"
    ):
        """Helper to make webhook requests."""
        payload = json.dumps(
            {
                "type": event_type,
                "data": {"object": data},
            }
        )

        return self.http_client.post(
            self.url,
            data=payload,
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE=signature,
        )

    def _send(self, mock_construct, event_type: str, data: dict):
        mock_construct.return_value = {
            "type": event_type,
            "data": {"object": data},
        }
        return self._make_webhook_request(event_type, data)

    @patch("apps.web.payments.notifications.send_email")
    @patch("stripe.Webhook.construct_event")
    def test_payment_succeeded_completes_deposit(self, mock_construct, mock_send):
        """payment_intent.succeeded completes the payment and reservation."""
        payment = ReservationPaymentFactory(
            reservation=self.reservation,
            charge_authorization_id="pi_test123",
        )
        intent = _intent(
            self.reservation.pk,
            latest_charge={
                "id": "ch_1",
                "payment_method_details": {
                    "card": {"last4": "1881", "brand": "mastercard"}
                },
            },
        )

        with self.captureOnCommitCallbacks(execute=True):
            response = self._send(mock_construct, "payment_intent.succeeded", intent)

        assert response.status_code == 200

        payment.refresh_from_db()
        self.reservation.refresh_from_db()
        assert payment.status == PaymentStatus.COMPLETED
        assert payment.transaction_id == "pi_test123"
        assert payment.paid_at is not None
        assert payment.last4_digits == "1881"
        assert payment.card_brand == "MASTERCARD"
        assert self.reservation.payment_status == DepositStatus.COMPLETED
        mock_send.assert_called_once()

        transition = PaymentTransition.objects.get(payment=payment)
        assert transition.source == TransitionSource.WEBHOOK

        mock_construct.assert_called_once()
        assert mock_construct.call_args[0][1] == "valid"
        assert mock_construct.call_args[0][2] == "whsec_test123"

    @patch("apps.web.payments.notifications.send_email")
    @patch("stripe.Webhook.construct_event")
    def test_payment_succeeded_idempotent(self, mock_construct, mock_send):
        """A webhook after customer confirmation changes nothing."""
        payment = CompletedPaymentFactory(
            reservation=self.reservation,
            charge_authorization_id="pi_test123",
        )
        self.reservation.payment_status = DepositStatus.COMPLETED
        self.reservation.save()
        paid_at = payment.paid_at

        with self.captureOnCommitCallbacks(execute=True):
            response = self._send(
                mock_construct,
                "payment_intent.succeeded",
                _intent(self.reservation.pk),
            )

        assert response.status_code == 200
        payment.refresh_from_db()
        assert payment.paid_at == paid_at
        assert not PaymentTransition.objects.exists()
        mock_send.assert_not_called()

    @patch("stripe.Webhook.construct_event")
    def test_payment_failed_records_reason(self, mock_construct):
        """payment_intent.payment_failed fails the payment and reservation."""
        payment = ReservationPaymentFactory(
            reservation=self.reservation,
            charge_authorization_id="pi_test123",
        )

        response = self._send(
            mock_construct,
            "payment_intent.payment_failed",
            _intent(
                self.reservation.pk,
                status="requires_payment_method",
                last_payment_error={"message": "Card declined"},
            ),
        )

        assert response.status_code == 200

        payment.refresh_from_db()
        self.reservation.refresh_from_db()
        assert payment.status == PaymentStatus.FAILED
        assert payment.failure_reason == "Card declined"
        assert self.reservation.payment_status == DepositStatus.FAILED

    @patch("stripe.Webhook.construct_event")
    def test_failure_of_superseded_intent_ignored(self, mock_construct):
        """A failure for an older attempt leaves the current one pending."""
        payment = ReservationPaymentFactory(
            reservation=self.reservation,
            charge_authorization_id="pi_current",
        )

        response = self._send(
            mock_construct,
            "payment_intent.payment_failed",
            _intent(
                self.reservation.pk,
                status="canceled",
                last_payment_error={"message": "Card declined"},
            ),
        )

        assert response.status_code == 200
        payment.refresh_from_db()
        self.reservation.refresh_from_db()
        assert payment.status == PaymentStatus.PENDING
        assert payment.failure_reason == ""
        assert self.reservation.payment_status == DepositStatus.UNSET
        assert not PaymentTransition.objects.exists()

    @patch("apps.web.payments.notifications.send_email")
    @patch("stripe.Webhook.construct_event")
    def test_success_of_earlier_intent_then_refund(self, mock_construct, mock_send):
        """The paid attempt is recorded and is what a refund reverses."""
        payment = ReservationPaymentFactory(
            reservation=self.reservation,
            charge_authorization_id="pi_current",
        )

        response = self._send(
            mock_construct,
            "payment_intent.succeeded",
            _intent(self.reservation.pk),
        )

        assert response.status_code == 200
        payment.refresh_from_db()
        assert payment.status == PaymentStatus.COMPLETED
        assert payment.transaction_id == "pi_test123"

        gateway = MockPaymentGateway()
        gateway.create_refund = MagicMock(
            return_value=GatewayRefund(id="re_1", authorization_id="pi_test123")
        )
        refund_reservation_payment(self.reservation.pk, gateway=gateway)

        gateway.create_refund.assert_called_once_with(
            "pi_test123", metadata={"reason": "Reservation cancelled"}
        )

    @patch("stripe.Webhook.construct_event")
    def test_unknown_intent_status_acknowledged(self, mock_construct):
        payment = ReservationPaymentFactory(
            reservation=self.reservation,
            charge_authorization_id="pi_test123",
        )

        response = self._send(
            mock_construct,
            "payment_intent.succeeded",
            _intent(self.reservation.pk, status="requires_reauthorization"),
        )

        assert response.status_code == 200
        payment.refresh_from_db()
        assert payment.status == PaymentStatus.PENDING

    @patch("stripe.Webhook.construct_event")
    def test_late_failure_does_not_undo_completed(self, mock_construct):
        payment = CompletedPaymentFactory(reservation=self.reservation)

        response = self._send(
            mock_construct,
            "payment_intent.payment_failed",
            _intent(self.reservation.pk, status="requires_payment_method"),
        )

        assert response.status_code == 200
        payment.refresh_from_db()
        assert payment.status == PaymentStatus.COMPLETED

    @patch("stripe.Webhook.construct_event")
    def test_refunded_payment_untouched(self, mock_construct):
        payment = CompletedPaymentFactory(
            reservation=self.reservation,
            status=PaymentStatus.REFUNDED,
            refund_id="re_1",
        )

        response = self._send(
            mock_construct,
            "payment_intent.succeeded",
            _intent(self.reservation.pk),
        )

        assert response.status_code == 200
        payment.refresh_from_db()
        assert payment.status == PaymentStatus.REFUNDED

    @patch("stripe.Webhook.construct_event")
    def test_missing_reservation_id_in_metadata(self, mock_construct):
        """Events without a reservationId are acknowledged and ignored."""
        payment = ReservationPaymentFactory(reservation=self.reservation)
        intent = _intent(self.reservation.pk)
        intent["metadata"] = {}

        response = self._send(mock_construct, "payment_intent.succeeded", intent)

        assert response.status_code == 200
        payment.refresh_from_db()
        assert payment.status == PaymentStatus.PENDING

    @patch("stripe.Webhook.construct_event")
    def test_unknown_reservation(self, mock_construct):
        response = self._send(
            mock_construct, "payment_intent.succeeded", _intent(99999)
        )

        assert response.status_code == 200

    @patch("stripe.Webhook.construct_event")
    def test_invalid_reservation_id(self, mock_construct):
        response = self._send(
            mock_construct, "payment_intent.succeeded", _intent("abc")
        )

        assert response.status_code == 200

    @patch("stripe.Webhook.construct_event")
    def test_unhandled_event_type(self, mock_construct):
        """Unhandled event types are acknowledged."""
        payment = ReservationPaymentFactory(reservation=self.reservation)

        response = self._send(
            mock_construct,
            "customer.created",
            {"id": "cus_1", "object": "customer"},
        )

        assert response.status_code == 200
        payment.refresh_from_db()
        assert payment.status == PaymentStatus.PENDING

    @patch("stripe.Webhook.construct_event")
    def test_invalid_signature(self, mock_construct):
        """Test that invalid signatures are rejected."""
        mock_construct.side_effect = stripe.SignatureVerificationError(
            "Invalid signature", "bad_sig"
        )

        response = self._make_webhook_request(
            "payment_intent.succeeded", {}, signature="bad_sig"
        )

        assert response.status_code == 400
        assert response.content == b"Invalid signature"

    @patch("stripe.Webhook.construct_event")
    def test_invalid_payload(self, mock_construct):
        """Test that invalid payloads are rejected."""
        mock_construct.side_effect = ValueError("Invalid payload")

        response = self._make_webhook_request("payment_intent.succeeded", {})

        assert response.status_code == 400
        assert response.content == b"Invalid payload"

    def test_get_not_allowed(self):
        response = self.http_client.get(self.url)

        assert response.status_code == 405
