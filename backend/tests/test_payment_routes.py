"""
Integration tests for the /api/payment endpoints.

Uses FastAPI TestClient with the real app (minus lifespan); DB and settings
dependencies are overridden in conftest.
"""
from urllib.parse import urlparse, parse_qs

import pytest
from sqlalchemy.exc import OperationalError

from formpay.config import get_settings
from formpay.main import app
from formpay.models.payment import PaymentRecord
from formpay.services.payment_store import PaymentStore
from formpay.utils.hashing import compute_request_signature
from tests.conftest import make_payment, make_settings, callback_payload, TEST_KEY, TEST_SALT, FRONTEND_URL

SESSION_BODY = {
    "name": "Asha Verma",
    "email": "asha@example.com",
    "phone": "9876543210",
    "whatsapp": "9876543210",
    "amount": 1500,
    "formType": "course",
}


def query_of(url):
    return {k: v[0] for k, v in parse_qs(urlparse(url).query).items()}


# ---------------------------------------------------------------------------
# POST /api/payment/create-payment-session
# ---------------------------------------------------------------------------
class TestCreatePaymentSession:
    def test_returns_signed_payload(self, client, db):
        resp = client.post("/api/payment/create-payment-session", json=SESSION_BODY)

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        data = body["data"]
        assert data["amount"] == "1500.00"
        assert data["key"] == TEST_KEY
        assert data["payuUrl"] == "https://test.payu.in/_payment"
        assert data["hash"] == compute_request_signature(data, TEST_SALT)
        assert "salt" not in data
        assert "payu_url" not in data

    def test_persists_pending_record(self, client, db):
        txnid = client.post("/api/payment/create-payment-session", json=SESSION_BODY).json()["data"]["txnid"]

        record = db.query(PaymentRecord).filter_by(txnid=txnid).one()
        assert record.status == "pending"
        assert record.whatsapp == "9876543210"

    def test_production_mode_uses_live_credentials(self, client, db):
        app.dependency_overrides[get_settings] = lambda: make_settings(ENVIRONMENT="production")

        data = client.post("/api/payment/create-payment-session", json=SESSION_BODY).json()["data"]

        assert data["key"] == "live-key"
        assert data["payuUrl"] == "https://secure.payu.in/_payment"
        assert data["hash"] == compute_request_signature(data, "live-salt")

    def test_string_amount_accepted(self, client, db):
        body = dict(SESSION_BODY, amount="999.5")
        resp = client.post("/api/payment/create-payment-session", json=body)
        assert resp.status_code == 200
        assert resp.json()["data"]["amount"] == "999.50"

    def test_amount_beyond_paise_is_rounded(self, client, db):
        resp = client.post("/api/payment/create-payment-session", json=dict(SESSION_BODY, amount="1500.005"))

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["amount"] == "1500.01"
        assert data["hash"] == compute_request_signature(data, TEST_SALT)
        assert db.query(PaymentRecord).filter_by(txnid=data["txnid"]).one().amount == 1500.005

    def test_zero_amount_returns_400(self, client, db):
        resp = client.post("/api/payment/create-payment-session", json=dict(SESSION_BODY, amount=0))
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "amount"

    def test_missing_fields_return_400(self, client, db):
        resp = client.post("/api/payment/create-payment-session", json={"email": "asha@example.com"})

        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        fields = {e["field"] for e in body["errors"]}
        assert {"name", "phone", "amount", "formType"} <= fields
        assert db.query(PaymentRecord).count() == 0

    def test_bad_email_returns_400(self, client, db):
        resp = client.post("/api/payment/create-payment-session", json=dict(SESSION_BODY, email="not-an-email"))

        assert resp.status_code == 400
        errors = resp.json()["errors"]
        assert errors == [{"field": "email", "message": "Valid email is required"}]

    def test_non_numeric_amount_returns_400(self, client, db):
        resp = client.post("/api/payment/create-payment-session", json=dict(SESSION_BODY, amount="lots"))
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "amount"

    def test_blank_name_returns_400(self, client, db):
        resp = client.post("/api/payment/create-payment-session", json=dict(SESSION_BODY, name="   "))
        assert resp.status_code == 400


# ---------------------------------------------------------------------------
# POST /api/payment/success
# ---------------------------------------------------------------------------
class TestSuccessCallback:
    def test_valid_callback_redirects_and_succeeds(self, client, db):
        record = make_payment(db)

        resp = client.post("/api/payment/success", data=callback_payload(record), follow_redirects=False)

        assert resp.status_code == 303
        location = resp.headers["location"]
        assert location.startswith(FRONTEND_URL)
        assert query_of(location) == {"payment_status": "success", "txnid": record.txnid}
        db.refresh(record)
        assert record.status == "succeeded"
        assert record.payment_details["mihpayid"] == "403993715521234567"

    def test_mixed_case_success(self, client, db):
        record = make_payment(db)
        client.post("/api/payment/success", data=callback_payload(record, status="Success"), follow_redirects=False)
        db.refresh(record)
        assert record.status == "succeeded"

    def test_wrong_signature_redirects_and_fails(self, client, db):
        record = make_payment(db)
        payload = callback_payload(record)
        payload["hash"] = "0" * 128

        resp = client.post("/api/payment/success", data=payload, follow_redirects=False)

        assert resp.status_code == 303
        assert query_of(resp.headers["location"])["payment_status"] == "failed"
        db.refresh(record)
        assert record.status == "failed"
        assert record.payment_details["hash"] == "0" * 128

    def test_unknown_txnid_redirects_without_record(self, client, db):
        ghost = PaymentRecord(txnid="TXN_GHOST", name="X", email="x@example.com", phone="1", amount=5.0, form_type="f")

        resp = client.post("/api/payment/success", data=callback_payload(ghost), follow_redirects=False)

        assert resp.status_code == 303
        assert db.query(PaymentRecord).count() == 0

    def test_empty_body_redirects(self, client, db):
        resp = client.post("/api/payment/success", data={}, follow_redirects=False)
        assert resp.status_code == 303
        assert query_of(resp.headers["location"]) == {"payment_status": "failed"}

    def test_replayed_callback(self, client, db):
        record = make_payment(db)
        payload = callback_payload(record)

        first = client.post("/api/payment/success", data=payload, follow_redirects=False)
        second = client.post("/api/payment/success", data=payload, follow_redirects=False)

        assert first.status_code == second.status_code == 303
        db.refresh(record)
        assert record.status == "succeeded"


# ---------------------------------------------------------------------------
# POST /api/payment/failure
# ---------------------------------------------------------------------------
class TestFailureCallback:
    def test_gateway_form_post_redirects(self, client, db):
        record = make_payment(db)

        resp = client.post(
            "/api/payment/failure",
            data={"txnid": record.txnid, "status": "failure"},
            follow_redirects=False,
        )

        assert resp.status_code == 303
        location = resp.headers["location"]
        assert location.startswith(f"{FRONTEND_URL}/payment/failure?")
        assert query_of(location) == {"txnid": record.txnid, "status": "failure"}
        db.refresh(record)
        assert record.status == "failed"

    def test_gateway_form_post_unknown_txnid_still_redirects(self, client, db):
        resp = client.post("/api/payment/failure", data={"txnid": "TXN_NOPE"}, follow_redirects=False)
        assert resp.status_code == 303

    def test_json_post_acknowledges(self, client, db):
        record = make_payment(db)

        resp = client.post("/api/payment/failure", json={"txnid": record.txnid, "status": "failure"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["status"] == "failed"
        assert body["data"]["txnid"] == record.txnid
        assert body["data"]["paymentDetails"] == {"txnid": record.txnid, "status": "failure"}

    def test_json_post_unknown_txnid_404(self, client, db):
        resp = client.post("/api/payment/failure", json={"txnid": "TXN_NOPE"})
        assert resp.status_code == 404


# ---------------------------------------------------------------------------
# GET /api/payment/status/{txnid}, GET /api/payment/all
# ---------------------------------------------------------------------------
class TestQueries:
    def test_status_found(self, client, db):
        record = make_payment(db, amount=2500.0)

        resp = client.get(f"/api/payment/status/{record.txnid}")

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["txnid"] == record.txnid
        assert data["status"] == "pending"
        assert data["amount"] == 2500.0
        assert data["formType"] == "course"
        assert "createdAt" in data
        assert "form_type" not in data
        assert "created_at" not in data
        assert "paymentDetails" not in data

    def test_status_unknown_404(self, client, db):
        resp = client.get("/api/payment/status/TXN_NOPE")
        assert resp.status_code == 404
        assert "not found" in resp.json()["detail"].lower()

    def test_all_newest_first(self, client, db):
        make_payment(db, txnid="TXN_A")
        make_payment(db, txnid="TXN_B")
        make_payment(db, txnid="TXN_C")

        resp = client.get("/api/payment/all")

        assert resp.status_code == 200
        assert [p["txnid"] for p in resp.json()["data"]] == ["TXN_C", "TXN_B", "TXN_A"]
        first = resp.json()["data"][0]
        assert {"formType", "paymentDetails", "createdAt", "updatedAt"} <= set(first)


# ---------------------------------------------------------------------------
# POST /api/payment/test-hash
# ---------------------------------------------------------------------------
class TestHashDebugEndpoint:
    BODY = {"key": "k", "txnid": "t", "amount": "1.00", "productinfo": "p", "firstname": "f", "email": "e", "salt": "s"}

    def test_hidden_without_debug(self, client):
        assert client.post("/api/payment/test-hash", json=self.BODY).status_code == 404

    def test_available_in_debug(self, client):
        app.dependency_overrides[get_settings] = lambda: make_settings(DEBUG=True)

        resp = client.post("/api/payment/test-hash", json=self.BODY)

        assert resp.status_code == 200
        body = resp.json()
        assert body["hash_string"] == "k|t|1.00|p|f|e|||||||||||s"
        assert len(body["hash"]) == 128


# ---------------------------------------------------------------------------
# Database failures on the payment routes
# ---------------------------------------------------------------------------
def _locked(*args, **kwargs):
    raise OperationalError("UPDATE payments", {}, Exception("database is locked"))


class TestDatabaseErrors:
    @pytest.fixture
    def locked_updates(self, monkeypatch):
        monkeypatch.setattr(PaymentStore, "set_status", _locked)

    def test_success_callback_redirects_with_processing_error(self, client, db, locked_updates):
        record = make_payment(db)

        resp = client.post("/api/payment/success", data=callback_payload(record), follow_redirects=False)

        assert resp.status_code == 303
        location = resp.headers["location"]
        assert location.startswith(FRONTEND_URL)
        query = query_of(location)
        assert query["error"] == "processing_error"
        assert query["payment_status"] == "failed"
        assert query["txnid"] == record.txnid

    def test_failure_form_post_still_redirects(self, client, db, locked_updates):
        record = make_payment(db)

        resp = client.post(
            "/api/payment/failure",
            data={"txnid": record.txnid, "status": "failure"},
            follow_redirects=False,
        )

        assert resp.status_code == 303
        assert resp.headers["location"].startswith(f"{FRONTEND_URL}/payment/failure?")

    def test_failure_json_post_returns_500(self, client, db, locked_updates):
        record = make_payment(db)

        resp = client.post("/api/payment/failure", json={"txnid": record.txnid, "status": "failure"})

        assert resp.status_code == 500
        assert resp.json()["detail"] == "Error in failure callback"

    def test_create_session_returns_generic_500(self, client, db, monkeypatch):
        monkeypatch.setattr(PaymentStore, "create", _locked)

        resp = client.post("/api/payment/create-payment-session", json=SESSION_BODY)

        assert resp.status_code == 500
        assert resp.json()["detail"] == "Error creating payment"
        assert "locked" not in resp.text


# ---------------------------------------------------------------------------
# OpenAPI documents the 400 error body
# ---------------------------------------------------------------------------
class TestOpenApiErrors:
    @pytest.mark.parametrize("path", [
        "/api/payment/create-payment-session",
        "/api/brochure/submit",
        "/api/contact/submit",
        "/api/forms/",
    ])
    def test_post_routes_document_validation_error(self, client, path):
        schema = client.get("/openapi.json").json()

        bad_request = schema["paths"][path]["post"]["responses"]["400"]
        ref = bad_request["content"]["application/json"]["schema"]["$ref"]
        assert ref.endswith("/ValidationErrorResponse")
        assert "FieldError" in schema["components"]["schemas"]
