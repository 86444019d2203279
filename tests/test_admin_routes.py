# tests/test_admin_routes.py
import uuid
from datetime import timedelta
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from boosterhub.auth import create_access_token
from boosterhub.main import create_app

from tests.conftest import ZELLE_URL

NEW_ZELLE_URL = (
    "https://enroll.zellepay.com/qr-codes?data="
    "eyJuYW1lIjoiQ2Fmw6kgQm9vc3RlcnMiLCJhY3Rpb24iOiJwYXltZW50IiwidG9rZW4iOiJhQGIuY28ifQ=="
)


def _settings_url(club_id, suffix=""):
    return f"/api/admin/payment-settings/club/{club_id}{suffix}"


class FakeStorage:
    def __init__(self):
        self.paths = []

    async def upload_bytes(self, path, content, content_type):
        self.paths.append(path)
        return f"https://cdn.example.org/booster-assets/{path}"


# -----------------------------------------------------------------------------
# Authentication
# -----------------------------------------------------------------------------
@pytest.mark.parametrize("method,path", [
    ("get", "/api/admin/payment-status"),
    ("get", f"/api/admin/payment-settings/club/{uuid.uuid4()}"),
    ("put", f"/api/admin/payment-settings/club/{uuid.uuid4()}"),
    ("post", "/api/admin/payment-links/decode"),
])
def test_admin_requires_token(client, method, path):
    resp = getattr(client, method)(path)
    assert resp.status_code == 401


def test_admin_rejects_bad_tokens(client, settings):
    wrong_role = create_access_token({"sub": "someone", "role": "viewer"}, settings)
    expired = create_access_token({"sub": "admin", "role": "admin"}, settings, expires_delta=timedelta(minutes=-5))

    for token in ("garbage", wrong_role, expired):
        resp = client.get("/api/admin/payment-status", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401


def test_admin_responses_are_not_cached(client, admin_headers):
    resp = client.get("/api/admin/payment-status", headers=admin_headers)
    assert resp.headers["cache-control"].startswith("no-cache")
    assert resp.headers["pragma"] == "no-cache"


# -----------------------------------------------------------------------------
# Payment status
# -----------------------------------------------------------------------------
def test_payment_status(client, admin_headers):
    resp = client.get("/api/admin/payment-status", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {
        "totalClubs": 4,
        "clubsWithZelle": 3,
        "clubsWithStripe": 1,
        "paymentEnabled": 2,
    }


# -----------------------------------------------------------------------------
# Payment settings
# -----------------------------------------------------------------------------
def test_get_payment_settings(client, clubs, admin_headers):
    resp = client.get(_settings_url(clubs["band"]["id"]), headers=admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["zelle_url"] == ZELLE_URL
    assert body["zelle_recipient"] == {
        "name": "EHS BAND BOOSTERS",
        "action": "payment",
        "token": "ehsbandboosterstreasurer@outlook.com",
    }
    assert body["qr_code_settings"]["errorCorrectionLevel"] == "M"
    assert body["qr_code_settings"]["width"] == 640


def test_get_payment_settings_unknown_club(client, admin_headers):
    resp = client.get(_settings_url(uuid.uuid4()), headers=admin_headers)
    assert resp.status_code == 404


def test_put_updates_and_stamps(client, clubs, admin_headers):
    club_id = clubs["band"]["id"]
    before = client.get(_settings_url(club_id), headers=admin_headers).json()

    resp = client.put(_settings_url(club_id), json={"zelle_url": NEW_ZELLE_URL}, headers=admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["zelle_url"] == NEW_ZELLE_URL
    assert body["last_payment_update_by"] == "admin"
    assert body["last_payment_update_at"] > before["last_payment_update_at"]

    public = client.get("/api/booster-clubs", params={"id": str(club_id)}).json()
    assert public["zelle_url"] == NEW_ZELLE_URL


def test_put_enable_without_method_is_400(client, clubs, admin_headers):
    resp = client.put(
        _settings_url(clubs["choir"]["id"]),
        json={"is_payment_enabled": True, "zelle_url": "", "stripe_url": ""},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert "payment method" in resp.json()["detail"]


def test_put_accepts_legacy_stripe_urls_key(client, clubs, admin_headers):
    resp = client.put(
        _settings_url(clubs["robotics"]["id"]),
        json={"stripe_urls": "https://buy.stripe.com/legacy"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["stripe_url"] == "https://buy.stripe.com/legacy"


@pytest.mark.parametrize("body", [
    {"is_payment_enabled": "yes"},
    {"zelle_url": 42},
    {"qr_code_settings": {"width": 0}},
    {"qr_code_settings": {"width": 10**6}},
    {"qr_code_settings": {"errorCorrectionLevel": "Z"}},
    {"zelle_url": "ftp://example.org"},
])
def test_put_invalid_body_is_400(client, clubs, admin_headers, body):
    resp = client.put(_settings_url(clubs["band"]["id"]), json=body, headers=admin_headers)
    assert resp.status_code == 400


def test_put_unknown_club_is_404(client, admin_headers):
    resp = client.put(_settings_url(uuid.uuid4()), json={"zelle_url": NEW_ZELLE_URL}, headers=admin_headers)
    assert resp.status_code == 404


def test_put_qr_settings_change_rendering(client, clubs, admin_headers):
    club_id = clubs["band"]["id"]
    resp = client.put(
        _settings_url(club_id),
        json={"qr_code_settings": {"width": 300, "margin": 1, "errorCorrectionLevel": "h"}},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["qr_code_settings"]["width"] == 300

    png = client.get("/api/qr-code", params={"clubId": str(club_id)}).content
    assert Image.open(BytesIO(png)).size == (300, 300)


# -----------------------------------------------------------------------------
# Audit log
# -----------------------------------------------------------------------------
def test_audit_log_lists_changes(client, clubs, admin_headers):
    club_id = clubs["robotics"]["id"]
    for text in ("one", "two", "three"):
        resp = client.put(_settings_url(club_id), json={"payment_instructions": text}, headers=admin_headers)
        assert resp.status_code == 200

    resp = client.get(_settings_url(club_id, "/audit-log"), params={"limit": 2}, headers=admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 3
    assert body["has_more"] is True
    assert [log["changes"]["payment_instructions"]["new"] for log in body["logs"]] == ["three", "two"]
    assert all(log["changed_by"] == "admin" for log in body["logs"])
    assert all(log["action"] == "UPDATE_PAYMENT_SETTINGS" for log in body["logs"])


def test_audit_log_unknown_club(client, admin_headers):
    resp = client.get(_settings_url(uuid.uuid4(), "/audit-log"), headers=admin_headers)
    assert resp.status_code == 404


def _recorded_ip(test_client, club_id, headers):
    resp = test_client.put(
        _settings_url(club_id),
        json={"payment_instructions": "memo"},
        headers={**headers, "X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
    )
    assert resp.status_code == 200
    logs = test_client.get(_settings_url(club_id, "/audit-log"), headers=headers).json()["logs"]
    return logs[0]["ip_address"]


def test_audit_ip_ignores_forwarded_header_by_default(client, clubs, admin_headers):
    assert _recorded_ip(client, clubs["band"]["id"], admin_headers) == "testclient"


def test_audit_ip_uses_first_hop_behind_trusted_proxy(settings, clubs, admin_headers):
    app = create_app(settings.model_copy(update={"TRUST_FORWARDED_FOR": True}))
    with TestClient(app) as proxied:
        assert _recorded_ip(proxied, clubs["band"]["id"], admin_headers) == "203.0.113.7"


# -----------------------------------------------------------------------------
# QR upload
# -----------------------------------------------------------------------------
def _png_bytes(size):
    output = BytesIO()
    Image.new("RGB", size, (255, 255, 255)).save(output, format="PNG")
    return output.getvalue()


def test_upload_qr_code(client, clubs, admin_headers):
    storage = FakeStorage()
    client.app.state.storage = storage
    club_id = clubs["band"]["id"]

    resp = client.post(
        _settings_url(club_id, "/qr-code"),
        files={"qrCode": ("qr.png", _png_bytes((900, 900)), "image/png")},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == str(club_id)
    assert body["name"] == "EHS Band Boosters"
    assert body["qr_code_path"].endswith(f"club-{club_id}-qr.png")
    assert storage.paths == [f"zelle-standardized/club-{club_id}-qr.png"]

    settings = client.get(_settings_url(club_id), headers=admin_headers).json()
    assert settings["zelle_qr_code_path"] == body["qr_code_path"]


def test_upload_rejects_non_image(client, clubs, admin_headers):
    client.app.state.storage = FakeStorage()
    resp = client.post(
        _settings_url(clubs["band"]["id"], "/qr-code"),
        files={"qrCode": ("notes.txt", b"hello", "text/plain")},
        headers=admin_headers,
    )
    assert resp.status_code == 400


def test_upload_without_storage_is_500(client, clubs, admin_headers):
    resp = client.post(
        _settings_url(clubs["band"]["id"], "/qr-code"),
        files={"qrCode": ("qr.png", _png_bytes((50, 50)), "image/png")},
        headers=admin_headers,
    )
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Service is not configured"}


# -----------------------------------------------------------------------------
# Payment link tools
# -----------------------------------------------------------------------------
def test_encode_payment_link(client, admin_headers):
    resp = client.post(
        "/api/admin/payment-links/encode",
        json={"name": "EHS BAND BOOSTERS", "token": "ehsbandboosterstreasurer@outlook.com"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["url"] == ZELLE_URL


def test_decode_payment_link(client, admin_headers):
    resp = client.post("/api/admin/payment-links/decode", json={"url": ZELLE_URL}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["payload"]["name"] == "EHS BAND BOOSTERS"


def test_decode_bad_link_is_400(client, admin_headers):
    resp = client.post(
        "/api/admin/payment-links/decode",
        json={"url": "https://enroll.zellepay.com/qr-codes?data=!!!!"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Payment link data is not valid base64"}
