"""Every admin API endpoint must answer 401 without a session (never redirect)."""
import pytest


PROTECTED = [
    ("GET", "/api/admin/inquiries"),
    ("GET", "/api/admin/inquiries/1"),
    ("GET", "/api/admin/stats"),
    ("PUT", "/api/admin/inquiries/1/status"),
    ("POST", "/api/admin/send-email"),
    ("POST", "/api/admin/clear-data"),
]


@pytest.mark.parametrize("method,url", PROTECTED)
def test_unauthenticated_gets_401(client, method, url):
    resp = client.open(url, method=method, json={})
    assert resp.status_code == 401, f"{method} {url} -> {resp.status_code}"
    assert resp.get_json() == {"success": False, "message": "Authentication required"}


@pytest.mark.parametrize("method,url", PROTECTED)
def test_forged_flag_without_account_rejected(client, method, url):
    with client.session_transaction() as sess:
        sess["is_admin"] = True
        sess["admin_id"] = 9999

    resp = client.open(url, method=method, json={})
    assert resp.status_code == 401
