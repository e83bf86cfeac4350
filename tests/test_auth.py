from expense_api.config import API_PREFIX, SESSION_COOKIE


def test_missing_session_is_unauthorized(client_for):
    r = client_for().get(f"{API_PREFIX}/")
    assert r.status_code == 401
    assert r.json() == {"message": "unauthorized"}


def test_malformed_session_is_unauthorized(client_for):
    client = client_for()
    client.cookies.set(SESSION_COOKIE, "not-a-number")
    assert client.get(f"{API_PREFIX}/1").status_code == 401


def test_unknown_user_is_unauthorized(client_for, alice):
    client = client_for()
    client.cookies.set(SESSION_COOKIE, str(alice.id + 100))
    assert client.delete(f"{API_PREFIX}/1").status_code == 401


def test_auth_runs_before_body_validation(client_for):
    r = client_for().post(f"{API_PREFIX}/", json={})
    assert r.status_code == 401


def test_health_needs_no_session(client_for):
    r = client_for().get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}
