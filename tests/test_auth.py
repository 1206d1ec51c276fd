"""
Signup, login, logout and the two route guards.
"""

from liftlog.auth import Error, InvalidCredentials, Ok
from liftlog.errors import StorageError
from liftlog.models.user import User, get_user_by_id

from conftest import PASSWORD, count_rows, log_in


def _flashes(client):
    with client.session_transaction() as sess:
        return list(sess.get("_flashes", []))


def test_signup_creates_user(client, app):
    resp = client.post(
        "/signup",
        data={"email": " New@Example.com ", "password": PASSWORD, "username": "newbie"},
    )
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")
    assert count_rows(app, User, User.email == "new@example.com") == 1


def test_signup_stores_a_hash(app, user):
    with app.app_context():
        stored = get_user_by_id(user["id"])
    assert stored.password != PASSWORD
    assert stored.apikey is None


def test_duplicate_signup_is_handled(client, app, user):
    resp = client.post(
        "/signup",
        data={"email": user["email"], "password": "another1", "username": "copycat"},
    )
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/signup")
    assert count_rows(app, User) == 1
    assert _flashes(client)


def test_signup_validation(client, app):
    resp = client.post(
        "/signup", data={"email": "a@example.com", "password": "123", "username": "a"}
    )
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/signup")
    assert count_rows(app, User) == 0
    assert "at least 6" in _flashes(client)[0][1]


def test_login_success(client, user):
    resp = log_in(client, user)
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard")

    resp = client.get("/dashboard")
    assert resp.status_code == 200
    assert user["username"].encode() in resp.data


def test_login_failures_are_indistinguishable(app, user):
    wrong_password = app.test_client()
    unknown_email = app.test_client()

    resp_a = wrong_password.post("/login", data={"email": user["email"], "password": "nope-nope"})
    resp_b = unknown_email.post("/login", data={"email": "ghost@example.com", "password": "nope-nope"})

    assert resp_a.status_code == resp_b.status_code == 302
    assert resp_a.headers["Location"] == resp_b.headers["Location"]
    assert resp_a.headers["Location"].endswith("/login")
    assert _flashes(wrong_password) == _flashes(unknown_email) == [
        ("error", "Invalid email or password.")
    ]

    # still anonymous
    assert wrong_password.get("/dashboard").headers["Location"].endswith("/login")


def test_verify_results(app, user):
    with app.app_context():
        auth = app.extensions["liftlog.auth"]

        ok = auth.verify(user["email"].upper(), user["password"])
        assert isinstance(ok, Ok)
        assert ok.user.id == user["id"]

        assert isinstance(auth.verify(user["email"], "wrong-pass"), InvalidCredentials)
        assert isinstance(auth.verify("nobody@example.com", "wrong-pass"), InvalidCredentials)
        assert isinstance(auth.verify("", ""), InvalidCredentials)


def test_verify_reports_storage_failure(app, user, monkeypatch):
    def boom(email):
        raise StorageError()

    monkeypatch.setattr("liftlog.auth.get_user_by_email", boom)
    with app.app_context():
        result = app.extensions["liftlog.auth"].verify(user["email"], user["password"])
    assert isinstance(result, Error)
    assert isinstance(result.cause, StorageError)


def test_logout_then_guarded_route_redirects(logged_in):
    resp = logged_in.delete("/logout")
    assert resp.status_code == 302

    resp = logged_in.get("/dashboard")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")


def test_anonymous_only_pages(client, logged_in):
    for path in ("/login", "/signup"):
        resp = logged_in.get(path)
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/dashboard")


def test_anonymous_pages_render(client):
    assert client.get("/login").status_code == 200
    assert client.get("/signup").status_code == 200


def test_home_redirects_by_session(client, user):
    assert client.get("/").headers["Location"].endswith("/login")
    log_in(client, user)
    assert client.get("/").headers["Location"].endswith("/dashboard")


def test_guarded_routes_need_login(client):
    for path in ("/dashboard", "/dashboard/workout", "/dashboard/history", "/dashboard/stats"):
        resp = client.get(path)
        assert resp.status_code == 302, path
        assert resp.headers["Location"].endswith("/login")


def test_tampered_token_is_anonymous(client):
    client.set_cookie("access_token_cookie", "not-a-token")
    resp = client.get("/dashboard")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")


def test_verify_treats_non_text_as_failure(app, user):
    with app.app_context():
        auth = app.extensions["liftlog.auth"]
        assert isinstance(auth.verify(5, user["password"]), InvalidCredentials)
        assert isinstance(auth.verify(user["email"], 123456), InvalidCredentials)
        assert isinstance(auth.verify(None, None), InvalidCredentials)


def test_login_with_odd_json_is_a_normal_failure(app, user):
    payloads = [
        {"email": 5, "password": PASSWORD},
        {"email": user["email"], "password": 123456},
        ["a"],
    ]
    for payload in payloads:
        client = app.test_client()
        resp = client.post("/login", json=payload)
        assert resp.status_code == 302, payload
        assert resp.headers["Location"].endswith("/login")
        assert _flashes(client) == [("error", "Invalid email or password.")]


def test_signup_with_odd_json_is_rejected(client, app):
    for payload in ({"email": 5, "password": PASSWORD, "username": "x"}, ["a"]):
        resp = client.post("/signup", json=payload)
        assert resp.status_code == 302, payload
        assert resp.headers["Location"].endswith("/signup")
    assert count_rows(app, User) == 0
