"""
Settings, exercise catalog and the API-key protected JSON endpoints.
"""

from liftlog.models.user import get_user_by_id

from conftest import PASSWORD, log_in, make_user


def test_health(client):
    assert client.get("/api/health").get_json() == {"status": "ok"}


def test_history_requires_api_key(client):
    resp = client.get("/api/history")
    assert resp.status_code == 401
    assert resp.get_json() == {"message": "Missing or invalid API key"}

    resp = client.get("/api/history", headers={"X-API-Key": "made-up"})
    assert resp.status_code == 401


def test_history_with_api_key(app, logged_in, exercises):
    logged_in.post(
        "/dashboard/workout",
        json={"name": "Leg Day", "sets": [{"exerciseId": exercises["Squat"], "weight": 100, "reps": 5}]},
    )
    key = logged_in.post("/dashboard/settings/apikey").get_json()["apikey"]

    anonymous = app.test_client()
    resp = anonymous.get("/api/history?limit=5", headers={"X-API-Key": key})
    assert resp.status_code == 200
    workouts = resp.get_json()["workouts"]
    assert [w["name"] for w in workouts] == ["Leg Day"]

    stats = anonymous.get("/api/stats", headers={"X-API-Key": key}).get_json()["stats"]
    assert stats[0]["volumes"] == [500.0]

    # a new key replaces the old one
    logged_in.post("/dashboard/settings/apikey")
    assert anonymous.get("/api/history", headers={"X-API-Key": key}).status_code == 401


def test_exercise_catalog(logged_in, exercises):
    names = [e["name"] for e in logged_in.get("/dashboard/exercises").get_json()["exercises"]]
    assert names == sorted(exercises)

    resp = logged_in.post("/dashboard/exercises", json={"name": "Pull Up"})
    assert resp.status_code == 201
    assert resp.get_json()["exercise"]["name"] == "Pull Up"

    assert logged_in.post("/dashboard/exercises", json={"name": "Pull Up"}).status_code == 400
    assert logged_in.post("/dashboard/exercises", json={}).status_code == 400


def test_update_settings(app, client, user):
    log_in(client, user)
    assert client.get("/dashboard/settings").status_code == 200

    resp = client.put("/dashboard/settings", json={"username": "renamed", "password": "newpass1"})
    assert resp.status_code == 200

    with app.app_context():
        assert get_user_by_id(user["id"]).username == "renamed"

    client.delete("/logout")
    resp = client.post("/login", data={"email": user["email"], "password": PASSWORD})
    assert resp.headers["Location"].endswith("/login")
    resp = client.post("/login", data={"email": user["email"], "password": "newpass1"})
    assert resp.headers["Location"].endswith("/dashboard")


def test_update_settings_errors(app, logged_in):
    make_user(app, email="taken@example.com", username="taken")

    resp = logged_in.put("/dashboard/settings", json={"email": "taken@example.com"})
    assert resp.status_code == 400
    assert resp.get_json()["errors"] == [{"field": "email", "error": "email already in use"}]

    resp = logged_in.put("/dashboard/settings", json={"password": "x"})
    assert resp.status_code == 400
    assert resp.get_json()["errors"][0]["field"] == "password"


def test_non_text_fields_are_validation_errors(logged_in):
    resp = logged_in.put("/dashboard/settings", json={"username": 5})
    assert resp.status_code == 400
    assert resp.get_json()["errors"][0]["field"] == "username"

    assert logged_in.post("/dashboard/exercises", json=["Row"]).status_code == 400
    assert logged_in.post("/dashboard/exercises", json={"name": 5}).status_code == 400
