# tests/test_health.py
def test_liveness(client):
    assert client.get("/api/health/live").json() == {"status": "ok"}


def test_database_check(client):
    resp = client.get("/api/health/db")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_validation_errors_are_400(client):
    resp = client.get("/api/Submission/not-a-number")
    assert resp.status_code == 400
    assert resp.json()["detail"][0]["loc"] == ["path", "submission_id"]
