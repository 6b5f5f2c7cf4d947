def test_health_ok(client):
    r = client.get("/health")

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")
    data = r.json()
    assert data["ok"] is True
    assert data["data"]["service"] == "Upkeep"


def test_db_ping(client):
    r = client.get("/db-ping")
    assert r.status_code == 200
    assert r.json()["data"] == {"db": "ok", "select1": 1}


def test_unknown_route_uses_error_envelope(client):
    r = client.get("/does-not-exist")
    assert r.status_code == 404
    assert r.json()["ok"] is False
