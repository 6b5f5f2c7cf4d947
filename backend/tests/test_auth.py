from upkeep.models import PasswordResetCode

from conftest import PASSWORD, login, make_user


def test_login_wrong_password(client, admin):
    r = client.post("/auth/login", data={"username": "admin", "password": "nope-nope"})
    assert r.status_code == 401
    body = r.json()
    assert body["ok"] is False
    assert body["error"] == "Invalid username or password"


def test_me_returns_current_user(client, admin):
    _, headers = admin
    r = client.get("/auth/me", headers=headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["Username"] == "admin"
    assert data["IsAdmin"] is True
    assert "HashedPassword" not in data


def test_routes_require_token(client):
    r = client.get("/machines")
    assert r.status_code == 401
    assert r.json() == {"ok": False, "error": "Authentication required"}
    assert r.headers["www-authenticate"] == "Bearer"


def test_garbage_token_rejected(client):
    r = client.get("/machines", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_user_management_is_admin_only(client, admin, tech):
    _, tech_headers = tech
    payload = {
        "Username": "newbie", "Password": "longenough", "FirstName": "New",
        "LastName": "User", "Email": "newbie@factory-test.com",
    }
    r = client.post("/users", headers=tech_headers, json=payload)
    assert r.status_code == 403
    assert r.json()["error"] == "Admin rights required"

    _, admin_headers = admin
    r = client.post("/users", headers=admin_headers, json=payload)
    assert r.status_code == 201
    assert r.json()["data"]["Email"] == "newbie@factory-test.com"

    # Kullanıcı listesi herkes için okunur
    r = client.get("/users", headers=tech_headers)
    assert r.status_code == 200
    assert r.json()["meta"]["count"] == 3


def test_duplicate_username_conflict(client, admin):
    _, headers = admin
    r = client.post("/users", headers=headers, json={
        "Username": "admin", "Password": "whatever1", "FirstName": "A",
        "LastName": "B", "Email": "other@factory-test.com",
    })
    assert r.status_code == 409
    assert r.json()["error"] == "Username or email already exists"


def test_update_with_empty_password_keeps_hash(client, admin, tech):
    tech_user, _ = tech
    _, headers = admin
    r = client.put(f"/users/{tech_user.UserID}", headers=headers, json={"FirstName": "Mehmet", "Password": ""})
    assert r.status_code == 200
    assert r.json()["data"]["FirstName"] == "Mehmet"
    # eski parola hâlâ geçerli
    login(client, "tech")


def test_password_reset_flow(client, db, outbox):
    make_user(db, "forgetful")

    r = client.post("/auth/password-reset/request", json={"email": "forgetful@factory-test.com"})
    assert r.status_code == 200
    assert r.json()["data"] == {"requested": True}
    assert len(outbox) == 1
    assert outbox[0]["Subject"] == "Maintenance App Password Reset"

    code = db.query(PasswordResetCode).order_by(PasswordResetCode.CodeID.desc()).first().Code
    assert len(code) == 6

    r = client.post("/auth/password-reset/confirm", json={
        "email": "forgetful@factory-test.com", "code": "xxxxxx", "new_password": "brand-new-1",
    })
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid or expired code"

    r = client.post("/auth/password-reset/confirm", json={
        "email": "forgetful@factory-test.com", "code": code, "new_password": "brand-new-1",
    })
    assert r.status_code == 200
    assert r.json()["data"] == {"reset": True}

    login(client, "forgetful", "brand-new-1")
    r = client.post("/auth/login", data={"username": "forgetful", "password": PASSWORD})
    assert r.status_code == 401

    # kod ikinci kez kullanılamaz
    r = client.post("/auth/password-reset/confirm", json={
        "email": "forgetful@factory-test.com", "code": code, "new_password": "another-22",
    })
    assert r.status_code == 400


def test_password_reset_code_locks_after_repeated_misses(client, db, outbox):
    make_user(db, "guesser")
    client.post("/auth/password-reset/request", json={"email": "guesser@factory-test.com"})
    code = db.query(PasswordResetCode).order_by(PasswordResetCode.CodeID.desc()).first().Code
    wrong = "000000" if code != "000000" else "111111"

    for _ in range(5):
        r = client.post("/auth/password-reset/confirm", json={
            "email": "guesser@factory-test.com", "code": wrong, "new_password": "brand-new-1",
        })
        assert r.status_code == 400

    # doğru kod da artık reddedilir
    r = client.post("/auth/password-reset/confirm", json={
        "email": "guesser@factory-test.com", "code": code, "new_password": "brand-new-1",
    })
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid or expired code"

    db.expire_all()
    stored = db.query(PasswordResetCode).order_by(PasswordResetCode.CodeID.desc()).first()
    assert stored.Used is True
    assert stored.Attempts == 5
    login(client, "guesser")


def test_password_reset_unknown_email_same_answer(client, outbox):
    r = client.post("/auth/password-reset/request", json={"email": "ghost@factory-test.com"})
    assert r.status_code == 200
    assert r.json()["data"] == {"requested": True}
    assert outbox == []
