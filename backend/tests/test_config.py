import json

from upkeep.core.config import config_path


def test_config_hides_password(client, admin):
    _, headers = admin
    r = client.put("/config", headers=headers, json={
        "smtpServer": "mail.factory-test.com", "smtpPort": 587, "smtpTLS": True,
        "smtpUsername": "bot", "smtpPassword": "s3cret",
    })
    assert r.status_code == 200
    data = r.json()["data"]
    assert "smtpPassword" not in data
    assert data["smtpPasswordSet"] is True
    assert data["smtpServer"] == "mail.factory-test.com"

    # boş parola kayıtlı parolayı silmez
    r = client.put("/config", headers=headers, json={"smtpPassword": "", "smtpPort": 2525})
    assert r.json()["data"]["smtpPasswordSet"] is True
    assert r.json()["data"]["smtpPort"] == 2525

    with open(config_path(), encoding="utf-8") as fh:
        stored = json.load(fh)
    assert stored["smtpPassword"] == "s3cret"
    assert stored["smtpServer"] == "mail.factory-test.com"


def test_config_is_admin_only(client, tech):
    _, headers = tech
    assert client.get("/config", headers=headers).status_code == 403


def test_test_email_endpoint(client, admin, outbox):
    _, headers = admin
    r = client.post("/notifications/test", headers=headers, json={"to": "ops@factory-test.com"})
    assert r.status_code == 200
    assert r.json()["data"] == {"sent": True}
    assert outbox[0]["Subject"] == "Maintenance Notification"


def test_upload_folder_change(client, admin, machine, tmp_path):
    _, headers = admin
    new_folder = tmp_path / "elsewhere"
    r = client.put("/config", headers=headers, json={"uploadFolderPath": str(new_folder)})
    assert r.json()["data"]["uploadFolderPath"] == str(new_folder)

    r = client.post(f"/machines/{machine['MachineID']}/documents", headers=headers,
                    files={"file": ("a.txt", b"hello", "text/plain")})
    assert r.status_code == 201
    assert (new_folder / f"{machine['MachineID']}_a.txt").read_bytes() == b"hello"
