from datetime import datetime, timedelta

from upkeep.domain.scheduling import add_months

from conftest import make_user


def _create(client, headers, **overrides):
    body = {
        "Title": "Monthly lubrication",
        "IntervalType": "monthly",
        "items": [{"Description": "Check oil level"}, {"Description": "Clean filter"}],
    }
    body.update(overrides)
    return client.post("/checklists", headers=headers, json=body)


def test_create_without_history_is_planned(client, admin, machine):
    _, headers = admin
    r = _create(client, headers, MachineID=machine["MachineID"])
    assert r.status_code == 201, r.text
    data = r.json()["data"]
    assert data["Status_s"] == "planned"
    assert data["NextPlannedDate"] is None
    assert [i["Description"] for i in data["items"]] == ["Check oil level", "Clean filter"]


def test_create_with_old_completion_is_late(client, admin, machine):
    _, headers = admin
    last = datetime(2024, 1, 31, 8, 0)
    r = _create(client, headers, MachineID=machine["MachineID"], LastCompletedDate=last.isoformat())
    data = r.json()["data"]
    assert data["NextPlannedDate"] == "2024-02-29T08:00:00"
    assert data["Status_s"] == "late"

    r = client.get("/checklists", headers=headers, params={"status": "late"})
    assert r.json()["meta"]["count"] == 1


def test_custom_interval_requires_days(client, admin, machine):
    _, headers = admin
    r = _create(client, headers, MachineID=machine["MachineID"], IntervalType="custom")
    assert r.status_code == 422

    r = _create(client, headers, MachineID=machine["MachineID"], IntervalType="custom",
                CustomIntervalDays=10, LastCompletedDate="2024-05-01T00:00:00")
    assert r.status_code == 201
    assert r.json()["data"]["NextPlannedDate"] == "2024-05-11T00:00:00"


def test_checklist_needs_target(client, admin):
    _, headers = admin
    assert _create(client, headers).status_code == 422


def test_complete_resets_items_and_records_history(client, admin, machine):
    user, headers = admin
    mid = machine["MachineID"]
    checklist = _create(client, headers, MachineID=mid, LastCompletedDate="2024-01-01T00:00:00").json()["data"]
    first, second = checklist["items"]

    r = client.patch(f"/checklists/items/{first['ItemID']}", headers=headers, json={"Completed": True})
    assert r.json()["data"]["Completed"] is True

    before = datetime.now()
    r = client.post(f"/checklists/{checklist['ChecklistID']}/complete", headers=headers, json={"Notes": "ok"})
    assert r.status_code == 200, r.text
    completion = r.json()["data"]
    assert completion["Status_s"] == "partial"
    assert completion["MachineID"] == mid
    assert completion["UserID"] == user.UserID
    done = {i["ItemID"]: i["Completed"] for i in completion["items"]}
    assert done == {first["ItemID"]: True, second["ItemID"]: False}

    r = client.get(f"/checklists/{checklist['ChecklistID']}", headers=headers)
    data = r.json()["data"]
    assert data["Status_s"] == "planned"
    assert all(not i["Completed"] for i in data["items"])
    last = datetime.fromisoformat(data["LastPerformedDate"])
    assert last >= before - timedelta(seconds=1)
    assert datetime.fromisoformat(data["NextPlannedDate"]) == add_months(last, 1)

    r = client.get(f"/machines/{mid}/checklist-history", headers=headers)
    assert r.json()["meta"]["count"] == 1
    assert r.json()["data"][0]["Notes"] == "ok"


def test_all_items_done_is_complete(client, admin, machine):
    _, headers = admin
    checklist = _create(client, headers, MachineID=machine["MachineID"], items=[{"Description": "Only step"}]).json()["data"]
    client.patch(f"/checklists/items/{checklist['items'][0]['ItemID']}", headers=headers, json={"Completed": True})

    r = client.post(f"/checklists/{checklist['ChecklistID']}/complete", headers=headers, json={})
    assert r.json()["data"]["Status_s"] == "complete"


def test_delete_completion(client, admin, machine):
    _, headers = admin
    mid = machine["MachineID"]
    checklist = _create(client, headers, MachineID=mid).json()["data"]
    completion = client.post(f"/checklists/{checklist['ChecklistID']}/complete", headers=headers, json={}).json()["data"]

    r = client.delete(f"/checklists/completions/{completion['CompletionID']}", headers=headers)
    assert r.status_code == 200
    assert client.get(f"/machines/{mid}/checklist-history", headers=headers).json()["data"] == []


def test_update_replaces_items_and_reschedules(client, admin, machine):
    _, headers = admin
    checklist = _create(client, headers, MachineID=machine["MachineID"], LastCompletedDate="2024-03-10T00:00:00").json()["data"]

    r = client.put(f"/checklists/{checklist['ChecklistID']}", headers=headers, json={
        "IntervalType": "weekly",
        "items": [{"Description": "Grease rails"}],
    })
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["NextPlannedDate"] == "2024-03-17T00:00:00"
    assert [i["Description"] for i in data["items"]] == ["Grease rails"]


def test_group_checklist_visible_on_machines(client, admin):
    _, headers = admin
    group = client.post("/machine-groups", headers=headers, json={
        "Name": "Cell",
        "machines": [{"SAPNumber": "SAP-C1", "SerialNumber": "SN-C1", "Location": "L1"}],
    }).json()["data"]
    mid = group["machines"][0]["MachineID"]

    r = _create(client, headers, MachineGroupID=group["MachineGroupID"])
    assert r.status_code == 201

    r = client.get(f"/machines/{mid}/checklists", headers=headers)
    assert [c["Title"] for c in r.json()["data"]] == ["Monthly lubrication"]


def test_refresh_statuses(client, admin, machine):
    _, headers = admin
    _create(client, headers, MachineID=machine["MachineID"], LastCompletedDate="2020-01-01T00:00:00")
    _create(client, headers, MachineID=machine["MachineID"], Title="Fresh")

    r = client.post("/checklists/refresh-status", headers=headers)
    assert r.json()["data"] == {"checked": 2, "late": 1}


def test_notify_upcoming_mails_machine_owner(client, db, admin, outbox):
    _, headers = admin
    owner = make_user(db, "owner")
    m = client.post("/machines", headers=headers, json={
        "Name": "Drill", "Location": "Hall D", "SAPNumber": "SAP-D", "SerialNumber": "SN-D", "UserID": owner.UserID,
    }).json()["data"]
    outbox.clear()

    soon = (datetime.now() - timedelta(days=28)).replace(microsecond=0)
    _create(client, headers, MachineID=m["MachineID"], LastCompletedDate=soon.isoformat())
    _create(client, headers, MachineID=m["MachineID"], Title="Not due", IntervalType="annually",
            LastCompletedDate=datetime.now().replace(microsecond=0).isoformat())

    r = client.post("/checklists/notify", headers=headers, json={"days": 7})
    assert r.status_code == 200
    assert r.json()["data"] == {"due": 1, "sent": 1, "failed": 0}
    assert len(outbox) == 1
    assert outbox[0]["To"] == "owner@factory-test.com"
    assert outbox[0]["Subject"] == "Upcoming CheckList Notification : Monthly lubrication"


def test_deleted_group_checklist_mails_nobody(client, db, admin, outbox):
    _, headers = admin
    stranger = make_user(db, "stranger")
    client.post("/machines", headers=headers, json={
        "Name": "Lathe", "Location": "Hall E", "SAPNumber": "SAP-E", "SerialNumber": "SN-E", "UserID": stranger.UserID,
    })
    group = client.post("/machine-groups", headers=headers, json={
        "Name": "Cell",
        "machines": [{"SAPNumber": "SAP-C1", "SerialNumber": "SN-C1", "Location": "L1"}],
    }).json()["data"]

    soon = (datetime.now() - timedelta(days=28)).replace(microsecond=0)
    checklist = _create(client, headers, MachineGroupID=group["MachineGroupID"],
                        LastCompletedDate=soon.isoformat()).json()["data"]

    r = client.delete(f"/machine-groups/{group['MachineGroupID']}", headers=headers)
    assert r.status_code == 200
    r = client.get(f"/checklists/{checklist['ChecklistID']}", headers=headers)
    assert r.json()["data"]["MachineGroupID"] is None
    assert r.json()["data"]["MachineID"] is None

    r = client.post("/checklists/notify", headers=headers, json={"days": 7})
    assert r.json()["data"] == {"due": 0, "sent": 0, "failed": 0}
    assert not [m for m in outbox if m["Subject"].startswith("Upcoming CheckList Notification")]
