import logging

from upkeep.services import spare_part_service


def _part(client, headers, **body):
    r = client.post("/spare-parts", headers=headers, json=body)
    assert r.status_code == 201, r.text
    return r.json()["data"]


def test_crud(client, admin, machine):
    _, headers = admin
    p = _part(client, headers, MachineID=machine["MachineID"], Name="Bearing", PartNumber="P-100",
              Quantity=20, ReorderLevel=5, Location="Shelf 3")

    r = client.put(f"/spare-parts/{p['SparePartID']}", headers=headers, json={"Quantity": 12})
    assert r.json()["data"]["Quantity"] == 12
    assert r.json()["data"]["Location"] == "Shelf 3"

    r = client.get("/spare-parts", headers=headers, params={"machine_id": machine["MachineID"]})
    assert [x["PartNumber"] for x in r.json()["data"]] == ["P-100"]

    assert client.delete(f"/spare-parts/{p['SparePartID']}", headers=headers).status_code == 200
    assert client.get(f"/spare-parts/{p['SparePartID']}", headers=headers).status_code == 404


def test_duplicate_part_number(client, admin):
    _, headers = admin
    _part(client, headers, Name="Belt", PartNumber="P-200")
    r = client.post("/spare-parts", headers=headers, json={"Name": "Belt B", "PartNumber": "P-200"})
    assert r.status_code == 409
    assert r.json()["error"] == "Part number already exists"


def test_unique_violation_at_commit_is_409_and_logged(client, admin, monkeypatch, caplog):
    _, headers = admin
    _part(client, headers, Name="Belt", PartNumber="P-300")
    # ön kontrol atlanınca çakışmayı veritabanı yakalar
    monkeypatch.setattr(spare_part_service, "_check", lambda *a, **kw: None)

    with caplog.at_level(logging.WARNING, logger="upkeep.services.spare_part_service"):
        r = client.post("/spare-parts", headers=headers, json={"Name": "Belt B", "PartNumber": "P-300"})
    assert r.status_code == 409
    assert r.json()["error"] == "Part number already exists"
    assert any("bütünlük ihlali" in rec.getMessage() for rec in caplog.records)


def test_negative_quantity_rejected(client, admin):
    _, headers = admin
    r = client.post("/spare-parts", headers=headers, json={"Name": "Fuse", "PartNumber": "P-1", "Quantity": -1})
    assert r.status_code == 422
    assert r.json()["ok"] is False


def test_below_reorder_sorted_by_gap(client, admin):
    _, headers = admin
    _part(client, headers, Name="Plenty", PartNumber="A", Quantity=50, ReorderLevel=5)
    _part(client, headers, Name="At level", PartNumber="B", Quantity=3, ReorderLevel=3)
    _part(client, headers, Name="Empty", PartNumber="C", Quantity=0, ReorderLevel=10)
    _part(client, headers, Name="Low", PartNumber="D", Quantity=1, ReorderLevel=4)

    r = client.get("/spare-parts/below-reorder", headers=headers)
    body = r.json()
    assert [(x["Name"], x["Gap"]) for x in body["data"]] == [("Empty", 10), ("Low", 3), ("At level", 0)]
    assert body["meta"] == {"count": 3, "total": 3, "skip": 0, "limit": 50}

    r = client.get("/spare-parts/below-reorder", headers=headers, params={"skip": 1, "limit": 1})
    assert [x["Name"] for x in r.json()["data"]] == ["Low"]
    assert r.json()["meta"]["total"] == 3
