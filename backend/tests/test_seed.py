from upkeep.models import AppUser, Checklist, Machine, MaintenanceTicket, SparePart
from upkeep.scripts import seed


def test_seed_is_idempotent(client, db):
    seed.run()
    seed.run()

    assert db.query(AppUser).count() == 2
    assert db.query(Machine).count() == 2
    assert db.query(SparePart).count() == 2
    assert db.query(Checklist).count() == 1
    assert db.query(MaintenanceTicket).count() == 1

    press = db.query(Machine).filter_by(SAPNumber="SAP-1001").one()
    assert press.Status_s == "has problems"
    assert db.query(Checklist).one().Status_s == "late"


def test_seeded_admin_can_log_in(client):
    seed.run()
    r = client.post("/auth/login", data={"username": "admin", "password": seed.ADMIN_PASSWORD})
    assert r.status_code == 200
