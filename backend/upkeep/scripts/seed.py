# backend/upkeep/scripts/seed.py
"""Demo verisi (idempotent). Çalıştırma: python -m upkeep.scripts.seed"""
import os
from contextlib import contextmanager
from datetime import datetime, timedelta

from sqlalchemy import select

from upkeep.core.db import SessionLocal, init_db
from upkeep.core.logging import setup_logging
from upkeep.core.security import hash_password
from upkeep.domain.constants import MACHINE_HAS_PROBLEMS
from upkeep.domain.scheduling import checklist_status, next_planned_date
from upkeep.models import (
    AppUser,
    Checklist,
    ChecklistItem,
    Machine,
    MachineCategory,
    MaintenanceTicket,
    SparePart,
    Supplier,
)

# ---------- küçük yardımcılar ----------

@contextmanager
def session_scope():
    """Tek seferlik session aç/kapat (hata olursa rollback)."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_one(db, model, **by):
    """Tekil alanlara göre satır getir (yoksa None)."""
    return db.execute(select(model).filter_by(**by)).scalars().first()


def get_or_create(db, model, unique_by: dict, defaults: dict | None = None):
    """unique_by ile ara, yoksa oluştur (idempotent)."""
    inst = get_one(db, model, **unique_by)
    if inst:
        return inst, False
    inst = model(**{**unique_by, **(defaults or {})})
    db.add(inst)
    db.flush()
    return inst, True


# ---------- tohum veriler ----------

ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "admin123")

USERS = [
    {"Username": "admin", "FirstName": "System", "LastName": "Admin", "Email": "admin@maintenance-demo.com",
     "IsAdmin": True, "TicketPermissions": True},
    {"Username": "tech1", "FirstName": "Ali", "LastName": "Usta", "Email": "tech1@maintenance-demo.com",
     "IsAdmin": False, "TicketPermissions": False},
]

SUPPLIERS = [
    {"Name": "Tedarik AŞ", "PhoneNumber": "0212 000 00 00", "Email": "satis@tedarik.com"},
]

MACHINES = [
    {"SAPNumber": "SAP-1001", "SerialNumber": "SN-PRS-01", "Name": "Pres Hattı", "Location": "A-1"},
    {"SAPNumber": "SAP-1002", "SerialNumber": "SN-KSM-01", "Name": "Kesim", "Location": "B-2"},
]

PARTS = [
    {"PartNumber": "P-100", "Name": "Rulman", "Quantity": 20, "ReorderLevel": 5},
    {"PartNumber": "P-200", "Name": "Kayış", "Quantity": 2, "ReorderLevel": 3},
]


def run():
    setup_logging()
    init_db()

    with session_scope() as db:
        print(">> Seeding: AppUser / Supplier / Machine / SparePart")
        for u in USERS:
            get_or_create(db, AppUser, {"Username": u["Username"]},
                          defaults={**u, "HashedPassword": hash_password(ADMIN_PASSWORD)})
        for s in SUPPLIERS:
            get_or_create(db, Supplier, {"Name": s["Name"]}, defaults=s)

        tech = get_one(db, AppUser, Username="tech1")
        supp = get_one(db, Supplier, Name="Tedarik AŞ")
        for m in MACHINES:
            get_or_create(db, Machine, {"SAPNumber": m["SAPNumber"]},
                          defaults={**m, "UserID": tech.UserID, "SupplierID": supp.SupplierID})

        m1 = get_one(db, Machine, SAPNumber="SAP-1001")
        for p in PARTS:
            get_or_create(db, SparePart, {"PartNumber": p["PartNumber"]}, defaults={**p, "MachineID": m1.MachineID})

    with session_scope() as db:
        print(">> Seeding: MachineCategory + Checklist + MaintenanceTicket")
        m1 = get_one(db, Machine, SAPNumber="SAP-1001")
        tech = get_one(db, AppUser, Username="tech1")
        cat, _ = get_or_create(db, MachineCategory, {"MachineID": m1.MachineID, "Name": "Hidrolik"})

        now = datetime.now()
        if not get_one(db, Checklist, Title="Aylık yağlama", MachineID=m1.MachineID):
            last = now - timedelta(days=40)
            nxt = next_planned_date("monthly", last)
            cl = Checklist(
                MachineID=m1.MachineID, Title="Aylık yağlama", IntervalType="monthly",
                CreatedAt=now, UpdatedAt=now, LastPerformedDate=last, NextPlannedDate=nxt,
                Status_s=checklist_status(nxt, now),
            )
            cl.items = [ChecklistItem(Description="Yağ seviyesini kontrol et"),
                        ChecklistItem(Description="Filtreyi temizle")]
            db.add(cl)

        if not get_one(db, MaintenanceTicket, Title="Yağ sızıntısı"):
            db.add(MaintenanceTicket(
                MachineID=m1.MachineID, UserID=tech.UserID, Title="Yağ sızıntısı",
                Description="Pres altında yağ birikintisi", ScheduledDate=now + timedelta(days=2),
                CreatedAt=now, UpdatedAt=now, Critical=False, CategoryID=cat.CategoryID,
            ))
            m1.Status_s = MACHINE_HAS_PROBLEMS

    print("Seed tamam.")


if __name__ == "__main__":
    run()
