# backend/upkeep/services/document_service.py
"""
Makine dokümanları. Dosyalar upload klasöründe '<MachineID>_<ad>' olarak
durur; DB satırı tam yolu tutar.
"""
import logging
import os
import shutil
from typing import BinaryIO, List

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from ..core.config import upload_folder
from ..domain.files import add_machine_prefix, file_extension, has_machine_prefix, strip_machine_prefix
from ..models import Machine, MachineDocument

logger = logging.getLogger(__name__)


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except (IntegrityError, DBAPIError) as e:
        db.rollback()
        logger.exception("%s: db hatası", what)
        raise HTTPException(status_code=400, detail=f"db_error: {getattr(e, 'orig', e)}")


def _machine(db: Session, machine_id: int) -> Machine:
    m = db.get(Machine, machine_id)
    if not m:
        raise HTTPException(status_code=404, detail="Machine not found")
    return m


def list_documents(db: Session, machine_id: int) -> List[MachineDocument]:
    machine = _machine(db, machine_id)
    cond = MachineDocument.MachineID == machine_id
    if machine.MachineGroupID is not None:
        cond = or_(cond, MachineDocument.MachineGroupID == machine.MachineGroupID)
    rows = db.query(MachineDocument).filter(cond).order_by(MachineDocument.DocumentName).all()

    seen, unique = set(), []
    for r in rows:
        if r.DocumentID not in seen:
            seen.add(r.DocumentID)
            unique.append(r)
    return unique


def get_document(db: Session, document_id: int) -> MachineDocument:
    doc = db.get(MachineDocument, document_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")
    return doc


def add_document(db: Session, machine: Machine, name: str, path: str) -> MachineDocument:
    # Aynı yol tek satır: tekrar yüklenen dosya mevcut kaydı kullanır
    existing = db.query(MachineDocument).filter(MachineDocument.DocumentPath == path).first()
    if existing is not None:
        return existing
    doc = MachineDocument(
        MachineID=machine.MachineID,
        MachineGroupID=machine.MachineGroupID,
        DocumentName=name,
        DocumentType=file_extension(name) or None,
        DocumentPath=path,
    )
    db.add(doc)
    return doc


def upload_document(db: Session, machine_id: int, filename: str, stream: BinaryIO) -> MachineDocument:
    machine = _machine(db, machine_id)
    name = os.path.basename(filename or "").strip()
    if not name:
        raise HTTPException(status_code=422, detail="File name is required")

    target = os.path.join(upload_folder(), add_machine_prefix(machine_id, name))
    try:
        with open(target, "wb") as fh:
            shutil.copyfileobj(stream, fh)
    except OSError as e:
        logger.exception("dosya yazılamadı: %s", target)
        raise HTTPException(status_code=500, detail=f"file_error: {e}")

    doc = add_document(db, machine, name, target)
    _commit(db, "upload_document")
    db.refresh(doc)
    logger.info("doküman yüklendi: %s", target)
    return doc


def document_file(db: Session, document_id: int) -> MachineDocument:
    doc = get_document(db, document_id)
    if not os.path.isfile(doc.DocumentPath):
        raise HTTPException(status_code=404, detail="File not found on disk")
    return doc


def delete_document(db: Session, document_id: int) -> None:
    doc = get_document(db, document_id)
    path = doc.DocumentPath
    db.delete(doc)
    _commit(db, "delete_document")
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.warning("silinecek dosya zaten yok: %s", path)
    except OSError:
        logger.exception("dosya silinemedi: %s", path)


def sync_documents(db: Session, machine_id: int) -> dict:
    """Klasördeki '<id>_' önekli dosyalarla DB satırlarını eşitler."""
    machine = _machine(db, machine_id)
    folder = upload_folder()
    files = {
        f for f in os.listdir(folder)
        if has_machine_prefix(machine_id, f) and os.path.isfile(os.path.join(folder, f))
    }

    rows = db.query(MachineDocument).filter(MachineDocument.MachineID == machine_id).all()
    known = set()

    removed = 0
    for row in rows:
        fname = os.path.basename(row.DocumentPath)
        if fname in files:
            known.add(fname)
        else:
            db.delete(row)
            removed += 1

    added = 0
    for fname in sorted(files - set(known)):
        add_document(db, machine, strip_machine_prefix(fname), os.path.join(folder, fname))
        added += 1

    _commit(db, "sync_documents")
    logger.info("doküman senkron (MachineID=%s): +%d -%d", machine_id, added, removed)
    return {"added": added, "removed": removed}
