from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from ..core.api import list_meta, ok
from ..core.db import get_db
from ..core.security import get_current_user, require_ticket_permissions
from ..schemas.machine import DocumentRead, SyncResult
from ..services import document_service

router = APIRouter(tags=["documents"], dependencies=[Depends(get_current_user)])
Guard = Depends(require_ticket_permissions)


@router.get("/machines/{machine_id}/documents")
def list_documents(machine_id: int, db: Session = Depends(get_db)):
    items = [DocumentRead.model_validate(d) for d in document_service.list_documents(db, machine_id)]
    return ok(items, meta=list_meta(items))


@router.post("/machines/{machine_id}/documents", status_code=201, dependencies=[Guard])
def upload_document(machine_id: int, file: UploadFile = File(...), db: Session = Depends(get_db)):
    doc = document_service.upload_document(db, machine_id, file.filename, file.file)
    return ok(DocumentRead.model_validate(doc), status_code=201)


@router.post("/machines/{machine_id}/documents/sync", dependencies=[Guard])
def sync_documents(machine_id: int, db: Session = Depends(get_db)):
    return ok(SyncResult(**document_service.sync_documents(db, machine_id)))


@router.get("/documents/{document_id}/download")
def download_document(document_id: int, db: Session = Depends(get_db)):
    doc = document_service.document_file(db, document_id)
    return FileResponse(doc.DocumentPath, filename=doc.DocumentName)


@router.delete("/documents/{document_id}", dependencies=[Guard])
def delete_document(document_id: int, db: Session = Depends(get_db)):
    document_service.delete_document(db, document_id)
    return ok({"deleted": document_id})
