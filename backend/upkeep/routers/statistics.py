from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..core.api import ok
from ..core.db import get_db
from ..core.security import get_current_user
from ..services.statistics_service import ticket_statistics

router = APIRouter(prefix="/statistics", tags=["statistics"], dependencies=[Depends(get_current_user)])


@router.get("")
def statistics(
    machine_id: Optional[int] = Query(None, description="Boşsa tüm makineler"),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
):
    if date_from and date_to and date_to < date_from:
        raise HTTPException(status_code=422, detail="Invalid range: date_to must be after date_from")
    data = ticket_statistics(db, machine_id=machine_id, date_from=date_from, date_to=date_to)
    return ok(data, meta={"machine_id": machine_id})
