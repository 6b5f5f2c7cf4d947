# backend/upkeep/routers/settings.py
from fastapi import APIRouter, Depends

from ..core.api import ok
from ..core.config import load_config
from ..core.security import require_admin
from ..schemas.config import ConfigUpdate, TestEmailIn
from ..services import config_service, email_service

router = APIRouter(tags=["settings"], dependencies=[Depends(require_admin)])


@router.get("/config")
def get_config():
    return ok(config_service.public_config(load_config()))


@router.put("/config")
def put_config(body: ConfigUpdate):
    new = config_service.update_config(body.model_dump(exclude_unset=True))
    return ok(config_service.public_config(new))


@router.post("/notifications/test")
def test_email(body: TestEmailIn):
    result = email_service.notify("default", body.to)
    return ok(result)
