# app/api/routers/notifications.py
from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import get_notification_service, get_translator, require_user
from app.domain.schemas import BuyerIdentity, NotificationOut
from app.i18n import Translator
from app.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=List[NotificationOut])
def list_notifications(
    user: BuyerIdentity = Depends(require_user),
    svc: NotificationService = Depends(get_notification_service),
    t: Translator = Depends(get_translator),
):
    return svc.list_for_user(user.uid, t)


@router.delete("/")
def dismiss_notifications(
    user: BuyerIdentity = Depends(require_user),
    svc: NotificationService = Depends(get_notification_service),
):
    return {"removed": svc.dismiss_for_user(user.uid)}
