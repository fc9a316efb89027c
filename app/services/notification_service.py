# app/services/notification_service.py
from typing import Any, Dict, List

from app.celery_worker import celery_app
from app.domain.schemas import (
    ANONYMOUS_BUYER,
    NEW_OFFER_KEY,
    NEW_ORDER_KEY,
    OFFER_STATUS_KEY,
    NotificationOut,
)
from app.i18n import Translator, crop_display_name
from app.repos.document_store import DocumentStore
from app.repos.notification_repo import NotificationRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


def _buyer_name(payload: Dict[str, Any], t: Translator) -> str:
    name = payload.get("buyerName")
    if not name or name.lower() == ANONYMOUS_BUYER:
        return t("dashboard.anonymous_buyer")
    return name


def _items_summary(payload: Dict[str, Any], t: Translator) -> str:
    items = payload.get("items")
    if not items:
        #stare powiadomienia mialy gotowy tekst
        return payload.get("itemsSummary") or ""

    parts = []
    for item in items:
        name = crop_display_name(item.get("name", ""), t)
        if item.get("isSample"):
            name = t("marketplace.sampleName", cropName=name)
        parts.append(f"{name} (x{item.get('quantity')})")
    return ", ".join(parts)


def render_notification(record: Dict[str, Any], t: Translator) -> str:
    """
    Tekst powiadomienia w jezyku translatora.
    Znane messageKey skladane z messagePayload, reszta -> stare pole message.
    """
    key = record.get("messageKey")
    payload = record.get("messagePayload")

    if key and payload:
        if key == OFFER_STATUS_KEY:
            return t(
                key,
                cropName=crop_display_name(payload.get("cropName", ""), t),
                newStatus=t(f"myOffers.status.{payload.get('status')}"),
            )

        if key == NEW_ORDER_KEY:
            return t(
                key,
                buyerName=_buyer_name(payload, t),
                itemsSummary=_items_summary(payload, t),
            )

        if key == NEW_OFFER_KEY:
            return t(
                key,
                buyerName=_buyer_name(payload, t),
                cropName=crop_display_name(payload.get("cropName", ""), t),
            )

    return record.get("message") or ""


class NotificationService:
    """
    Serwis do powiadomień.
    - odczyt/odrzucanie powiadomien uzytkownika z magazynu
    - zapowiedz nowego zamowienia przez Celery (push/email w prawdziwym systemie)
    """

    def __init__(self, store: DocumentStore | None = None):
        self.store = store

    def list_for_user(self, user_id: str, translator: Translator, limit: int = 10) -> List[NotificationOut]:
        records = NotificationRepo(self.store).latest(user_id, limit=limit)

        return [
            NotificationOut(
                id=r["id"],
                message=render_notification(r, translator),
                message_key=r.get("messageKey"),
                link=r.get("link"),
                read=bool(r.get("read")),
                created_at=r.get("createdAt"),
            )
            for r in records
        ]

    def dismiss_for_user(self, user_id: str, limit: int = 10) -> int:
        """Usuwa powiadomienia ktore uzytkownik zobaczyl (ostatnie `limit`)."""
        repo = NotificationRepo(self.store)
        seen = repo.latest(user_id, limit=limit)

        removed = sum(1 for r in seen if repo.delete(user_id, r["id"]))
        logger.info(f"Usunieto {removed} powiadomien uzytkownika {user_id}")
        return removed

    @staticmethod
    def announce_order(seller_id: str, order_id: str):
        """
        Wysyła zapowiedz nowego zamowienia do sprzedawcy.
        """
        send_new_order_task.delay(seller_id, order_id)


@celery_app.task(name="app.services.notification_service.send_new_order_task")
def send_new_order_task(seller_id: str, order_id: str):
    """
    Celery task - w prawdziwym systemie wysłałby push/SMS do rolnika.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] Seller {seller_id}: new order {order_id}")

    return {"seller_id": seller_id, "order_id": order_id, "status": "sent"}
