# app/repos/notification_repo.py
from typing import Any, Dict, List

from app.repos.document_store import DocumentStore, DocumentRef


class NotificationRepo:
    """Powiadomienia uzytkownika: users/<user_id>/notifications"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def notifications_ref(self, user_id: str):
        return self.store.collection("users", user_id, "notifications")

    def new_notification_ref(self, user_id: str) -> DocumentRef:
        return self.notifications_ref(user_id).document()

    def latest(self, user_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        return self.store.query(
            self.notifications_ref(user_id),
            order_by="createdAt",
            descending=True,
            limit=limit,
        )

    def delete(self, user_id: str, notification_id: str) -> bool:
        return self.store.delete(self.notifications_ref(user_id).document(notification_id))
