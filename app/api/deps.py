# app/api/deps.py
from fastapi import Depends, Header, HTTPException, Query
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.schemas import BuyerIdentity
from app.i18n import Translator
from app.repos.cart_repo import CartRepo
from app.repos.document_store import DocumentStore
from app.services.cart_service import CartSession
from app.services.notification_service import NotificationService
from app.services.product_client import ProductClient
from app.services.user_service import UserService


def get_store(db: Session = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)


def get_current_user(
    x_user_id: str | None = Header(None),
    db: Session = Depends(get_db),
) -> BuyerIdentity | None:
    return UserService(db).identity(x_user_id)


def require_user(user: BuyerIdentity | None = Depends(get_current_user)) -> BuyerIdentity:
    if user is None:
        raise HTTPException(status_code=401, detail="Brak zalogowanego uzytkownika")
    return user


def get_cart_repo() -> CartRepo:
    return CartRepo()


def get_cart_session(
    x_cart_session: str = Header(..., min_length=1),
    repo: CartRepo = Depends(get_cart_repo),
) -> CartSession:
    return CartSession(repo, x_cart_session).load()


def get_product_client() -> ProductClient:
    return ProductClient()


def get_notification_service(store: DocumentStore = Depends(get_store)) -> NotificationService:
    return NotificationService(store)


def get_translator(lang: str | None = Query(None)) -> Translator:
    return Translator(lang)
