# app/api/routers/users.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import require_user
from app.data.database import get_db
from app.domain.schemas import BuyerIdentity, UserCreate, UserRead
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead)
def register_user(payload: UserCreate, db: Session = Depends(get_db)):
    """
    Rejestracja tozsamosci z dostawcy auth (id + opcjonalna nazwa).
    Ponowna rejestracja zwraca istniejacego uzytkownika.
    """
    return UserService(db).create_user(payload)


@router.get("/me", response_model=BuyerIdentity)
def whoami(user: BuyerIdentity = Depends(require_user)):
    return user


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: str, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.get_user(user_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
