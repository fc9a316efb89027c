# app/repos/user_repo.py
from sqlalchemy.orm import Session
from app.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_or_create(self, user_id: str, display_name: str | None, role: str) -> UserModel:
        #rejestracja idempotentna - istniejacy uzytkownik zwracany bez zmian
        existing = self.get_user(user_id)
        if existing:
            return existing

        user = UserModel(id=user_id, display_name=display_name, role=role)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
