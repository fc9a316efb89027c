from sqlalchemy.orm import Session
from app.repos.user_repo import UserRepo
from app.domain.schemas import BuyerIdentity, UserCreate, UserRead


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        user = self.repo.get_or_create(payload.id, payload.display_name, payload.role)
        return UserRead.model_validate(user)

    def get_user(self, user_id: str) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise ValueError("User not found")
        return UserRead.model_validate(user)

    def identity(self, user_id: str | None) -> BuyerIdentity | None:
        """
        Tozsamosc biezacej sesji.
        Brak naglowka albo nieznany uzytkownik -> None (checkout to odrzuci)
        """
        if not user_id:
            return None
        user = self.repo.get_user(user_id)
        if not user:
            return None
        return BuyerIdentity(uid=user.id, display_name=user.display_name)
