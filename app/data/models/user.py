from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from app.data.database import Base

class UserModel(Base):
    __tablename__ = "users"
    id = Column(String(128), primary_key=True)
    display_name = Column(String(100), nullable=True)
    role = Column(String(20), nullable=False, default="buyer")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
