"""User ORM model — marketplace account that can request agenda slots."""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from vitrii_agenda.database import Base


class User(Base):
    __tablename__ = "usuarios"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    email = Column(String(255), nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
