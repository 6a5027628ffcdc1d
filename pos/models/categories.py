# pos/models/categories.py

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from pos.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
