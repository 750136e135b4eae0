from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from ..database import Base


class Store(Base):
    __tablename__ = "stores"

    id         = Column(Integer, primary_key=True)
    name       = Column(String(200), nullable=False)
    slug       = Column(String(200), unique=True)    # URL key for the single-store dashboard
    location   = Column(String(200))
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, onupdate=func.now())

    sales = relationship("Sale", back_populates="store")


class Category(Base):
    __tablename__ = "categories"

    id         = Column(Integer, primary_key=True)
    name       = Column(String(200), nullable=False)
    slug       = Column(String(200), unique=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    products = relationship("Product", back_populates="category")
    sales    = relationship("Sale",    back_populates="category")
