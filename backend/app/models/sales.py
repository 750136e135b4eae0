from sqlalchemy import (
    Column, Integer, String, Date, DateTime,
    Numeric, ForeignKey, func, CheckConstraint, Index,
)
from sqlalchemy.orm import relationship
from ..database import Base


class Product(Base):
    __tablename__ = "products"

    id          = Column(Integer, primary_key=True)
    name        = Column(String(500), nullable=False)
    slug        = Column(String(200), unique=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"))
    created_at  = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at  = Column(DateTime, onupdate=func.now())

    category = relationship("Category", back_populates="products")
    sales    = relationship("Sale",     back_populates="product")


class Sale(Base):
    """
    Grain: one observed sale event (store, product, date).
    Store / category / product links are optional; unlinked rows still count
    towards totals and time series.
    """
    __tablename__ = "sales"

    id          = Column(Integer, primary_key=True)
    date        = Column(Date, nullable=False)
    qty         = Column(Numeric(12, 2), nullable=False, default=0)
    store_id    = Column(Integer, ForeignKey("stores.id",     ondelete="SET NULL"))
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"))
    product_id  = Column(Integer, ForeignKey("products.id",   ondelete="SET NULL"))
    created_at  = Column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("qty >= 0"),
        Index("ix_sales_date", "date"),
        Index("ix_sales_store_date", "store_id", "date"),
    )

    store    = relationship("Store",    back_populates="sales")
    category = relationship("Category", back_populates="sales")
    product  = relationship("Product",  back_populates="sales")
