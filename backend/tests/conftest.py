import os

# Must be set before anything imports app.config / app.database
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base
from app.models import Store, Category, Product, Sale
from app.utils.sales_source import InMemorySalesRowSource

DOWNTOWN = {"id": 1, "name": "Downtown", "slug": "downtown"}
UPTOWN = {"id": 2, "name": "Uptown", "slug": "uptown"}
EMPTY_STORE = {"id": 3, "name": "Harbour", "slug": "harbour"}

# (id, date, qty, store, category, product)
SAMPLE_SALES = [
    (1, "2023-03-10", 4,  DOWNTOWN, "Beverages", "Cola"),
    (2, "2023-12-31", 6,  UPTOWN,   "Snacks",    "Chips"),
    (3, "2024-01-05", 10, DOWNTOWN, "Beverages", "Cola"),
    (4, "2024-03-01", 3,  UPTOWN,   "Snacks",    "Chips"),
    (5, "2024-06-10", 7,  DOWNTOWN, "Snacks",    "Pretzels"),
    (6, "2024-06-12", 5,  UPTOWN,   "Beverages", "Water"),
    (7, "2024-06-12", 2,  DOWNTOWN, "Beverages", "Cola"),
    (8, "2024-06-13", 1,  None,     None,        None),
]

CATEGORY_IDS = {"Beverages": 1, "Snacks": 2}
PRODUCT_IDS = {"Cola": 1, "Chips": 2, "Pretzels": 3, "Water": 4}


def make_rows():
    rows = []
    for sale_id, day, qty, store, category, product in SAMPLE_SALES:
        rows.append({
            "id": sale_id,
            "date": day,
            "qty": qty,
            "store_id": store["id"] if store else None,
            "store_name": store["name"] if store else None,
            "store_slug": store["slug"] if store else None,
            "category_id": CATEGORY_IDS.get(category),
            "category_name": category,
            "product_id": PRODUCT_IDS.get(product),
            "product_name": product,
        })
    return rows


@pytest.fixture
def today():
    """A Wednesday; its Sunday-start week runs 2024-06-09..2024-06-15."""
    return date(2024, 6, 12)


@pytest.fixture
def source():
    return InMemorySalesRowSource(make_rows(), stores=[DOWNTOWN, UPTOWN, EMPTY_STORE])


@pytest.fixture
def client(source, today):
    from app.main import app
    from app.api.dashboard import get_row_source, get_today

    app.dependency_overrides[get_row_source] = lambda: source
    app.dependency_overrides[get_today] = lambda: today
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """SQLite session seeded with the same sales as `source`."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine)()

    for store in (DOWNTOWN, UPTOWN, EMPTY_STORE):
        session.add(Store(**store))
    for name, category_id in CATEGORY_IDS.items():
        session.add(Category(id=category_id, name=name, slug=name.lower()))
    session.flush()
    for name, product_id in PRODUCT_IDS.items():
        session.add(Product(id=product_id, name=name, slug=name.lower()))
    session.flush()
    for row in make_rows():
        session.add(Sale(
            id=row["id"],
            date=date.fromisoformat(row["date"]),
            qty=row["qty"],
            store_id=row["store_id"],
            category_id=row["category_id"],
            product_id=row["product_id"],
        ))
    session.commit()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
