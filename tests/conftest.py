import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENV", "test")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from pos.core.rate_limiter import limiter
from pos.database import Base, begin_write, build_engine, get_db, get_write_db
from pos.main import app
from pos.models.products import Product


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'pos_test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    def override_get_write_db():
        db = session_factory()
        try:
            begin_write(db)
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_write_db] = override_get_write_db
    limiter.enabled = False

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def make_product(session_factory):
    def _make_product(
        name: str = "Denim Jacket",
        sell_price: str = "100.00",
        cost_price: str = "60.00",
        quantity: int = 5,
        **extra,
    ) -> int:
        with session_factory() as db:
            product = Product(
                name=name,
                sell_price=Decimal(sell_price),
                cost_price=Decimal(cost_price),
                quantity=quantity,
                **extra,
            )
            db.add(product)
            db.commit()
            return product.id

    return _make_product


@pytest.fixture
def stock_of(session_factory):
    def _stock_of(product_id: int) -> int:
        with session_factory() as db:
            return db.get(Product, product_id).quantity

    return _stock_of
