"""Test data builders backed by Faker."""
from datetime import date
from decimal import Decimal
from typing import Optional

from faker import Faker
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import get_password_hash
from app.models import Estimate, Product, User
from app.models.product import slugify

fake = Faker()

DEFAULT_PASSWORD = "secret-password"


async def create_user(
    db: AsyncSession,
    username: Optional[str] = None,
    email: Optional[str] = None,
    password: Optional[str] = DEFAULT_PASSWORD,
    active: bool = True,
    role: str = "user",
    name: Optional[str] = None,
) -> User:
    user = User(
        name=name or fake.name(),
        username=username or fake.unique.user_name(),
        email=email or fake.unique.email(),
        password=get_password_hash(password) if password else None,
        active=active,
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def product_payload(**overrides) -> dict:
    payload = {
        "name": fake.unique.catch_phrase(),
        "price": "100.00",
        "cost": "60.00",
        "stock_quantity": fake.random_int(min=0, max=50),
    }
    payload.update(overrides)
    return payload


async def create_product(db: AsyncSession, name: Optional[str] = None, **fields) -> Product:
    name = name or fake.unique.catch_phrase()
    data = {"name": name, "slug": slugify(name)}
    data.update(fields)
    data = Product.apply_database_defaults(data)
    for money in ("cost", "mrp", "price", "sale_price", "tax_rate"):
        if not isinstance(data.get(money), (Decimal, type(None))):
            data[money] = Decimal(str(data[money]))
    product = Product(**data)
    db.add(product)
    await db.commit()
    await db.refresh(product)
    return product


async def create_products(db: AsyncSession, count: int, **fields) -> list[Product]:
    return [await create_product(db, **fields) for _ in range(count)]


def estimate_item(**overrides) -> dict:
    item = {
        "name": fake.word().title(),
        "quantity": 2,
        "unit_price": 50.0,
        "total": 100.0,
    }
    item.update(overrides)
    return item


def estimate_payload(**overrides) -> dict:
    payload = {
        "number": f"EST-{fake.unique.random_int(min=1000, max=9999)}",
        "date": date.today().isoformat(),
        "customer_id": str(fake.random_int(min=1, max=500)),
        "items": [estimate_item()],
        "grand_total": 100.0,
    }
    payload.update(overrides)
    return payload


async def create_estimate(db: AsyncSession, **fields) -> Estimate:
    payload = estimate_payload(**fields)
    payload["date"] = date.fromisoformat(payload["date"])
    data = Estimate.apply_database_defaults(payload)
    estimate = Estimate(**data)
    db.add(estimate)
    await db.commit()
    await db.refresh(estimate)
    return estimate
