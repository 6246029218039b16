from decimal import Decimal
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from library_reservations.db import Base
from library_reservations import models

@pytest_asyncio.fixture
async def async_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False, future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()

@pytest_asyncio.fixture
async def session(async_engine):
    SessionLocal = async_sessionmaker(async_engine, expire_on_commit=False, class_=AsyncSession)
    async with SessionLocal() as s:
        try:
            yield s
        finally:
            await s.rollback()

@pytest_asyncio.fixture
async def user(session):
    u = models.User(name="Juan Pérez", email="juan@example.com")
    session.add(u)
    await session.commit()
    return u

@pytest_asyncio.fixture
async def book(session):
    b = models.Book(
        external_id=258027,
        title="The Lord of the Rings",
        author="J. R. R. Tolkien",
        price=Decimal("15.99"),
        stock_quantity=10,
        available_quantity=5,
    )
    session.add(b)
    await session.commit()
    return b
