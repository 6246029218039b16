from typing import AsyncGenerator
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from library_reservations.db import SessionLocal
from library_reservations.manager import ReservationManager
from library_reservations.repositories import SqlUnitOfWork

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session

def get_manager(session: AsyncSession = Depends(get_session)) -> ReservationManager:
    return ReservationManager(SqlUnitOfWork(session))
