import logging
from fastapi import FastAPI
from library_reservations.config import settings
from library_reservations.db import init_db
from library_reservations.api.router import router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)
app.include_router(router)

@app.on_event("startup")
async def on_startup():
    if settings.INIT_DB_ON_STARTUP:
        await init_db()
    logger.info("%s iniciado (env=%s)", settings.APP_NAME, settings.ENV)
