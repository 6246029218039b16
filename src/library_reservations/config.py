import os
from dotenv import load_dotenv

load_dotenv()

def _as_bool(v: str | None, default: bool = False) -> bool:
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}

class Settings:
    # App
    APP_NAME: str = os.getenv("APP_NAME", "library-reservations")
    ENV: str = os.getenv("ENV", "dev")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # DB
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./reservations.db")
    DB_ECHO: bool = _as_bool(os.getenv("DB_ECHO"), False)

    # Crear tablas al arrancar
    INIT_DB_ON_STARTUP: bool = _as_bool(os.getenv("INIT_DB_ON_STARTUP"), True)

settings = Settings()
