from typing import List, Optional
from pydantic_settings import BaseSettings


DEFAULT_ENCRYPTION_KEY = "kondo-manager-secure-key-2025"
DEFAULT_JWT_SECRET = "kondo-dev-secret-change-me"
DEFAULT_ADMIN_PASSWORD = "password"


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Kondo Manager API"
    ENV: str = "development"

    # -------------------------------------------------
    # CORS (front end origins)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # -------------------------------------------------
    # Record store
    # -------------------------------------------------
    # When set, the spreadsheet web-app endpoint is the only backend.
    # When empty, records live in a local JSON document.
    SHEETS_ENDPOINT_URL: Optional[str] = None
    SHEETS_TIMEOUT_SECONDS: Optional[float] = None

    LOCAL_STORE_PATH: str = "data/kondo_store.json"
    STORE_NAMESPACE: str = "kondo"

    # -------------------------------------------------
    # Field-level encryption
    # -------------------------------------------------
    ENCRYPTION_KEY: str = DEFAULT_ENCRYPTION_KEY
    SENSITIVE_FIELDS: List[str] = [
        "password_hash",
        "two_factor_secret",
        "remember_token",
        "password",
        "codice_fiscale",
    ]

    # -------------------------------------------------
    # Administrator credential (single built-in account)
    # -------------------------------------------------
    ADMIN_EMAIL: str = "admin@kondo.it"
    ADMIN_PASSWORD: str = DEFAULT_ADMIN_PASSWORD
    ADMIN_NAME: str = "Amministratore"

    # -------------------------------------------------
    # JWT / sessions
    # -------------------------------------------------
    JWT_SECRET_KEY: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    # -------------------------------------------------
    # AI assistant (Gemini through pydantic-ai)
    # -------------------------------------------------
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.0-flash"

    # -------------------------------------------------
    # Documents
    # -------------------------------------------------
    # Base64 payloads are stored inline in a spreadsheet cell
    MAX_DOCUMENT_SIZE_BYTES: int = 500 * 1024

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()
