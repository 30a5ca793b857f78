# app/core/config.py
import os
from typing import ClassVar, List
from pydantic import BaseModel, Field

def _default_database_url() -> str:
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    os.makedirs(data_dir, exist_ok=True)
    return os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(data_dir, 'conference.db')}")

def _cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()]

class Settings(BaseModel):
    # Constante (não vira campo Pydantic)
    DATA_DIR: ClassVar[str] = os.path.abspath(os.getenv("DATA_DIR", "./data"))

    DATABASE_URL: str = Field(default_factory=_default_database_url)
    SECRET_KEY: str = Field(default_factory=lambda: os.getenv("SECRET_KEY", "CHANGE_ME_SUPER_SECRET"))
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30")))

    # webhook do provedor de pagamento (vazio = sem verificação de assinatura)
    PAYMENT_WEBHOOK_SECRET: str = Field(default_factory=lambda: os.getenv("PAYMENT_WEBHOOK_SECRET", ""))
    PAYMENT_WEBHOOK_TOLERANCE_SECONDS: int = Field(default_factory=lambda: int(os.getenv("PAYMENT_WEBHOOK_TOLERANCE_SECONDS", "300")))

    RUN_MIGRATIONS_ON_STARTUP: bool = Field(default_factory=lambda: os.getenv("RUN_MIGRATIONS_ON_STARTUP", "false").lower() in {"1", "true", "yes"})
    CORS_ORIGINS: List[str] = Field(default_factory=_cors_origins)
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # seed inicial (bootstrap): usuário administrador
    SEED_ADMIN_EMAIL: str = Field(default_factory=lambda: os.getenv("SEED_ADMIN_EMAIL", "admin@example.com"))
    SEED_ADMIN_PASSWORD: str = Field(default_factory=lambda: os.getenv("SEED_ADMIN_PASSWORD", "admin123"))

settings = Settings()
