# frontdesk/core/config.py
import os
from typing import List, Optional
from pydantic import BaseModel
from dotenv import load_dotenv
from urllib.parse import quote_plus

load_dotenv()


def _split_csv(value: str) -> List[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


class Settings(BaseModel):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Front Desk Registration")
    API_V1_STR: str = os.getenv("API_V1_STR", "/api")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS (env takes priority)
    BACKEND_CORS_ORIGINS: List[str] = _split_csv(
        os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000",
        ))

    # ---------- MySQL ----------
    MYSQL_HOST: str = os.getenv("MYSQL_HOST", "localhost")
    MYSQL_PORT: int = int(os.getenv("MYSQL_PORT", "3306"))
    MYSQL_USER: str = os.getenv("MYSQL_USER", "frontdesk")
    MYSQL_PASSWORD: str = os.getenv("MYSQL_PASSWORD", "")
    MYSQL_DB: str = os.getenv("MYSQL_DB", "frontdesk")
    DB_DRIVER: str = os.getenv("DB_DRIVER", "pymysql")

    # Full URL wins over the MySQL pieces (sqlite:///./frontdesk.db for local runs)
    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL") or None

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+{self.DB_DRIVER}://{quote_plus(self.MYSQL_USER)}:{quote_plus(self.MYSQL_PASSWORD)}"
            f"@{self.MYSQL_HOST}:{self.MYSQL_PORT}/{self.MYSQL_DB}?charset=utf8mb4")

    # ---------- Hospital ----------
    TIMEZONE: str = os.getenv("TIMEZONE", "Asia/Kolkata")

    # ---------- UHID ----------
    UHID_PREFIX: str = os.getenv("UHID_PREFIX", "AH")
    UHID_MAX_ATTEMPTS: int = int(os.getenv("UHID_MAX_ATTEMPTS", "10"))
    UHID_RETRY_DELAY_MS: int = int(os.getenv("UHID_RETRY_DELAY_MS", "50"))

    # ---------- Patient login ----------
    PATIENT_EMAIL_DOMAIN: str = os.getenv("PATIENT_EMAIL_DOMAIN", "annam.com")
    PATIENT_DEFAULT_PASSWORD: str = os.getenv("PATIENT_DEFAULT_PASSWORD",
                                              "password")

    # ---------- Security ----------
    PASSWORD_HASH_SCHEME: str = os.getenv("PASSWORD_HASH_SCHEME", "bcrypt")
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # ---------- Registration flags ----------
    PARTY_ENABLED: bool = _flag("PARTY_ENABLED", "true")
    DEFAULT_APPOINTMENT_HOUR: int = int(
        os.getenv("DEFAULT_APPOINTMENT_HOUR", "9"))
    # 0 disables the per-request registration deadline
    REGISTRATION_TIMEOUT_SECONDS: float = float(
        os.getenv("REGISTRATION_TIMEOUT_SECONDS", "30"))


settings = Settings()
