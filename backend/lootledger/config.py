from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Datenbank
    database_url: str = "sqlite:///./data/lootledger.db"

    # JWT
    secret_key: str = "changeme"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 Tage

    # Admin-Login ohne Spieler-Eintrag (aus der Umgebung)
    admin_username: str = ""
    admin_password: str = ""

    # Discord Webhook (leer = keine Benachrichtigungen)
    discord_webhook_url: str = ""
    discord_webhook_username: str = "LootLedger StockBot"
    notification_timeout_seconds: float = 5.0

    # Verkauf
    default_fee_percent: Decimal = Decimal("5")

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    frontend_url: str = "http://localhost:5173"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
