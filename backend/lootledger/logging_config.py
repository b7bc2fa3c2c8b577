import logging

from lootledger.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def init_logging() -> None:
    """Konfiguriert das Root-Logging einmalig beim App-Start."""
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    # SQL-Ausgabe läuft über echo=settings.debug, nicht doppelt loggen
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
