import logging
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from lootledger.config import get_settings
from lootledger.database import engine, Base, ensure_sqlite_directory
from lootledger.exceptions import LedgerError
from lootledger.logging_config import init_logging
from lootledger.routers import auth, players, items, bosses, drops, shares, dashboard

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Logging und Datenbank-Tabellen
    init_logging()
    ensure_sqlite_directory()
    Base.metadata.create_all(bind=engine)
    logger.info("LootLedger gestartet")
    yield


app = FastAPI(
    title="LootLedger - Gilden-Beutebuch",
    description="Verwaltung von Drops, Verkäufen und Anteilen einer Gilde",
    version="0.1.0",
    lifespan=lifespan,
    redirect_slashes=False,
)

# CORS für Frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    """Fachliche Fehler -> JSON mit passendem HTTP-Status."""
    logger.warning("%s %s abgelehnt: %s %s", request.method, request.url.path, exc.error_code, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


# Router einbinden
app.include_router(auth.router, prefix="/api/auth", tags=["Authentifizierung"])
app.include_router(players.router, prefix="/api/players", tags=["Spieler"])
app.include_router(items.router, prefix="/api/items", tags=["Items"])
app.include_router(bosses.router, prefix="/api/bosses", tags=["Bosse"])
app.include_router(drops.router, prefix="/api/drops", tags=["Drops"])
app.include_router(shares.router, prefix="/api/shares", tags=["Anteile"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])


@app.get("/")
async def root():
    return {"message": "LootLedger API läuft", "version": "0.1.0"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
