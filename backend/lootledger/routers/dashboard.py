from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lootledger.database import get_db
from lootledger.schemas.auth import Identity
from lootledger.schemas.dashboard import DashboardResponse, SummaryResponse, AdminStats
from lootledger.schemas.share import ShareStats
from lootledger.services.stats import StatsService
from lootledger.auth.jwt import get_current_identity
from lootledger.auth.dependencies import check_admin

router = APIRouter()


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Eigene Anteile, letzte Drops und für Admins die Gesamtzahlen."""
    return StatsService(db).dashboard(identity)


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    return StatsService(db).summary()


@router.get("/shares", response_model=ShareStats)
async def get_share_stats(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Anteile über alle Spieler."""
    return StatsService(db).player_stats()


@router.get("/admin", response_model=AdminStats)
async def get_admin_stats(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    check_admin(identity)
    return StatsService(db).admin_stats()
