from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lootledger.database import get_db
from lootledger.schemas.auth import Identity
from lootledger.schemas.player import PlayerCreate, PlayerUpdate, PlayerResponse, PlayerQuery
from lootledger.schemas.share import ShareStats
from lootledger.services.players import PlayerService
from lootledger.services.stats import StatsService
from lootledger.auth.jwt import get_current_identity
from lootledger.auth.dependencies import check_admin

router = APIRouter()


@router.get("", response_model=List[PlayerResponse])
async def get_players(
    query: PlayerQuery = Depends(),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    return PlayerService(db).list_players(query)


@router.get("/{player_id}", response_model=PlayerResponse)
async def get_player(
    player_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    return PlayerService(db).get_player(player_id)


@router.get("/{player_id}/stats", response_model=ShareStats)
async def get_player_stats(
    player_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Summe, offene und ausgezahlte Anteile eines Spielers."""
    return StatsService(db).player_stats(player_id)


@router.post("", response_model=PlayerResponse, status_code=status.HTTP_201_CREATED)
async def create_player(
    player_data: PlayerCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Legt einen Spieler an, optional mit Login. Nur Admins."""
    check_admin(identity)
    return PlayerService(db).create_player(player_data)


@router.put("/{player_id}", response_model=PlayerResponse)
async def update_player(
    player_id: int,
    player_data: PlayerUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Aktualisiert einen Spieler. Leeres Passwort = unverändert. Nur Admins."""
    check_admin(identity)
    return PlayerService(db).update_player(player_id, player_data)


@router.delete("/{player_id}")
async def delete_player(
    player_id: int,
    hard: bool = False,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Deaktiviert einen Spieler, mit ``hard=true`` endgültig löschen. Nur Admins."""
    check_admin(identity)
    service = PlayerService(db)
    if hard:
        service.delete_player(player_id)
        return {"success": True, "message": "Spieler gelöscht"}

    service.deactivate_player(player_id)
    return {"success": True, "message": "Spieler deaktiviert"}
