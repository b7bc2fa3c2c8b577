from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lootledger.database import get_db
from lootledger.schemas.auth import Identity
from lootledger.schemas.item import BossCreate, BossUpdate, BossResponse, BossQuery
from lootledger.services.catalog import CatalogService
from lootledger.auth.jwt import get_current_identity
from lootledger.auth.dependencies import check_admin

router = APIRouter()


@router.get("", response_model=List[BossResponse])
async def get_bosses(
    query: BossQuery = Depends(),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Gibt alle Bosse alphabetisch zurück."""
    return CatalogService(db).list_bosses(query)


@router.get("/{boss_id}", response_model=BossResponse)
async def get_boss(
    boss_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    return CatalogService(db).get_boss(boss_id)


@router.post("", response_model=BossResponse, status_code=status.HTTP_201_CREATED)
async def create_boss(
    boss_data: BossCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    check_admin(identity)
    return CatalogService(db).create_boss(boss_data)


@router.put("/{boss_id}", response_model=BossResponse)
async def update_boss(
    boss_id: int,
    boss_data: BossUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    check_admin(identity)
    return CatalogService(db).update_boss(boss_id, boss_data)


@router.delete("/{boss_id}")
async def delete_boss(
    boss_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    check_admin(identity)
    CatalogService(db).delete_boss(boss_id)
    return {"success": True, "message": "Boss gelöscht"}
