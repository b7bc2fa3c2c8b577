from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lootledger.database import get_db
from lootledger.schemas.auth import Identity
from lootledger.schemas.item import ItemCreate, ItemUpdate, ItemResponse, ItemQuery
from lootledger.services.catalog import CatalogService
from lootledger.auth.jwt import get_current_identity
from lootledger.auth.dependencies import check_admin

router = APIRouter()


@router.get("", response_model=List[ItemResponse])
async def get_items(
    query: ItemQuery = Depends(),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    return CatalogService(db).list_items(query)


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(
    item_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    return CatalogService(db).get_item(item_id)


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    item_data: ItemCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Erstellt ein neues Item. Nur Admins."""
    check_admin(identity)
    return CatalogService(db).create_item(item_data)


@router.put("/{item_id}", response_model=ItemResponse)
async def update_item(
    item_id: int,
    item_data: ItemUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    check_admin(identity)
    return CatalogService(db).update_item(item_id, item_data)


@router.delete("/{item_id}")
async def delete_item(
    item_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Löscht ein Item, solange kein Drop darauf verweist. Nur Admins."""
    check_admin(identity)
    CatalogService(db).delete_item(item_id)
    return {"success": True, "message": "Item gelöscht"}
