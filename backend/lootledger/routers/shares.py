from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lootledger.database import get_db
from lootledger.repositories import ShareRepository
from lootledger.schemas.auth import Identity
from lootledger.schemas.share import ShareUpdate, ShareWithPlayerResponse, ShareQuery, PaidStatusUpdate
from lootledger.services.ledger import LedgerService
from lootledger.auth.jwt import get_current_identity
from lootledger.auth.dependencies import check_admin

router = APIRouter()


@router.get("", response_model=List[ShareWithPlayerResponse])
async def get_shares(
    query: ShareQuery = Depends(),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Anteile, optional gefiltert nach Drop, Spieler und Auszahlungsstatus."""
    return ShareRepository(db).list(query)


@router.get("/{share_id}", response_model=ShareWithPlayerResponse)
async def get_share(
    share_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    return LedgerService(db).get_share(share_id)


@router.put("/{share_id}", response_model=ShareWithPlayerResponse)
async def update_share(
    share_id: int,
    share_data: ShareUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Aktualisiert einen Anteil. Der Drop kann nicht geändert werden. Nur Admins."""
    check_admin(identity)
    return LedgerService(db).update_share(share_id, share_data)


@router.patch("/{share_id}/paid-status", response_model=ShareWithPlayerResponse)
async def set_paid_status(
    share_id: int,
    data: PaidStatusUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Markiert einen Anteil als ausgezahlt bzw. offen. Nur Admins."""
    check_admin(identity)
    return LedgerService(db).set_share_paid_status(share_id, data.paid_status)


@router.delete("/{share_id}")
async def delete_share(
    share_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    check_admin(identity)
    LedgerService(db).delete_share(share_id)
    return {"success": True, "message": "Anteil gelöscht"}
