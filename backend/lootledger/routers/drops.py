from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lootledger.database import get_db
from lootledger.schemas.auth import Identity
from lootledger.schemas.drop import (
    DropCreate, DropUpdate, DropResponse, DropDetailResponse, DropQuery, FinanceStatusUpdate,
)
from lootledger.schemas.sale import SaleCreate, SaleUpdate, SaleResponse
from lootledger.schemas.share import (
    ShareCreate, ShareWithPlayerResponse, EqualSplitRequest, BuyOutRequest, Reconciliation,
)
from lootledger.services.ledger import LedgerService
from lootledger.services.notifications import Notifier, get_notifier
from lootledger.auth.jwt import get_current_identity
from lootledger.auth.dependencies import check_admin

router = APIRouter()


@router.get("", response_model=List[DropDetailResponse])
async def get_drops(
    query: DropQuery = Depends(),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Gibt Drops inkl. Verkauf, Anteilen und Abgleich zurück, neueste zuerst."""
    return LedgerService(db).list_drop_details(query)


@router.get("/{drop_id}", response_model=DropDetailResponse)
async def get_drop(
    drop_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    return LedgerService(db).get_drop_details(drop_id)


@router.post("", response_model=DropResponse, status_code=status.HTTP_201_CREATED)
async def create_drop(
    drop_data: DropCreate,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    identity: Identity = Depends(get_current_identity)
):
    """Erfasst einen neuen Drop. Nur Admins."""
    check_admin(identity)
    return LedgerService(db, notifier).create_drop(drop_data)


@router.put("/{drop_id}", response_model=DropResponse)
async def update_drop(
    drop_id: int,
    drop_data: DropUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Aktualisiert einen Drop. Nur Admins."""
    check_admin(identity)
    return LedgerService(db).update_drop(drop_id, drop_data)


@router.patch("/{drop_id}/finance-status", response_model=DropResponse)
async def set_finance_status(
    drop_id: int,
    data: FinanceStatusUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Setzt den Finanzstatus manuell (WAIT / PAID / PERSONAL). Nur Admins."""
    check_admin(identity)
    return LedgerService(db).set_finance_status(drop_id, data.finance_status)


@router.delete("/{drop_id}")
async def delete_drop(
    drop_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Löscht einen Drop samt Verkauf und Anteilen. Nur Admins."""
    check_admin(identity)
    LedgerService(db).delete_drop(drop_id)
    return {"success": True, "message": "Drop gelöscht"}


# ============== Verkauf ==============

@router.get("/{drop_id}/sale", response_model=SaleResponse)
async def get_sale(
    drop_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    return LedgerService(db).get_sale(drop_id)


@router.post("/{drop_id}/sale", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
async def create_sale(
    drop_id: int,
    sale_data: SaleCreate,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    identity: Identity = Depends(get_current_identity)
):
    """Erfasst den Verkauf eines Drops. Gebühr und Netto werden berechnet. Nur Admins."""
    check_admin(identity)
    return LedgerService(db, notifier).create_sale(drop_id, sale_data)


@router.put("/{drop_id}/sale", response_model=SaleResponse)
async def update_sale(
    drop_id: int,
    sale_data: SaleUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    check_admin(identity)
    return LedgerService(db).update_sale(drop_id, sale_data)


@router.delete("/{drop_id}/sale")
async def delete_sale(
    drop_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Löscht den Verkauf. Anteile bleiben bestehen. Nur Admins."""
    check_admin(identity)
    LedgerService(db).delete_sale(drop_id)
    return {"success": True, "message": "Verkauf gelöscht"}


# ============== Anteile ==============

@router.get("/{drop_id}/shares", response_model=List[ShareWithPlayerResponse])
async def get_shares(
    drop_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    return LedgerService(db).list_shares(drop_id)


@router.post("/{drop_id}/shares", response_model=ShareWithPlayerResponse, status_code=status.HTTP_201_CREATED)
async def create_share(
    drop_id: int,
    share_data: ShareCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Legt einen einzelnen Anteil an (Betrag wird übernommen, nicht berechnet). Nur Admins."""
    check_admin(identity)
    return LedgerService(db).create_share(drop_id, share_data)


@router.post("/{drop_id}/shares/split", response_model=List[ShareWithPlayerResponse], status_code=status.HTTP_201_CREATED)
async def equal_split(
    drop_id: int,
    split_data: EqualSplitRequest,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    identity: Identity = Depends(get_current_identity)
):
    """Teilt den Nettoerlös gleichmäßig auf. Ersetzt alle bisherigen Anteile. Nur Admins."""
    check_admin(identity)
    return LedgerService(db, notifier).equal_split(drop_id, split_data.player_ids, split_data.net_amount)


@router.post("/{drop_id}/shares/buy-out", response_model=List[ShareWithPlayerResponse], status_code=status.HTTP_201_CREATED)
async def buy_out(
    drop_id: int,
    buy_out_data: BuyOutRequest,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    identity: Identity = Depends(get_current_identity)
):
    """Buy-Out: Käufer erhält ``percent`` des Nettoerlöses, Rest gleichmäßig. Nur Admins."""
    check_admin(identity)
    return LedgerService(db, notifier).buy_out(
        drop_id,
        buy_out_data.buyer_id,
        buy_out_data.player_ids,
        buy_out_data.percent,
    )


@router.get("/{drop_id}/reconciliation", response_model=Reconciliation)
async def get_reconciliation(
    drop_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Nettoerlös gegen verteilte Anteile (remaining > 0: unterverteilt)."""
    return LedgerService(db).get_reconciliation(drop_id)
