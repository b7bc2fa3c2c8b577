"""Drop -> Verkauf -> Anteile.

Der LedgerService bündelt alle Schreiboperationen rund um einen Drop:

- Verkauf anlegen/ändern (Gebühr und Netto werden immer neu berechnet)
- Anteile manuell pflegen oder gleichmäßig aufteilen (ersetzt alle Anteile)
- Buy-Out: fester Prozentsatz für einen Spieler, Rest gleichmäßig
- Finanzstatus des Drops setzen
- Drop löschen inkl. Verkauf und Anteilen

Alle Operationen, die Anteile eines Drops verändern, laufen unter dem
Lock dieses Drops und werden mit genau einem Commit abgeschlossen.
Über- oder Unterverteilung wird nicht verhindert, sondern in der
Abstimmung (``remaining``) sichtbar gemacht.
"""
import logging
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from lootledger.config import get_settings
from lootledger.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from lootledger.locks import collection_locks, drop_locks
from lootledger.models import Boss, Drop, Item, Player, Sale, Share
from lootledger.models.enums import DropStatus, FinanceStatus, PaidStatus, ShareType
from lootledger.money import compute_fee_and_net, equal_split_amounts, percent_of, round2, to_decimal
from lootledger.repositories import (
    BossRepository, DropRepository, ItemRepository, PlayerRepository, SaleRepository, ShareRepository,
)
from lootledger.schemas.drop import DropCreate, DropDetailResponse, DropQuery, DropUpdate
from lootledger.schemas.sale import SaleCreate, SaleResponse, SaleUpdate
from lootledger.schemas.share import Reconciliation, ShareCreate, ShareUpdate, ShareWithPlayerResponse
from lootledger.services.base import BaseService
from lootledger.services.notifications import Notifier, NullNotifier

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")

# Pflichtfelder, die per Update nicht auf null gesetzt werden dürfen
_REQUIRED_DROP_FIELDS = ("item_id", "quantity", "participant_count", "drop_status", "finance_status")
_REQUIRED_SHARE_FIELDS = ("player_id", "share_type", "amount", "paid_status")


class LedgerService(BaseService):
    def __init__(self, db: Session, notifier: Optional[Notifier] = None):
        super().__init__(db)
        self.notifier = notifier or NullNotifier()
        self.drops = DropRepository(db)
        self.sales = SaleRepository(db)
        self.shares = ShareRepository(db)
        self.items = ItemRepository(db)
        self.bosses = BossRepository(db)
        self.players = PlayerRepository(db)

    # ------------------------------------------------------------------
    # Drops
    # ------------------------------------------------------------------

    def get_drop(self, drop_id: int) -> Drop:
        drop = self.drops.get(drop_id)
        if not drop:
            raise NotFoundError("Drop nicht gefunden", {"drop_id": drop_id})
        return drop

    def list_drops(self, query: Optional[DropQuery] = None) -> List[Drop]:
        return self.drops.list(query)

    def get_drop_details(self, drop_id: int) -> DropDetailResponse:
        return self._details(self.get_drop(drop_id))

    def list_drop_details(self, query: Optional[DropQuery] = None) -> List[DropDetailResponse]:
        return [self._details(drop) for drop in self.drops.list(query)]

    def create_drop(self, data: DropCreate) -> Drop:
        with self.transaction(collection_locks.hold("drops")):
            item = self._require_item(data.item_id)
            boss = self._require_boss(data.boss_id) if data.boss_id is not None else None
            drop = self.drops.create(data.model_dump())

        logger.info("Drop %s angelegt (Item %s, Status %s)", drop.id, item.name, drop.drop_status.value)
        self._notify("notify_new_drop", item.name, boss.name if boss else None)
        return drop

    def update_drop(self, drop_id: int, data: DropUpdate) -> Drop:
        changes = data.model_dump(exclude_unset=True)
        for field in _REQUIRED_DROP_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} darf nicht leer sein")

        with self.transaction(drop_locks.hold(drop_id)):
            self.get_drop(drop_id)
            if "item_id" in changes:
                self._require_item(changes["item_id"])
            if changes.get("boss_id") is not None:
                self._require_boss(changes["boss_id"])
            if changes.get("drop_status") == DropStatus.NOT_DROPPED and self.sales.get_by_drop_id(drop_id):
                raise InvalidStateError(
                    "Drop mit erfasstem Verkauf kann nicht auf NOT_DROPPED gesetzt werden",
                    {"drop_id": drop_id},
                )
            drop = self.drops.update(drop_id, changes)
        return drop

    def set_finance_status(self, drop_id: int, finance_status: FinanceStatus) -> Drop:
        """Manuelles Setzen (z.B. "als ausgezahlt markieren" oder "behalten").

        Unabhängig davon, ob ein Verkauf oder Anteile existieren; der
        paid_status der Anteile bleibt unberührt.
        """
        with self.transaction(drop_locks.hold(drop_id)):
            self.get_drop(drop_id)
            drop = self.drops.update(drop_id, {"finance_status": finance_status})
        logger.info("Drop %s Finanzstatus -> %s", drop_id, finance_status.value)
        return drop

    def delete_drop(self, drop_id: int) -> None:
        """Löscht Anteile, Verkauf und zuletzt den Drop selbst."""
        with self.transaction(drop_locks.hold(drop_id)):
            self.get_drop(drop_id)
            removed_shares = self.shares.remove_by_drop_id(drop_id)
            removed_sale = self.sales.remove_by_drop_id(drop_id)
            self.drops.remove(drop_id)
        logger.info(
            "Drop %s gelöscht (%d Anteile, Verkauf entfernt: %s)",
            drop_id, removed_shares, removed_sale,
        )

    # ------------------------------------------------------------------
    # Verkauf
    # ------------------------------------------------------------------

    def get_sale(self, drop_id: int) -> Sale:
        self.get_drop(drop_id)
        sale = self.sales.get_by_drop_id(drop_id)
        if not sale:
            raise NotFoundError("Noch kein Verkauf erfasst", {"drop_id": drop_id})
        return sale

    def create_sale(self, drop_id: int, data: SaleCreate) -> Sale:
        fee_percent = data.fee_percent if data.fee_percent is not None else get_settings().default_fee_percent
        self._validate_sale(data.sale_price, fee_percent)

        with self.transaction(drop_locks.hold(drop_id)):
            drop = self.get_drop(drop_id)
            if drop.drop_status != DropStatus.DROPPED:
                raise InvalidStateError(
                    "Für ein nicht gedropptes Item kann kein Verkauf erfasst werden",
                    {"drop_id": drop_id},
                )
            if self.sales.get_by_drop_id(drop_id):
                raise ConflictError("Für diesen Drop existiert bereits ein Verkauf", {"drop_id": drop_id})

            fee_amount, net_amount = compute_fee_and_net(data.sale_price, fee_percent)
            sale = self.sales.create({
                "drop_id": drop_id,
                "sale_price": round2(data.sale_price),
                "fee_percent": to_decimal(fee_percent),
                "fee_amount": fee_amount,
                "net_amount": net_amount,
                "sale_date": data.sale_date,
                "platform": data.platform,
            })
            # Neuer Verkauf: Drop ist (wieder) zur Auszahlung offen, auch wenn er PERSONAL war
            drop.finance_status = FinanceStatus.WAIT

        logger.info("Verkauf für Drop %s erfasst: Preis %s, Netto %s", drop_id, sale.sale_price, sale.net_amount)
        self._notify("notify_sale", drop.item.name, sale.sale_price, sale.net_amount)
        return sale

    def update_sale(self, drop_id: int, data: SaleUpdate) -> Sale:
        """Übernimmt nur gesetzte Felder; Gebühr/Netto werden aus den
        zusammengeführten Werten neu berechnet, sobald Preis oder Gebühr
        mitgeschickt werden."""
        changes = data.model_dump(exclude_unset=True)

        with self.transaction(drop_locks.hold(drop_id)):
            sale = self.get_sale(drop_id)
            update = {}
            if "sale_date" in changes:
                update["sale_date"] = changes["sale_date"]
            if "platform" in changes:
                update["platform"] = changes["platform"]

            new_price = changes.get("sale_price")
            new_fee_percent = changes.get("fee_percent")
            if new_price is not None or new_fee_percent is not None:
                price = new_price if new_price is not None else sale.sale_price
                fee_percent = new_fee_percent if new_fee_percent is not None else sale.fee_percent
                self._validate_sale(price, fee_percent)
                fee_amount, net_amount = compute_fee_and_net(price, fee_percent)
                update.update(
                    sale_price=round2(price),
                    fee_percent=to_decimal(fee_percent),
                    fee_amount=fee_amount,
                    net_amount=net_amount,
                )

            sale = self.sales.update(sale.id, update)

        logger.info("Verkauf für Drop %s aktualisiert: Netto %s", drop_id, sale.net_amount)
        return sale

    def delete_sale(self, drop_id: int) -> None:
        """Entfernt nur den Verkauf - bestehende Anteile bleiben stehen."""
        with self.transaction(drop_locks.hold(drop_id)):
            sale = self.get_sale(drop_id)
            self.sales.remove(sale.id)
            remaining_shares = len(self.shares.list_by_drop_id(drop_id))

        if remaining_shares:
            logger.warning(
                "Verkauf für Drop %s gelöscht, %d Anteile verweisen weiter auf den Drop",
                drop_id, remaining_shares,
            )

    # ------------------------------------------------------------------
    # Anteile
    # ------------------------------------------------------------------

    def list_shares(self, drop_id: int) -> List[Share]:
        self.get_drop(drop_id)
        return self.shares.list_by_drop_id(drop_id)

    def get_share(self, share_id: int) -> Share:
        share = self.shares.get(share_id)
        if not share:
            raise NotFoundError("Anteil nicht gefunden", {"share_id": share_id})
        return share

    def create_share(self, drop_id: int, data: ShareCreate) -> Share:
        """Manueller Anteil. ``amount`` kommt fertig vom Aufrufer, ``percent``
        wird nicht gegen ``amount`` geprüft."""
        self._validate_share_values(data.amount, data.percent)

        with self.transaction(drop_locks.hold(drop_id)):
            self.get_drop(drop_id)
            self._require_player(data.player_id)
            share = self.shares.create({
                "drop_id": drop_id,
                "player_id": data.player_id,
                "share_type": data.share_type,
                "percent": round2(data.percent) if data.percent is not None else None,
                "amount": round2(data.amount),
                "paid_status": data.paid_status,
                "remark": data.remark,
            })
        return share

    def update_share(self, share_id: int, data: ShareUpdate) -> Share:
        changes = data.model_dump(exclude_unset=True)
        for field in _REQUIRED_SHARE_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} darf nicht leer sein")
        self._validate_share_values(changes.get("amount"), changes.get("percent"))
        if "amount" in changes:
            changes["amount"] = round2(changes["amount"])
        if changes.get("percent") is not None:
            changes["percent"] = round2(changes["percent"])

        drop_id = self.get_share(share_id).drop_id
        with self.transaction(drop_locks.hold(drop_id)):
            self.get_share(share_id)
            if "player_id" in changes:
                self._require_player(changes["player_id"])
            share = self.shares.update(share_id, changes)
        return share

    def set_share_paid_status(self, share_id: int, paid_status: PaidStatus) -> Share:
        """Ändert nur den Anteil; der Finanzstatus des Drops bleibt wie er ist."""
        drop_id = self.get_share(share_id).drop_id
        with self.transaction(drop_locks.hold(drop_id)):
            self.get_share(share_id)
            share = self.shares.update(share_id, {"paid_status": paid_status})
        return share

    def delete_share(self, share_id: int) -> None:
        drop_id = self.get_share(share_id).drop_id
        with self.transaction(drop_locks.hold(drop_id)):
            if not self.shares.remove(share_id):
                raise NotFoundError("Anteil nicht gefunden", {"share_id": share_id})

    def equal_split(
        self,
        drop_id: int,
        player_ids: Iterable[int],
        net_amount: Optional[Decimal] = None,
    ) -> List[Share]:
        """Ersetzt alle Anteile des Drops durch gleich große AUTO-Anteile.

        Ohne ``net_amount`` wird der Nettoerlös des Verkaufs verteilt, sonst
        der übergebene Betrag (z.B. der Rest nach einem Buy-Out).
        """
        player_ids = list(player_ids)

        with self.transaction(drop_locks.hold(drop_id)):
            drop = self.get_drop(drop_id)
            sale = self._require_sale_for_split(drop_id)
            base_amount = sale.net_amount if net_amount is None else net_amount
            shares, amount_per_head = self._replace_with_equal_split(drop_id, player_ids, base_amount)

        logger.info(
            "Drop %s gleichmäßig aufgeteilt: %s auf %d Spieler (je %s)",
            drop_id, round2(base_amount), len(shares), amount_per_head,
        )
        self._notify("notify_dividend", drop.item.name, amount_per_head, len(shares))
        return shares

    def buy_out(
        self,
        drop_id: int,
        buyer_id: int,
        player_ids: Optional[Iterable[int]] = None,
        percent: Decimal = Decimal("50"),
    ) -> List[Share]:
        """Ein Spieler übernimmt ``percent`` des Nettoerlöses (BUY), der Rest
        wird gleichmäßig auf ``player_ids`` verteilt. Ersetzt alle Anteile."""
        player_ids = list(player_ids or [])
        percent = to_decimal(percent)
        if percent <= 0 or percent > 100:
            raise ValidationError("Buy-Out-Prozentsatz muss zwischen 0 und 100 liegen", {"percent": str(percent)})
        if buyer_id in player_ids:
            raise ValidationError("Der Käufer darf nicht zusätzlich am Rest beteiligt sein", {"buyer_id": buyer_id})

        with self.transaction(drop_locks.hold(drop_id)):
            drop = self.get_drop(drop_id)
            sale = self._require_sale_for_split(drop_id)
            self._require_player(buyer_id)

            buy_amount = percent_of(sale.net_amount, percent)
            residual = round2(to_decimal(sale.net_amount) - buy_amount)

            if player_ids:
                shares, amount_per_head = self._replace_with_equal_split(drop_id, player_ids, residual)
            else:
                self.shares.remove_by_drop_id(drop_id)
                shares, amount_per_head = [], None

            buy_share = self.shares.create({
                "drop_id": drop_id,
                "player_id": buyer_id,
                "share_type": ShareType.BUY,
                "percent": round2(percent),
                "amount": buy_amount,
                "paid_status": PaidStatus.WAIT,
                "remark": None,
            })

        logger.info(
            "Buy-Out für Drop %s: Spieler %s übernimmt %s%% (%s), Rest %s auf %d Spieler",
            drop_id, buyer_id, percent, buy_amount, residual, len(shares),
        )
        if shares:
            self._notify("notify_dividend", drop.item.name, amount_per_head, len(shares))
        return [buy_share] + shares

    def get_reconciliation(self, drop_id: int) -> Reconciliation:
        self.get_drop(drop_id)
        sale = self.sales.get_by_drop_id(drop_id)
        shares = self.shares.list_by_drop_id(drop_id)
        return self._reconcile(drop_id, sale, shares)

    # ------------------------------------------------------------------
    # Intern
    # ------------------------------------------------------------------

    def _replace_with_equal_split(
        self, drop_id: int, player_ids: List[int], net_amount
    ) -> Tuple[List[Share], Decimal]:
        self._require_players(player_ids)
        net = round2(net_amount)
        if net < 0:
            raise ValidationError("Zu verteilender Betrag darf nicht negativ sein", {"net_amount": str(net)})

        amount, percent = equal_split_amounts(net, len(player_ids))

        self.shares.remove_by_drop_id(drop_id)
        shares = [
            self.shares.create({
                "drop_id": drop_id,
                "player_id": player_id,
                "share_type": ShareType.AUTO,
                "percent": percent,
                "amount": amount,
                "paid_status": PaidStatus.WAIT,
                "remark": None,
            })
            for player_id in player_ids
        ]
        return shares, amount

    def _require_sale_for_split(self, drop_id: int) -> Sale:
        sale = self.sales.get_by_drop_id(drop_id)
        if not sale:
            raise InvalidStateError(
                "Ohne erfassten Verkauf kann nicht aufgeteilt werden",
                {"drop_id": drop_id},
            )
        return sale

    def _require_item(self, item_id: int) -> Item:
        item = self.items.get(item_id)
        if not item:
            raise ValidationError("Ausgewähltes Item nicht gefunden", {"item_id": item_id})
        return item

    def _require_boss(self, boss_id: int) -> Boss:
        boss = self.bosses.get(boss_id)
        if not boss:
            raise ValidationError("Ausgewählter Boss nicht gefunden", {"boss_id": boss_id})
        return boss

    def _require_player(self, player_id: int) -> Player:
        player = self.players.get(player_id)
        if not player:
            raise ValidationError("Ausgewählter Spieler nicht gefunden", {"player_id": player_id})
        return player

    def _require_players(self, player_ids: List[int]) -> None:
        if not player_ids:
            raise ValidationError("Mindestens ein Spieler muss ausgewählt sein")
        if len(set(player_ids)) != len(player_ids):
            raise ValidationError("Spieler mehrfach ausgewählt", {"player_ids": player_ids})
        found = {player.id for player in self.players.get_many(player_ids)}
        missing = [player_id for player_id in player_ids if player_id not in found]
        if missing:
            raise ValidationError("Ausgewählte Spieler nicht gefunden", {"player_ids": missing})

    @staticmethod
    def _validate_sale(sale_price, fee_percent) -> None:
        if sale_price is None:
            raise ValidationError("Verkaufspreis fehlt")
        if to_decimal(sale_price) < 0:
            raise ValidationError("Verkaufspreis darf nicht negativ sein", {"sale_price": str(sale_price)})
        if fee_percent is None or not (0 <= to_decimal(fee_percent) <= 100):
            raise ValidationError("Gebühr muss zwischen 0 und 100 Prozent liegen", {"fee_percent": str(fee_percent)})

    @staticmethod
    def _validate_share_values(amount, percent) -> None:
        if amount is not None and to_decimal(amount) < 0:
            raise ValidationError("Betrag darf nicht negativ sein", {"amount": str(amount)})
        if percent is not None and not (0 <= to_decimal(percent) <= 100):
            raise ValidationError("Prozent muss zwischen 0 und 100 liegen", {"percent": str(percent)})

    def _details(self, drop: Drop) -> DropDetailResponse:
        sale = self.sales.get_by_drop_id(drop.id)
        shares = self.shares.list_by_drop_id(drop.id)
        detail = DropDetailResponse.model_validate(drop)
        detail.sale = SaleResponse.model_validate(sale) if sale else None
        detail.shares = [ShareWithPlayerResponse.model_validate(share) for share in shares]
        detail.reconciliation = self._reconcile(drop.id, sale, shares)
        return detail

    @staticmethod
    def _reconcile(drop_id: int, sale: Optional[Sale], shares: List[Share]) -> Reconciliation:
        net_amount = round2(sale.net_amount) if sale else ZERO
        allocated = round2(sum((to_decimal(share.amount) for share in shares), ZERO))
        return Reconciliation(
            drop_id=drop_id,
            has_sale=sale is not None,
            net_amount=net_amount,
            allocated=allocated,
            remaining=round2(net_amount - allocated),
            share_count=len(shares),
        )

    def _notify(self, method: str, *args) -> None:
        # Benachrichtigungen dürfen eine Ledger-Operation nie scheitern lassen
        try:
            getattr(self.notifier, method)(*args)
        except Exception:
            logger.exception("Benachrichtigung %s fehlgeschlagen", method)
