from decimal import Decimal

import pytest

from lootledger.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from lootledger.models.enums import DropStatus, FinanceStatus, PaidStatus, ShareType
from lootledger.repositories import SaleRepository, ShareRepository
from lootledger.schemas.drop import DropCreate, DropQuery, DropUpdate
from lootledger.schemas.sale import SaleCreate, SaleUpdate
from lootledger.schemas.share import ShareCreate, ShareUpdate


class TestDrops:
    """Drops anlegen, ändern, löschen"""

    def test_create_drop_notifies(self, ledger, notifier, item, boss):
        drop = ledger.create_drop(DropCreate(item_id=item.id, boss_id=boss.id, participant_count=3))

        assert drop.id is not None
        assert drop.drop_status == DropStatus.DROPPED
        assert drop.finance_status == FinanceStatus.WAIT
        assert notifier.calls == [("new_drop", "Kronjuwel", "Kutum")]

    def test_create_drop_with_unknown_item_is_rejected(self, ledger):
        with pytest.raises(ValidationError):
            ledger.create_drop(DropCreate(item_id=999, participant_count=1))

        assert ledger.list_drops() == []

    def test_create_drop_with_unknown_boss_is_rejected(self, ledger, item):
        with pytest.raises(ValidationError):
            ledger.create_drop(DropCreate(item_id=item.id, boss_id=999, participant_count=1))

    def test_get_missing_drop(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.get_drop(42)

    def test_update_drop_revalidates_item(self, ledger, drop):
        with pytest.raises(ValidationError):
            ledger.update_drop(drop.id, DropUpdate(item_id=999))

    def test_update_drop_can_clear_boss(self, ledger, drop):
        updated = ledger.update_drop(drop.id, DropUpdate(boss_id=None, note="Doppel-Drop"))

        assert updated.boss_id is None
        assert updated.note == "Doppel-Drop"

    def test_update_drop_rejects_null_for_required_field(self, ledger, drop):
        with pytest.raises(ValidationError):
            ledger.update_drop(drop.id, DropUpdate(quantity=None))

    def test_list_filters_by_status_and_search(self, ledger, drop, not_dropped):
        dropped = ledger.list_drops(DropQuery(drop_status=DropStatus.DROPPED))
        found = ledger.list_drops(DropQuery(search="kron"))
        missing = ledger.list_drops(DropQuery(search="schwert"))

        assert [d.id for d in dropped] == [drop.id]
        assert {d.id for d in found} == {drop.id, not_dropped.id}
        assert missing == []

    def test_delete_drop_removes_sale_and_shares(self, db, ledger, sold_drop, players):
        # Given
        ledger.equal_split(sold_drop.id, [p.id for p in players])

        # When
        ledger.delete_drop(sold_drop.id)

        # Then
        assert SaleRepository(db).get_by_drop_id(sold_drop.id) is None
        assert ShareRepository(db).list_by_drop_id(sold_drop.id) == []
        with pytest.raises(NotFoundError):
            ledger.get_drop(sold_drop.id)

    def test_delete_missing_drop(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.delete_drop(42)


class TestSales:
    """Verkauf erfassen und ändern"""

    def test_create_sale_computes_fee_and_net(self, ledger, notifier, drop):
        sale = ledger.create_sale(drop.id, SaleCreate(sale_price=Decimal("280000"), fee_percent=Decimal("5")))

        assert sale.fee_amount == Decimal("14000.00")
        assert sale.net_amount == Decimal("266000.00")
        assert notifier.calls[-1] == ("sale", "Kronjuwel", sale.sale_price, sale.net_amount)

    def test_default_fee_from_settings(self, ledger, drop):
        sale = ledger.create_sale(drop.id, SaleCreate(sale_price=Decimal("1000")))

        assert sale.fee_percent == Decimal("5")
        assert sale.net_amount == Decimal("950.00")

    def test_sale_for_missing_drop(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.create_sale(42, SaleCreate(sale_price=Decimal("10")))

    def test_sale_for_not_dropped_is_invalid_state(self, ledger, not_dropped):
        with pytest.raises(InvalidStateError):
            ledger.create_sale(not_dropped.id, SaleCreate(sale_price=Decimal("10")))

    def test_second_sale_conflicts(self, ledger, sold_drop):
        with pytest.raises(ConflictError):
            ledger.create_sale(sold_drop.id, SaleCreate(sale_price=Decimal("10")))

    def test_negative_price_is_rejected_not_clamped(self, ledger, drop):
        data = SaleCreate.model_construct(sale_price=Decimal("-1"), fee_percent=None, sale_date=None, platform=None)

        with pytest.raises(ValidationError):
            ledger.create_sale(drop.id, data)

    def test_update_fee_only_recomputes_with_stored_price(self, ledger, sold_drop):
        sale = ledger.update_sale(sold_drop.id, SaleUpdate(fee_percent=Decimal("10")))

        assert sale.sale_price == Decimal("150000.00")
        assert sale.fee_amount == Decimal("15000.00")
        assert sale.net_amount == Decimal("135000.00")

    def test_update_platform_keeps_amounts(self, ledger, sold_drop):
        sale = ledger.update_sale(sold_drop.id, SaleUpdate(platform="Marktplatz"))

        assert sale.platform == "Marktplatz"
        assert sale.net_amount == Decimal("142500.00")

    def test_update_missing_sale(self, ledger, drop):
        with pytest.raises(NotFoundError):
            ledger.update_sale(drop.id, SaleUpdate(sale_price=Decimal("5")))

    def test_delete_sale_keeps_shares(self, ledger, sold_drop, players):
        ledger.equal_split(sold_drop.id, [p.id for p in players])

        ledger.delete_sale(sold_drop.id)

        assert len(ledger.list_shares(sold_drop.id)) == 4
        reconciliation = ledger.get_reconciliation(sold_drop.id)
        assert reconciliation.has_sale is False
        assert reconciliation.remaining == Decimal("-142500.00")


class TestFinanceStatus:
    """Zustandsübergänge des Finanzstatus"""

    def test_new_sale_resets_personal_to_wait(self, ledger, drop):
        ledger.set_finance_status(drop.id, FinanceStatus.PERSONAL)

        ledger.create_sale(drop.id, SaleCreate(sale_price=Decimal("100")))

        assert ledger.get_drop(drop.id).finance_status == FinanceStatus.WAIT

    @pytest.mark.parametrize("first,second", [
        (FinanceStatus.PAID, FinanceStatus.WAIT),
        (FinanceStatus.PERSONAL, FinanceStatus.PAID),
        (FinanceStatus.WAIT, FinanceStatus.PERSONAL),
    ])
    def test_all_states_reachable_manually(self, ledger, drop, first, second):
        ledger.set_finance_status(drop.id, first)
        ledger.set_finance_status(drop.id, second)

        assert ledger.get_drop(drop.id).finance_status == second

    def test_manual_status_without_sale(self, ledger, not_dropped):
        drop = ledger.set_finance_status(not_dropped.id, FinanceStatus.PAID)

        assert drop.finance_status == FinanceStatus.PAID

    def test_paid_shares_do_not_flip_drop(self, ledger, sold_drop, players):
        # Given
        shares = ledger.equal_split(sold_drop.id, [p.id for p in players])

        # When
        for share in shares:
            ledger.set_share_paid_status(share.id, PaidStatus.PAID)

        # Then
        assert ledger.get_drop(sold_drop.id).finance_status == FinanceStatus.WAIT

    def test_cannot_mark_sold_drop_as_not_dropped(self, ledger, sold_drop):
        with pytest.raises(InvalidStateError):
            ledger.update_drop(sold_drop.id, DropUpdate(drop_status=DropStatus.NOT_DROPPED))

    def test_drop_status_freely_editable_without_sale(self, ledger, drop):
        ledger.update_drop(drop.id, DropUpdate(drop_status=DropStatus.NOT_DROPPED))
        updated = ledger.update_drop(drop.id, DropUpdate(drop_status=DropStatus.DROPPED))

        assert updated.drop_status == DropStatus.DROPPED


class TestManualShares:
    """Einzelne Anteile"""

    def test_create_share_keeps_amount_and_percent_as_given(self, ledger, sold_drop, players):
        share = ledger.create_share(sold_drop.id, ShareCreate(
            player_id=players[0].id,
            share_type=ShareType.PERSONAL,
            percent=Decimal("10"),
            amount=Decimal("1"),
        ))

        assert share.amount == Decimal("1.00")
        assert share.percent == Decimal("10.00")
        assert share.paid_status == PaidStatus.WAIT

    def test_share_requires_existing_player(self, ledger, sold_drop):
        with pytest.raises(ValidationError):
            ledger.create_share(sold_drop.id, ShareCreate(player_id=999, amount=Decimal("1")))

    def test_share_requires_existing_drop(self, ledger, players):
        with pytest.raises(NotFoundError):
            ledger.create_share(42, ShareCreate(player_id=players[0].id, amount=Decimal("1")))

    def test_share_without_sale_is_allowed(self, ledger, drop, players):
        share = ledger.create_share(drop.id, ShareCreate(player_id=players[0].id, amount=Decimal("5")))

        assert share.drop_id == drop.id

    def test_update_share_revalidates_player(self, ledger, sold_drop, players):
        share = ledger.create_share(sold_drop.id, ShareCreate(player_id=players[0].id, amount=Decimal("1")))

        with pytest.raises(ValidationError):
            ledger.update_share(share.id, ShareUpdate(player_id=999))

    def test_delete_share(self, ledger, sold_drop, players):
        share = ledger.create_share(sold_drop.id, ShareCreate(player_id=players[0].id, amount=Decimal("1")))

        ledger.delete_share(share.id)

        with pytest.raises(NotFoundError):
            ledger.get_share(share.id)
