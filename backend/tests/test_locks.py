import threading
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from lootledger.database import Base
from lootledger.exceptions import ValidationError
from lootledger.locks import KeyedLock, drop_locks
from lootledger.models.enums import ItemCategory, PlayerRole, ShareType
from lootledger.money import round2
from lootledger.repositories import PlayerRepository, ShareRepository
from lootledger.schemas.drop import DropCreate
from lootledger.schemas.item import ItemCreate
from lootledger.schemas.sale import SaleCreate
from lootledger.schemas.share import ShareCreate
from lootledger.services.base import BaseService
from lootledger.services.catalog import CatalogService
from lootledger.services.ledger import LedgerService

WAIT = 5


def _hold_and_signal(lock, key, entered):
    with lock.hold(key):
        entered.set()


class TestKeyedLock:
    """Ein Lock pro Schlüssel"""

    def test_same_key_blocks_other_thread(self):
        lock = KeyedLock()
        entered = threading.Event()
        worker = threading.Thread(target=_hold_and_signal, args=(lock, 1, entered))

        with lock.hold(1):
            worker.start()
            assert not entered.wait(0.2)

        worker.join(WAIT)
        assert entered.is_set()

    def test_different_keys_do_not_block(self):
        lock = KeyedLock()
        entered = threading.Event()
        worker = threading.Thread(target=_hold_and_signal, args=(lock, 2, entered))

        with lock.hold(1):
            worker.start()
            assert entered.wait(WAIT)

        worker.join(WAIT)

    def test_reentrant_in_same_thread(self):
        lock = KeyedLock()

        with lock.hold("drops"):
            with lock.hold("drops"):
                assert len(lock) == 1

        assert len(lock) == 0

    def test_entry_released_when_unused(self):
        lock = KeyedLock()

        for drop_id in range(100):
            with lock.hold(drop_id):
                pass

        assert len(lock) == 0


class TestTransaction:
    """BaseService.transaction: ein Commit, bei Fehler Rollback"""

    def test_failure_rolls_back_and_releases_lock(self, db):
        service = BaseService(db)
        lock = KeyedLock()

        # Given: Schreibzugriff, danach Fehler innerhalb des Locks
        with pytest.raises(RuntimeError):
            with service.transaction(lock.hold("players")):
                PlayerRepository(db).create({"name": "Aria", "role": PlayerRole.MEMBER, "active": True})
                raise RuntimeError("Abbruch")

        # Then: nichts gespeichert, Lock wieder frei
        assert PlayerRepository(db).find_by_name("Aria") is None
        entered = threading.Event()
        worker = threading.Thread(target=_hold_and_signal, args=(lock, "players", entered))
        worker.start()
        assert entered.wait(WAIT)
        worker.join(WAIT)
        assert len(lock) == 0

    def test_success_commits(self, db):
        service = BaseService(db)

        with service.transaction(KeyedLock().hold("players")):
            PlayerRepository(db).create({"name": "Aria", "role": PlayerRole.MEMBER, "active": True})
        db.rollback()

        assert PlayerRepository(db).find_by_name("Aria") is not None


@pytest.fixture
def file_sessions(tmp_path):
    """Datei-Datenbank: jeder Thread bekommt eine eigene Verbindung."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'ledger.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def seeded(file_sessions):
    """Verkaufter Drop (Netto 142500.00) und vier Spieler."""
    session = file_sessions()
    try:
        item = CatalogService(session).create_item(ItemCreate(name="Kronjuwel", category=ItemCategory.ACCESSORY))
        repo = PlayerRepository(session)
        player_ids = [
            repo.create({"name": name, "role": PlayerRole.MEMBER, "active": True}).id
            for name in ("Aria", "Borin", "Cale", "Dara")
        ]
        session.commit()

        ledger = LedgerService(session)
        drop = ledger.create_drop(DropCreate(item_id=item.id, participant_count=4))
        ledger.create_sale(drop.id, SaleCreate(sale_price=Decimal("150000"), fee_percent=Decimal("5")))
        return drop.id, player_ids
    finally:
        session.close()


def _in_own_session(sessions, action, errors):
    session = sessions()
    try:
        action(LedgerService(session))
    except Exception as exc:
        errors.append(exc)
    finally:
        session.close()


def _start(sessions, action, errors):
    worker = threading.Thread(target=_in_own_session, args=(sessions, action, errors))
    worker.start()
    return worker


def _shares(sessions, drop_id):
    session = sessions()
    try:
        return ShareRepository(session).list_by_drop_id(drop_id)
    finally:
        session.close()


class TestConcurrentShareWrites:
    """Schreibzugriffe auf die Anteile eines Drops laufen nacheinander"""

    def test_split_and_manual_share_wait_for_drop_lock(self, file_sessions, seeded):
        drop_id, player_ids = seeded
        errors = []
        manual = ShareCreate(player_id=player_ids[0], share_type=ShareType.PERSONAL, amount=Decimal("1000"))

        # Given: Drop-Lock ist belegt
        with drop_locks.hold(drop_id):
            workers = [
                _start(file_sessions, lambda ledger: ledger.equal_split(drop_id, player_ids), errors),
                _start(file_sessions, lambda ledger: ledger.create_share(drop_id, manual), errors),
            ]
            for worker in workers:
                worker.join(0.2)

            # Then: beide warten, noch nichts geschrieben
            assert all(worker.is_alive() for worker in workers)
            assert _shares(file_sessions, drop_id) == []

        for worker in workers:
            worker.join(WAIT)

        assert errors == []
        shares = _shares(file_sessions, drop_id)
        auto = [s for s in shares if s.share_type == ShareType.AUTO]
        # Split zuletzt: nur AUTO; manueller Anteil zuletzt: AUTO + PERSONAL
        assert len(auto) == 4
        assert {s.amount for s in auto} == {Decimal("35625.00")}
        assert len(shares) in (4, 5)

    def test_parallel_splits_leave_one_complete_share_set(self, file_sessions, seeded):
        drop_id, player_ids = seeded
        errors = []
        groups = [player_ids[:2], player_ids[:3], player_ids, player_ids[1:], player_ids[2:]]

        workers = [
            _start(file_sessions, lambda ledger, group=group: ledger.equal_split(drop_id, group), errors)
            for group in groups
        ]
        for worker in workers:
            worker.join(WAIT)

        assert errors == []
        shares = _shares(file_sessions, drop_id)
        recipients = sorted(s.player_id for s in shares)
        assert recipients in [sorted(group) for group in groups]
        assert {s.amount for s in shares} == {round2(Decimal("142500") / len(shares))}

    def test_failed_split_keeps_shares_and_frees_lock(self, file_sessions, seeded):
        drop_id, player_ids = seeded
        session = file_sessions()
        try:
            ledger = LedgerService(session)
            ledger.equal_split(drop_id, player_ids)

            # When: Split mit unbekanntem Spieler
            with pytest.raises(ValidationError):
                ledger.equal_split(drop_id, [player_ids[0], 9999])
        finally:
            session.close()

        # Then: alte Anteile stehen noch, ein anderer Thread kommt an den Lock
        assert len(_shares(file_sessions, drop_id)) == 4
        errors = []
        manual = ShareCreate(player_id=player_ids[1], share_type=ShareType.PERSONAL, amount=Decimal("500"))
        worker = _start(file_sessions, lambda ledger: ledger.create_share(drop_id, manual), errors)
        worker.join(WAIT)

        assert not worker.is_alive()
        assert errors == []
        assert len(_shares(file_sessions, drop_id)) == 5
        assert len(drop_locks) == 0

    def test_deleted_drop_leaves_no_lock_entry(self, file_sessions, seeded):
        drop_id, _ = seeded
        session = file_sessions()
        try:
            LedgerService(session).delete_drop(drop_id)
        finally:
            session.close()

        assert len(drop_locks) == 0
