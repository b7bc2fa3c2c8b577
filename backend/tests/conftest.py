import os

# Vor dem ersten Import von lootledger setzen (Settings sind gecacht)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "admin-secret"
os.environ["DISCORD_WEBHOOK_URL"] = ""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import lootledger.models  # noqa: F401
from lootledger.auth.jwt import create_access_token
from lootledger.database import Base, get_db
from lootledger.main import app
from lootledger.models.enums import DropStatus, ItemCategory, PlayerRole
from lootledger.repositories import PlayerRepository
from lootledger.schemas.drop import DropCreate
from lootledger.schemas.item import BossCreate, ItemCreate
from lootledger.schemas.sale import SaleCreate
from lootledger.services.catalog import CatalogService
from lootledger.services.ledger import LedgerService
from lootledger.services.notifications import Notifier, get_notifier


class RecordingNotifier(Notifier):
    """Merkt sich alle Benachrichtigungen statt sie zu senden."""

    def __init__(self):
        self.calls = []

    def notify_new_drop(self, item_name, boss_name=None):
        self.calls.append(("new_drop", item_name, boss_name))

    def notify_sale(self, item_name, price, net_amount):
        self.calls.append(("sale", item_name, price, net_amount))

    def notify_dividend(self, item_name, amount_per_person, recipient_count):
        self.calls.append(("dividend", item_name, amount_per_person, recipient_count))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def ledger(db, notifier):
    return LedgerService(db, notifier)


@pytest.fixture
def item(db):
    return CatalogService(db).create_item(ItemCreate(name="Kronjuwel", category=ItemCategory.ACCESSORY))


@pytest.fixture
def boss(db):
    return CatalogService(db).create_boss(BossCreate(name="Kutum", location="Wüste"))


@pytest.fixture
def make_player(db):
    """Legt Spieler direkt über das Repository an (ohne bcrypt)."""
    repo = PlayerRepository(db)

    def _make(name, username=None, role=PlayerRole.MEMBER, active=True):
        player = repo.create({"name": name, "username": username, "role": role, "active": active})
        db.commit()
        return player

    return _make


@pytest.fixture
def players(make_player):
    return [make_player(name) for name in ("Aria", "Borin", "Cale", "Dara")]


@pytest.fixture
def drop(ledger, item, boss):
    return ledger.create_drop(DropCreate(
        item_id=item.id,
        boss_id=boss.id,
        drop_date=date(2026, 3, 1),
        participant_count=4,
    ))


@pytest.fixture
def not_dropped(ledger, item):
    return ledger.create_drop(DropCreate(
        item_id=item.id,
        participant_count=4,
        drop_status=DropStatus.NOT_DROPPED,
    ))


@pytest.fixture
def sold_drop(ledger, drop):
    """Drop mit Verkauf: 150000 bei 5% Gebühr -> Netto 142500.00."""
    ledger.create_sale(drop.id, SaleCreate(sale_price=Decimal("150000"), fee_percent=Decimal("5")))
    return drop


@pytest.fixture
def client(db, notifier):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    token = create_access_token("admin", PlayerRole.ADMIN)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def member_headers(make_player):
    make_player("Mira", username="mira")
    token = create_access_token("mira", PlayerRole.MEMBER)
    return {"Authorization": f"Bearer {token}"}
