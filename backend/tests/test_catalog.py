import pytest

from lootledger.exceptions import ConflictError, NotFoundError
from lootledger.models.enums import ItemCategory
from lootledger.schemas.item import BossCreate, BossQuery, ItemCreate, ItemQuery, ItemUpdate
from lootledger.services.catalog import CatalogService


@pytest.fixture
def catalog(db):
    return CatalogService(db)


class TestItems:
    """Item-Katalog"""

    def test_duplicate_name_conflicts(self, catalog, item):
        with pytest.raises(ConflictError):
            catalog.create_item(ItemCreate(name="KRONJUWEL", category=ItemCategory.MATERIAL))

    def test_umlaut_name_differs_only_in_case(self, catalog):
        catalog.create_item(ItemCreate(name="Äxte", category=ItemCategory.WEAPON))

        with pytest.raises(ConflictError):
            catalog.create_item(ItemCreate(name="äxte", category=ItemCategory.WEAPON))

    def test_rename_to_taken_umlaut_name_conflicts(self, catalog, item):
        catalog.create_item(ItemCreate(name="Öl", category=ItemCategory.MATERIAL))

        with pytest.raises(ConflictError):
            catalog.update_item(item.id, ItemUpdate(name="öL"))

    def test_search_and_category_filter(self, catalog, item):
        catalog.create_item(ItemCreate(name="Blutschwert", category=ItemCategory.WEAPON, sub_type="Zweihänder"))

        weapons = catalog.list_items(ItemQuery(category=ItemCategory.WEAPON))
        found = catalog.list_items(ItemQuery(search="zweih"))

        assert [i.name for i in weapons] == ["Blutschwert"]
        assert [i.name for i in found] == ["Blutschwert"]

    def test_update_item(self, catalog, item):
        updated = catalog.update_item(item.id, ItemUpdate(tradeable=False))

        assert updated.tradeable is False

    def test_delete_blocked_while_referenced(self, catalog, drop):
        with pytest.raises(ConflictError):
            catalog.delete_item(drop.item_id)

    def test_delete_unused_item(self, catalog, item):
        catalog.delete_item(item.id)

        with pytest.raises(NotFoundError):
            catalog.get_item(item.id)


class TestBosses:
    """Bosse"""

    def test_sorted_by_name(self, catalog):
        catalog.create_boss(BossCreate(name="Nouver"))
        catalog.create_boss(BossCreate(name="Garmoth"))

        assert [b.name for b in catalog.list_bosses(BossQuery())] == ["Garmoth", "Nouver"]

    def test_umlaut_name_differs_only_in_case(self, catalog):
        catalog.create_boss(BossCreate(name="Ödland"))

        with pytest.raises(ConflictError):
            catalog.create_boss(BossCreate(name="ÖDLAND"))

    def test_delete_blocked_while_referenced(self, catalog, drop):
        with pytest.raises(ConflictError):
            catalog.delete_boss(drop.boss_id)
