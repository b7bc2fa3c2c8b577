from typing import List, Optional

from sqlalchemy.orm import Session

from lootledger.exceptions import ConflictError, NotFoundError, ValidationError
from lootledger.locks import collection_locks
from lootledger.models.item import Boss, Item
from lootledger.repositories import BossRepository, DropRepository, ItemRepository
from lootledger.schemas.item import BossCreate, BossQuery, BossUpdate, ItemCreate, ItemQuery, ItemUpdate
from lootledger.services.base import BaseService


class CatalogService(BaseService):
    """Stammdaten: Items und Bosse."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.items = ItemRepository(db)
        self.bosses = BossRepository(db)
        self.drops = DropRepository(db)

    # Items

    def list_items(self, query: Optional[ItemQuery] = None) -> List[Item]:
        return self.items.list(query)

    def get_item(self, item_id: int) -> Item:
        item = self.items.get(item_id)
        if not item:
            raise NotFoundError("Item nicht gefunden", {"item_id": item_id})
        return item

    def create_item(self, data: ItemCreate) -> Item:
        with self.transaction(collection_locks.hold("items")):
            item = self.items.create(data.model_dump())
        return item

    def update_item(self, item_id: int, data: ItemUpdate) -> Item:
        changes = data.model_dump(exclude_unset=True)
        for field in ("name", "category", "tradeable"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} darf nicht leer sein")

        with self.transaction(collection_locks.hold("items")):
            self.get_item(item_id)
            item = self.items.update(item_id, changes)
        return item

    def delete_item(self, item_id: int) -> None:
        with self.transaction(collection_locks.hold("items")):
            self.get_item(item_id)
            drop_count = self.drops.count_by_item_id(item_id)
            if drop_count:
                raise ConflictError(
                    "Item wird noch von Drops verwendet",
                    {"item_id": item_id, "drop_count": drop_count},
                )
            self.items.remove(item_id)

    # Bosse

    def list_bosses(self, query: Optional[BossQuery] = None) -> List[Boss]:
        return self.bosses.list(query)

    def get_boss(self, boss_id: int) -> Boss:
        boss = self.bosses.get(boss_id)
        if not boss:
            raise NotFoundError("Boss nicht gefunden", {"boss_id": boss_id})
        return boss

    def create_boss(self, data: BossCreate) -> Boss:
        with self.transaction(collection_locks.hold("bosses")):
            boss = self.bosses.create(data.model_dump())
        return boss

    def update_boss(self, boss_id: int, data: BossUpdate) -> Boss:
        changes = data.model_dump(exclude_unset=True)
        if "name" in changes and changes["name"] is None:
            raise ValidationError("name darf nicht leer sein")

        with self.transaction(collection_locks.hold("bosses")):
            self.get_boss(boss_id)
            boss = self.bosses.update(boss_id, changes)
        return boss

    def delete_boss(self, boss_id: int) -> None:
        with self.transaction(collection_locks.hold("bosses")):
            self.get_boss(boss_id)
            drop_count = self.drops.count_by_boss_id(boss_id)
            if drop_count:
                raise ConflictError(
                    "Boss wird noch von Drops verwendet",
                    {"boss_id": boss_id, "drop_count": drop_count},
                )
            self.bosses.remove(boss_id)
