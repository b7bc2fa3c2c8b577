from lootledger.repositories.player import PlayerRepository
from lootledger.repositories.item import ItemRepository, BossRepository
from lootledger.repositories.drop import DropRepository
from lootledger.repositories.sale import SaleRepository
from lootledger.repositories.share import ShareRepository

__all__ = [
    "PlayerRepository",
    "ItemRepository",
    "BossRepository",
    "DropRepository",
    "SaleRepository",
    "ShareRepository",
]
