from lootledger.models.enums import (
    PlayerRole, ItemCategory, DropStatus, FinanceStatus, ShareType, PaidStatus
)
from lootledger.models.player import Player
from lootledger.models.item import Item, Boss
from lootledger.models.drop import Drop
from lootledger.models.sale import Sale
from lootledger.models.share import Share

__all__ = [
    "PlayerRole",
    "ItemCategory",
    "DropStatus",
    "FinanceStatus",
    "ShareType",
    "PaidStatus",
    "Player",
    "Item",
    "Boss",
    "Drop",
    "Sale",
    "Share",
]
