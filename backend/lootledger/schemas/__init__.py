from lootledger.schemas.player import PlayerCreate, PlayerUpdate, PlayerResponse, PlayerQuery
from lootledger.schemas.item import (
    ItemCreate, ItemUpdate, ItemResponse, ItemQuery,
    BossCreate, BossUpdate, BossResponse, BossQuery,
)
from lootledger.schemas.sale import SaleCreate, SaleUpdate, SaleResponse, SaleStats
from lootledger.schemas.share import (
    ShareCreate, ShareUpdate, ShareResponse, ShareWithPlayerResponse, ShareQuery,
    ShareStats, PaidStatusUpdate, EqualSplitRequest, BuyOutRequest, Reconciliation,
)
from lootledger.schemas.drop import (
    DropCreate, DropUpdate, DropResponse, DropDetailResponse, DropQuery, FinanceStatusUpdate,
)
from lootledger.schemas.dashboard import AdminStats, DashboardResponse, SummaryStats, SummaryResponse
from lootledger.schemas.auth import LoginRequest, TokenResponse, Identity, PasswordChange
