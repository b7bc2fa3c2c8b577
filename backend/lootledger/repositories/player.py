from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from lootledger.exceptions import ConflictError
from lootledger.models.player import Player
from lootledger.repositories.base import BaseRepository, name_key
from lootledger.schemas.player import PlayerQuery


class PlayerRepository(BaseRepository[Player]):
    def __init__(self, db: Session):
        super().__init__(Player, db)

    def list(self, query: Optional[PlayerQuery] = None) -> List[Player]:
        query = query or PlayerQuery()
        q = self.query()

        if query.search:
            pattern = f"%{name_key(query.search)}%"
            q = q.filter(or_(
                Player.name_key.like(pattern),
                func.lower(Player.discord_id).like(pattern),
            ))
        if query.active is not None:
            q = q.filter(Player.active == query.active)
        if query.role is not None:
            q = q.filter(Player.role == query.role)

        q = q.order_by(Player.created_at.desc(), Player.id.desc())
        return self._paginate(q, query.limit, query.offset).all()

    def find_by_name(self, name: str) -> Optional[Player]:
        return self.query().filter(Player.name_key == name_key(name)).first()

    def find_by_username(self, username: str) -> Optional[Player]:
        return self.query().filter(Player.username_key == name_key(username)).first()

    def get_many(self, player_ids: List[int]) -> List[Player]:
        if not player_ids:
            return []
        return self.query().filter(Player.id.in_(player_ids)).all()

    def create(self, data: Dict[str, Any]) -> Player:
        self._check_unique(data)
        return super().create(self._with_keys(data))

    def update(self, entity_id: int, data: Dict[str, Any]) -> Optional[Player]:
        if self.get(entity_id) is None:
            return None
        self._check_unique(data, exclude_id=entity_id)
        return super().update(entity_id, self._with_keys(data))

    @staticmethod
    def _with_keys(data: Dict[str, Any]) -> Dict[str, Any]:
        data = dict(data)
        if "name" in data:
            data["name_key"] = name_key(data["name"])
        if "username" in data:
            data["username_key"] = name_key(data["username"])
        return data

    def _check_unique(self, data: Dict[str, Any], exclude_id: Optional[int] = None) -> None:
        """Name und Username sind case-insensitive eindeutig."""
        name = data.get("name")
        if name:
            existing = self.find_by_name(name)
            if existing and existing.id != exclude_id:
                raise ConflictError(f"Spielername '{name}' ist bereits vergeben")

        username = data.get("username")
        if username:
            existing = self.find_by_username(username)
            if existing and existing.id != exclude_id:
                raise ConflictError(f"Username '{username}' ist bereits vergeben")
