import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from lootledger.auth.passwords import hash_password, verify_password
from lootledger.config import get_settings
from lootledger.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from lootledger.locks import collection_locks
from lootledger.models.enums import PlayerRole
from lootledger.models.player import Player
from lootledger.repositories import PlayerRepository, ShareRepository
from lootledger.schemas.auth import Identity
from lootledger.schemas.player import PlayerCreate, PlayerQuery, PlayerUpdate
from lootledger.services.base import BaseService

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    """Leere Formularfelder gelten als "nicht angegeben"."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class PlayerService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.players = PlayerRepository(db)
        self.shares = ShareRepository(db)

    def list_players(self, query: Optional[PlayerQuery] = None) -> List[Player]:
        return self.players.list(query)

    def get_player(self, player_id: int) -> Player:
        player = self.players.get(player_id)
        if not player:
            raise NotFoundError("Spieler nicht gefunden", {"player_id": player_id})
        return player

    def create_player(self, data: PlayerCreate) -> Player:
        values = self._clean(data.model_dump())
        if not values.get("name"):
            raise ValidationError("Name darf nicht leer sein")

        with self.transaction(collection_locks.hold("players")):
            player = self.players.create(values)

        logger.info("Spieler %s angelegt (%s)", player.id, player.name)
        return player

    def update_player(self, player_id: int, data: PlayerUpdate) -> Player:
        changes = data.model_dump(exclude_unset=True)
        # Leerer Username/Passwort = unverändert lassen
        for field in ("username", "password"):
            if field in changes and _blank_to_none(changes[field]) is None:
                del changes[field]
        for field in ("role", "active"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} darf nicht leer sein")
        if "name" in changes and _blank_to_none(changes["name"]) is None:
            raise ValidationError("Name darf nicht leer sein")

        values = self._clean(changes)
        with self.transaction(collection_locks.hold("players")):
            self.get_player(player_id)
            player = self.players.update(player_id, values)
        return player

    def deactivate_player(self, player_id: int) -> Player:
        """Soft-Delete: Spieler bleibt mit seinen Anteilen erhalten."""
        with self.transaction(collection_locks.hold("players")):
            self.get_player(player_id)
            player = self.players.update(player_id, {"active": False})
        logger.info("Spieler %s deaktiviert", player_id)
        return player

    def delete_player(self, player_id: int) -> None:
        with self.transaction(collection_locks.hold("players")):
            self.get_player(player_id)
            share_count = self.shares.count_by_player_id(player_id)
            if share_count:
                raise ConflictError(
                    "Spieler hat noch Anteile und kann nur deaktiviert werden",
                    {"player_id": player_id, "share_count": share_count},
                )
            self.players.remove(player_id)
        logger.info("Spieler %s gelöscht", player_id)

    def authenticate(self, username: str, password: str) -> Identity:
        """Login: zuerst der Admin aus der Umgebung, dann aktive Spieler mit Passwort."""
        settings = get_settings()
        if (
            settings.admin_username
            and settings.admin_password
            and username.lower() == settings.admin_username.lower()
            and password == settings.admin_password
        ):
            return Identity(subject=settings.admin_username, role=PlayerRole.ADMIN)

        player = self.players.find_by_username(username)
        if not player or not player.active or not player.password_hash:
            raise AuthenticationError("Ungültiger Benutzername oder Passwort")
        if not verify_password(password, player.password_hash):
            raise AuthenticationError("Ungültiger Benutzername oder Passwort")
        return Identity(subject=player.username, role=player.role)

    def change_password(self, username: str, old_password: str, new_password: str) -> None:
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Passwort muss mindestens {MIN_PASSWORD_LENGTH} Zeichen haben")

        with self.transaction(collection_locks.hold("players")):
            player = self.players.find_by_username(username)
            if not player:
                raise NotFoundError("Spieler nicht gefunden")
            if not player.password_hash or not verify_password(old_password, player.password_hash):
                raise ValidationError("Altes Passwort ist falsch")
            self.players.update(player.id, {"password_hash": hash_password(new_password)})
        logger.info("Passwort für Spieler %s geändert", player.id)

    @staticmethod
    def _clean(values: Dict[str, Any]) -> Dict[str, Any]:
        """Normalisiert Eingaben und ersetzt ``password`` durch ``password_hash``."""
        cleaned = dict(values)
        if "name" in cleaned:
            cleaned["name"] = _blank_to_none(cleaned["name"])
        if "discord_id" in cleaned:
            cleaned["discord_id"] = _blank_to_none(cleaned["discord_id"])

        if "username" in cleaned:
            username = _blank_to_none(cleaned["username"])
            if username is not None and len(username) < MIN_USERNAME_LENGTH:
                raise ValidationError(f"Username muss mindestens {MIN_USERNAME_LENGTH} Zeichen haben")
            cleaned["username"] = username

        password = cleaned.pop("password", None)
        if password:
            if len(password) < MIN_PASSWORD_LENGTH:
                raise ValidationError(f"Passwort muss mindestens {MIN_PASSWORD_LENGTH} Zeichen haben")
            cleaned["password_hash"] = hash_password(password)
        return cleaned
