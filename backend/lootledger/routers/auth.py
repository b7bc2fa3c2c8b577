import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lootledger.database import get_db
from lootledger.schemas.auth import LoginRequest, TokenResponse, Identity, PasswordChange
from lootledger.services.players import PlayerService
from lootledger.auth.jwt import create_access_token, get_current_identity

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, db: Session = Depends(get_db)):
    """
    Login mit Username/Passwort.
    Gibt JWT-Token zurück wenn erfolgreich.
    """
    identity = PlayerService(db).authenticate(data.username, data.password)
    logger.info("Login: %s (%s)", identity.subject, identity.role.value)
    return TokenResponse(
        access_token=create_access_token(identity.subject, identity.role),
        role=identity.role,
    )


@router.get("/me", response_model=Identity)
async def get_me(identity: Identity = Depends(get_current_identity)):
    return identity


@router.post("/change-password")
async def change_password(
    data: PasswordChange,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Ändert das eigene Passwort (nur für Spieler mit Login)."""
    PlayerService(db).change_password(identity.subject, data.old_password, data.new_password)
    return {"success": True, "message": "Passwort geändert"}
