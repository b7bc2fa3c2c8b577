from pydantic import BaseModel, Field
from lootledger.models.enums import PlayerRole


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: PlayerRole


class Identity(BaseModel):
    """Aufgelöste Identität aus dem Token."""
    subject: str
    role: PlayerRole

    @property
    def is_admin(self) -> bool:
        return self.role == PlayerRole.ADMIN


class PasswordChange(BaseModel):
    old_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)
