from lootledger.exceptions import AuthorizationError
from lootledger.schemas.auth import Identity


def check_admin(identity: Identity) -> bool:
    """Hilfsfunktion: Prüft ob die Identität Admin ist."""
    if not identity.is_admin:
        raise AuthorizationError()
    return True
