"""Fehler-Taxonomie des Ledgers.

Die Fehler sind transportunabhängig; ``main.py`` übersetzt sie an der
Request-Grenze in JSON-Antworten mit dem passenden HTTP-Status.
"""
from typing import Any, Dict, Optional

from fastapi import status


class LedgerError(Exception):
    """Basis für alle fachlichen Fehler."""
    status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "LEDGER_ERROR"
    default_message: str = "Fehler im Ledger"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            },
        }


class ValidationError(LedgerError):
    """Ungültige oder fehlende Eingabe (z.B. unbekannte Referenz-ID)."""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION"
    default_message = "Ungültige Eingabe"


class NotFoundError(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_message = "Nicht gefunden"


class ConflictError(LedgerError):
    """Doppelter eindeutiger Schlüssel (Name, Username, Verkauf pro Drop)."""
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_message = "Konflikt mit bestehendem Eintrag"


class InvalidStateError(LedgerError):
    """Aktion im aktuellen Lebenszyklus-Zustand nicht erlaubt."""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_STATE"
    default_message = "Aktion im aktuellen Zustand nicht möglich"


class AuthenticationError(LedgerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTHENTICATION"
    default_message = "Nicht angemeldet"


class AuthorizationError(LedgerError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "AUTHORIZATION"
    default_message = "Diese Aktion erfordert die Rolle: admin"
