"""
Exceptions personnalisées pour Pollinations Relay.
"""
from typing import Optional

from .constants import ERROR_PREVIEW_LENGTH, GENERIC_ERROR_MESSAGE


class RelayError(Exception):
    """Exception de base pour toutes les erreurs du relais."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code or "unknown_error"
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"[{self.code}] {self.message} - Détails: {self.details}"
        return f"[{self.code}] {self.message}"

    def to_public_dict(self) -> dict:
        """
        Représentation JSON renvoyée par les routes.

        Le message détaillé peut contenir le texte brut de l'upstream:
        il reste dans les logs, le client ne reçoit que le code.
        """
        return {"code": self.code, "message": GENERIC_ERROR_MESSAGE}


class ConfigurationError(RelayError):
    """Erreur de configuration (fichier invalide, valeur invalide)."""

    def __init__(self, message: str, config_key: str = None):
        super().__init__(
            message=message,
            code="config_error",
            details={"key": config_key} if config_key else {}
        )


class InvalidRequestError(RelayError):
    """Requête entrante inutilisable (prompt vide, etc.)."""

    def __init__(self, message: str, field_name: str = None):
        super().__init__(
            message=message,
            code="invalid_request",
            details={"field": field_name} if field_name else {}
        )


class UpstreamConnectionError(RelayError):
    """Impossible de joindre l'API upstream (erreur réseau, pas de retry)."""

    def __init__(self, message: str, url: str = None):
        super().__init__(
            message=message,
            code="connection_error",
            details={"url": url} if url else {}
        )


class UpstreamStatusError(RelayError):
    """L'API upstream a répondu avec un statut non-2xx."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(
            message=message,
            code="upstream_status_error",
            details={"status_code": status_code} if status_code is not None else {}
        )
        self.status_code = status_code


class StreamParseError(RelayError):
    """Données upstream illisibles (JSON invalide, champ content absent)."""

    def __init__(self, message: str, raw_preview: str = None):
        details = {}
        if raw_preview:
            details["preview"] = raw_preview[:ERROR_PREVIEW_LENGTH]
        super().__init__(
            message=message,
            code="parse_error",
            details=details
        )


class MediaError(RelayError):
    """Échec de décodage / encodage d'une image ou d'une vidéo."""

    def __init__(self, message: str, media_type: str = None):
        super().__init__(
            message=message,
            code="media_error",
            details={"media_type": media_type} if media_type else {}
        )
