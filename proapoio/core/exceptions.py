"""Domain error taxonomy for the proposal workflow.

Every error carries the HTTP status it maps to; the handlers registered in
``proapoio.main`` turn them into JSON bodies of the form
``{"message": ..., "errors": {...}}``.
"""

from typing import Dict, List, Optional

from fastapi import status


class DomainError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Requisição inválida."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict:
        return {"message": self.message}


class ValidationError(DomainError):
    """Malformed input, invalid target vacancy or duplicate proposal."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Dados inválidos."

    def __init__(self, errors: Dict[str, List[str]], message: Optional[str] = None):
        self.errors = errors
        super().__init__(message)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls({field: [message]})

    def to_dict(self) -> Dict:
        return {"message": self.message, "errors": self.errors}


class AuthenticationError(DomainError):
    """Missing or invalid credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Não autenticado."


class AuthorizationError(DomainError):
    """The actor is not allowed to perform the action."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Acesso negado."


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Recurso não encontrado."


class StateConflictError(DomainError):
    """Transition attempted on a proposal that is no longer SENT."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Proposta já finalizada."
