"""
Application error hierarchy.

Services raise these; the exception handlers in ``sarradabet.main`` turn
them into the ``{success: false, message, errors?}`` envelope.  Anything
that is not an ``AppError`` is treated as an unexpected 500.
"""

from typing import Any, Dict, Optional, Union


class AppError(Exception):
    """Base class for expected, client-facing failures."""

    status_code = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
        is_operational: bool = True,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.context = context
        self.is_operational = is_operational


class BadRequestError(AppError):
    status_code = 400


class ValidationError(AppError):
    status_code = 400


class UnauthorizedError(AppError):
    status_code = 401

    def __init__(self, message: str = "Authentication required", **kwargs):
        super().__init__(message, **kwargs)


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, entity: str, entity_id: Optional[Union[int, str]] = None, **kwargs):
        if entity_id is None:
            message = entity if entity.endswith("not found") else f"{entity} not found"
        else:
            message = f"{entity} with id {entity_id} not found"
        super().__init__(message, **kwargs)


class ConflictError(AppError):
    status_code = 409
