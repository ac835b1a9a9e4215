"""
Base Service.

Base class for services providing common patterns for business logic:
required-field validation and structured operation logging.

Usage:
    from notekeeper.backend.services.base import BaseService

    class NoteService(BaseService):
        def __init__(self, repo: NoteRepository) -> None:
            super().__init__()
            self.repo = repo
"""

from typing import Any

from notekeeper.backend.core.exceptions import ValidationError
from notekeeper.backend.core.logging import get_logger


class BaseService:
    """
    Base class for all services.

    Subclasses should call super().__init__() and set up their
    repositories in __init__.
    """

    def __init__(self) -> None:
        self._logger = get_logger(self.__class__.__module__)

    def _validate_required(
        self,
        fields: dict[str, Any],
        field_names: list[str],
    ) -> None:
        """
        Validate that required fields are present and not empty.

        Args:
            fields: Dictionary of field names to values
            field_names: List of required field names

        Raises:
            ValidationError: If any required field is missing or empty
        """
        missing = []
        for name in field_names:
            value = fields.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)

        if missing:
            raise ValidationError(
                "Required fields missing",
                details={"missing_fields": missing},
            )

    def _log_operation(self, operation: str, **context: Any) -> None:
        """Log a service operation with context."""
        self._logger.info(operation, service=self.__class__.__name__, **context)

    def _log_debug(self, message: str, **context: Any) -> None:
        """Log debug information."""
        self._logger.debug(message, service=self.__class__.__name__, **context)
