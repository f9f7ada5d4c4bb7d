"""
Base Service.

Base class for services that own their database transactions.
Services orchestrate repositories, run each operation in one
transaction, and translate SQLAlchemy failures into application
exceptions.

Usage:
    from mynotes.services.base import BaseService

    class ColorService(BaseService):
        async def count(self) -> int:
            async with self._transaction("count_colors") as session:
                return await ColorRepository(session).count()
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mynotes.core.exceptions import (
    ConflictError,
    DatabaseError,
    StorageUnavailableError,
)
from mynotes.core.logging import get_logger

logger = get_logger(__name__)


class BaseService:
    """
    Base class for all services.

    Provides:
    - Per-operation session and transaction handling
    - Logging context
    - Error wrapping for database operations

    Subclasses should:
    - Call super().__init__(session_factory) in their __init__
    - Open repositories inside ``self._transaction(...)``
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """
        Initialize the service with a session factory.

        Args:
            session_factory: Factory producing SQLAlchemy async sessions
        """
        self._session_factory = session_factory
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get the session factory."""
        return self._session_factory

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """
        Run a block in one session and one transaction.

        The transaction commits when the block exits normally and rolls
        back on any exception, including task cancellation. Application
        errors raised in the block pass through unchanged.

        Args:
            operation: Description of the operation for logging

        Raises:
            ConflictError: For unique constraint violations
            StorageUnavailableError: When the database cannot be reached
            DatabaseError: For other database errors
        """
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield session
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e)},
            )
            error_str = str(e).lower()
            if "unique" in error_str or "duplicate" in error_str:
                raise ConflictError("Resource already exists") from e
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except OperationalError as e:
            self._logger.error(
                "Database unavailable",
                extra={"operation": operation, "error": str(e)},
            )
            raise StorageUnavailableError(f"Storage unavailable: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
