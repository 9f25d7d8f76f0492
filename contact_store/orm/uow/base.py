"""Base Unit of Work for contact-store.

Provides the session lifecycle and transaction operations shared by every
Unit of Work.
"""

from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy.orm import Session
from typing_extensions import Self

from contact_store.exceptions import SessionNotSetError


class BaseUnitOfWork(ABC):
    """Abstract base class for Unit of Work pattern.

    Provides common functionality for managing database transactions:
    - Session lifecycle management (context manager)
    - Transaction operations (commit, rollback, flush)
    - Lazy repository initialization helper

    Subclasses must implement:
    - `_reset_repositories()`: Drop cached repositories on exit
    - Repository properties using `_get_repository()` helper
    """

    def __init__(self, session_factory: Any):
        """Initialize Unit of Work with a session factory.

        Args:
            session_factory: Callable returning a new SQLAlchemy session, such as a
                sessionmaker or an EntityManagerFactory.
        """
        self.session_factory = session_factory
        self.session: Session | None = None

    def __enter__(self) -> Self:
        """Enter the context manager and create a new session.

        Returns:
            Self for method chaining.
        """
        self.session = self.session_factory()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit the context manager and clean up session.

        Automatically rolls back if an exception occurred. The exception itself
        is not suppressed.

        Args:
            exc_type: Exception type if an error occurred.
            exc_val: Exception value if an error occurred.
            exc_tb: Exception traceback if an error occurred.
        """
        if exc_type is not None:
            self.rollback()
        if self.session:
            self.session.close()
            self.session = None
        self._reset_repositories()

    @abstractmethod
    def _reset_repositories(self) -> None:
        """Reset all repository references to None.

        Called during cleanup to ensure repositories are recreated on next access.
        """
        ...

    def _get_repository(self, repo_attr: str, repo_class: type) -> Any:
        """Helper method for lazy repository initialization.

        Args:
            repo_attr: Name of the private repository attribute (e.g., "_contact_repo").
            repo_class: Repository class to instantiate with the current session.

        Returns:
            Repository instance.

        Raises:
            SessionNotSetError: If session is not initialized.
        """
        if self.session is None:
            raise SessionNotSetError

        cached_repo = getattr(self, repo_attr, None)
        if cached_repo is not None:
            return cached_repo

        repo = repo_class(self.session)
        setattr(self, repo_attr, repo)
        return repo

    def commit(self) -> None:
        """Commit the current transaction."""
        if self.session:
            self.session.commit()

    def rollback(self) -> None:
        """Rollback the current transaction."""
        if self.session:
            self.session.rollback()

    def flush(self) -> None:
        """Flush pending changes without committing."""
        if self.session:
            self.session.flush()
