"""Core database functionality and configuration.

This module provides database management with environment-aware
configuration, connection pooling, and session handling.
"""

from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Optional, Dict, Any, Generator
import os

from sqlalchemy import create_engine, Engine, inspect
from sqlalchemy.orm import scoped_session, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..models import Base
from ..models.event import Event  # noqa
from ..config.environment import IS_PRODUCTION_ENVIRONMENT

logger = logging.getLogger(__name__)

class DatabaseConfig:
    """Database configuration settings."""

    def __init__(
        self,
        url: Optional[str] = None,
        sqlite_path: Optional[Path] = None,
        echo: bool = False,
        pool_size: int = 3,
        max_overflow: int = 4,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True
    ):
        """
        Initialize database configuration.

        In production environment, DATABASE_URL must be set in environment variables
        or provided explicitly via the url parameter.

        Args:
            url: Explicit SQLAlchemy URL. Takes precedence over everything else.
            sqlite_path: Path to SQLite database file (for development)
            echo: Whether to echo SQL statements
            pool_size: Size of the connection pool (permanent connections)
            max_overflow: Maximum number of extra connections to allow temporarily
                        (total connections = pool_size + max_overflow)
            pool_timeout: Seconds to wait for an available connection
            pool_recycle: Seconds before connections are recycled (prevent stale)
            pool_pre_ping: Whether to ping connections before using them

        Raises:
            ValueError: If in production environment and no database URL is provided
                      either via url parameter or DATABASE_URL env variable
        """
        if url:
            self.url = url
            self.sqlite_path = None
        elif IS_PRODUCTION_ENVIRONMENT:
            self.url = os.environ.get('DATABASE_URL')
            if not self.url:
                raise ValueError(
                    "Database URL must be provided either via url parameter "
                    "or DATABASE_URL environment variable when in production environment"
                )
            self.sqlite_path = None
        else:
            self.sqlite_path = sqlite_path or Path(__file__).parent.parent.parent / 'data' / 'whatsevent.db'
            self.url = f"sqlite:///{self.sqlite_path}"

        self.echo = echo
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.pool_pre_ping = pool_pre_ping

    @property
    def connection_url(self) -> str:
        """Get the database connection URL."""
        if not self.url:
            raise ValueError("Database URL not configured")
        return self.url

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured backend is SQLite."""
        return self.connection_url.startswith('sqlite')

    def prepare(self) -> None:
        """Create the directory holding the SQLite file, if any."""
        if self.sqlite_path:
            Path(self.sqlite_path).parent.mkdir(parents=True, exist_ok=True)

    def get_engine_args(self) -> Dict[str, Any]:
        """Get SQLAlchemy engine arguments based on configuration."""
        args = {"echo": self.echo}

        # SQLite-specific configuration
        if self.is_sqlite:
            args["connect_args"] = {
                "check_same_thread": False
            }
            args["poolclass"] = StaticPool

        # PostgreSQL-specific configuration
        else:
            args.update({
                "pool_size": self.pool_size,
                "max_overflow": self.max_overflow,
                "pool_timeout": self.pool_timeout,
                "pool_recycle": self.pool_recycle,
                "pool_pre_ping": self.pool_pre_ping
            })

        return args

class DatabaseError(Exception):
    """Base exception for database-related errors."""
    pass

class ConnectionError(DatabaseError):
    """Raised when there are issues connecting to the database."""
    pass

class SessionError(DatabaseError):
    """Raised when there are issues with database sessions."""
    pass

class Database:
    """Owns the SQLAlchemy engine and hands out transactional sessions."""

    def __init__(self, config: Optional[DatabaseConfig] = None):
        self.config = config or DatabaseConfig()
        self.engine: Optional[Engine] = None
        # Records returned from a session stay readable after it closes
        self._session_factory = sessionmaker(expire_on_commit=False)
        self._scoped_session = scoped_session(self._session_factory)
        self._tables_checked = False

        self._setup_engine()

    def _setup_engine(self) -> None:
        """Set up the SQLAlchemy engine."""
        try:
            self.engine = create_engine(
                self.config.connection_url,
                **self.config.get_engine_args()
            )
            self._session_factory.configure(bind=self.engine)
        except Exception as e:
            raise ConnectionError(f"Failed to create database engine: {e}") from e

    def init_db(self) -> None:
        """Initialize the database schema."""
        if not self.engine:
            raise ConnectionError("Database engine not initialized")

        try:
            self.config.prepare()
            Base.metadata.create_all(self.engine)
            self._tables_checked = True
            logger.info("Database schema initialized successfully")
        except Exception as e:
            raise DatabaseError(f"Failed to initialize database schema: {e}") from e

    def ensure_tables_exist(self) -> None:
        """Ensure all required database tables exist."""
        if self._tables_checked:
            return
        if not self.engine:
            raise ConnectionError("Database engine not initialized")

        try:
            self.config.prepare()
            inspector = inspect(self.engine)
            existing_tables = inspector.get_table_names()
            required_tables = set(Base.metadata.tables)

            if not required_tables.issubset(existing_tables):
                logger.info("Some tables missing, initializing database schema")
                Base.metadata.create_all(self.engine)
                logger.info("Database schema initialized successfully")

            self._tables_checked = True

        except Exception as e:
            raise DatabaseError(f"Failed to verify/create database schema: {e}") from e

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of operations.

        Commit and rollback are handled automatically.

        Example:
            with db.session() as session:
                event = session.get(Event, event_id)
                event.name = "New Name"
                # No need to call commit - it's handled automatically

        Raises:
            SessionError: If there are issues with the session
            DatabaseError: If database schema verification fails
        """
        # Ensure tables exist before providing a session
        self.ensure_tables_exist()

        session = self._scoped_session()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            raise SessionError(f"Database session error: {e}") from e
        finally:
            session.close()
            self._scoped_session.remove()

    def dispose(self) -> None:
        """Release pooled connections."""
        if self.engine:
            self.engine.dispose()
