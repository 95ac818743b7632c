"""Core database functionality and configuration.

This module provides database management with configuration, connection
pooling, and a transactional session scope. Every status transition runs
inside one `db.session()` block so that the status update and its history
row commit or roll back together.
"""

from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Optional, Dict, Any, Generator
import os

from sqlalchemy import create_engine, Engine, inspect
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import scoped_session, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..models import Base
from ..models.event import Event  # noqa
from ..models.state_history import EventStateHistory  # noqa
from ..config.environment import IS_PRODUCTION_ENVIRONMENT

logger = logging.getLogger(__name__)

DEFAULT_SQLITE_PATH = Path(__file__).parent.parent.parent / 'data' / 'events.db'

class DatabaseConfig:
    """Database configuration settings."""

    def __init__(
        self,
        database_url: Optional[str] = None,
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
        or provided explicitly via database_url parameter. In development the
        same sources are consulted first, falling back to a local SQLite file.

        Args:
            database_url: SQLAlchemy connection URL
                        If not provided, will use DATABASE_URL env variable
            sqlite_path: Path to SQLite database file (development fallback)
            echo: Whether to echo SQL statements
            pool_size: Size of the connection pool (permanent connections)
            max_overflow: Maximum number of extra connections to allow temporarily
                        (total connections = pool_size + max_overflow)
            pool_timeout: Seconds to wait for an available connection
            pool_recycle: Seconds before connections are recycled (prevent stale)
            pool_pre_ping: Whether to ping connections before using them
                         (helps prevent using stale connections)

        Raises:
            ValueError: If in production environment and no database URL is provided
                      either via database_url parameter or DATABASE_URL env variable
        """
        self.database_url = database_url or os.environ.get('DATABASE_URL')
        self.sqlite_path = None

        if not self.database_url:
            if IS_PRODUCTION_ENVIRONMENT:
                raise ValueError(
                    "Database URL must be provided either via database_url parameter "
                    "or DATABASE_URL environment variable when in production environment"
                )
            self.sqlite_path = Path(sqlite_path) if sqlite_path else DEFAULT_SQLITE_PATH

        self.echo = echo
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.pool_pre_ping = pool_pre_ping

    @property
    def connection_url(self) -> str:
        """Get the database connection URL."""
        if self.database_url:
            return self.database_url
        if not self.sqlite_path:
            raise ValueError("SQLite path not configured")
        return f"sqlite:///{self.sqlite_path}"

    @property
    def is_sqlite(self) -> bool:
        return self.connection_url.startswith('sqlite')

    @property
    def is_memory(self) -> bool:
        url = self.connection_url
        return self.is_sqlite and (url in ('sqlite://', 'sqlite:///') or ':memory:' in url)

    def get_engine_args(self) -> Dict[str, Any]:
        """Get SQLAlchemy engine arguments based on configuration."""
        args = {"echo": self.echo}

        # SQLite-specific configuration
        if self.is_sqlite:
            args["connect_args"] = {"check_same_thread": False}
            # An in-memory database only exists on its one connection
            if self.is_memory:
                args["poolclass"] = StaticPool

        # Server database configuration
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

class TransientStorageError(DatabaseError):
    """Raised when the store fails to execute or commit a transaction.

    Nothing from the failed transaction is persisted, so the identical call
    is safe to retry.
    """
    pass

class Database:
    """Core database management class implementing the singleton pattern."""

    _instance = None

    def __new__(cls, config: Optional[DatabaseConfig] = None):
        """Ensure only one instance exists."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config: Optional[DatabaseConfig] = None):
        """Initialize the database manager if not already initialized."""
        if self._initialized:
            return

        self.config = config or DatabaseConfig()
        self.engine: Optional[Engine] = None
        self._session_factory = sessionmaker()
        self._scoped_session = scoped_session(self._session_factory)
        self._tables_checked = False
        self._initialized = True

        # Initialize engine on creation
        self._setup_engine()

    def _setup_engine(self) -> None:
        """Set up the SQLAlchemy engine."""
        try:
            if self.config.sqlite_path:
                self.config.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
            self.engine = create_engine(
                self.config.connection_url,
                **self.config.get_engine_args()
            )
            self._session_factory.configure(bind=self.engine)
        except Exception as e:
            raise ConnectionError(f"Failed to create database engine: {e}") from e

    def configure(self, config: DatabaseConfig) -> None:
        """Rebind the global instance to a different database."""
        self.dispose()
        self.config = config
        self._tables_checked = False
        self._setup_engine()
        logger.info(f"Database configured for {self.engine.url.render_as_string(hide_password=True)}")

    def dispose(self) -> None:
        """Release pooled connections and any thread-local session."""
        self._scoped_session.remove()
        if self.engine is not None:
            self.engine.dispose()

    def init_db(self) -> None:
        """Initialize the database schema."""
        if not self.engine:
            raise ConnectionError("Database engine not initialized")

        try:
            # Create all tables
            with self.engine.begin() as conn:
                Base.metadata.create_all(conn)
            self._tables_checked = True
            logger.info("Database schema initialized successfully")
        except DBAPIError as e:
            raise TransientStorageError(f"Database unavailable while initializing schema: {e}") from e
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to initialize database schema: {e}") from e

    def ensure_tables_exist(self) -> None:
        """Ensure all required database tables exist."""
        if not self._tables_checked:
            if not self.engine:
                raise ConnectionError("Database engine not initialized")

            try:
                inspector = inspect(self.engine)
                existing_tables = inspector.get_table_names()
                required_tables = set(Base.metadata.tables)

                if not all(table in existing_tables for table in required_tables):
                    logger.info("Some tables missing, initializing database schema")
                    with self.engine.begin() as conn:
                        Base.metadata.create_all(conn)
                    logger.info("Database schema initialized successfully")

                self._tables_checked = True

            except DBAPIError as e:
                # Driver-level failure, nothing was created
                raise TransientStorageError(f"Database unavailable while verifying schema: {e}") from e
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to verify/create database schema: {e}") from e

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of operations.

        This is the preferred way to get a database session. It handles
        commit/rollback automatically and ensures proper cleanup.

        Example:
            with db.session() as session:
                event = session.get(Event, event_id)
                event.title = "New Title"
                # No need to call commit - it's handled automatically

        Raises:
            TransientStorageError: If the store fails while executing or committing
                or cannot be reached for the schema check
            DatabaseError: If database schema verification fails otherwise
        """
        # Ensure tables exist before providing a session
        self.ensure_tables_exist()

        session = self._scoped_session()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database session error, transaction rolled back: {e}")
            raise TransientStorageError(f"Database session error: {e}") from e
        except Exception:
            # Non-storage errors propagate unchanged
            session.rollback()
            raise
        finally:
            session.close()
            self._scoped_session.remove()

# Create the global database instance with default configuration
db = Database()
