import time
from contextvars import ContextVar
from typing import Any, Dict, Optional

from loguru import logger
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import URL, make_url
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session as SqlAlchemySession
from sqlalchemy.pool import NullPool

from alert import settings
from alert.network.database.repository.exceptions import StorageUnavailable


def get_database_url() -> URL:
    """
    DATABASE_URL wins, otherwise assemble a postgres url from the DB_* settings
    """
    if settings.DATABASE_URL:
        return make_url(settings.DATABASE_URL)

    return URL.create(
        drivername='postgresql',
        username=settings.DB_USER,
        password=settings.DB_PASSWORD,
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        database=settings.DB_NAME,
    )


def _enable_sqlite_savepoints(engine: Engine) -> None:
    """
    pysqlite issues its own BEGIN lazily which breaks SAVEPOINT. Hand transaction
    control back to SQLAlchemy, recipe from the SQLAlchemy sqlite dialect docs.
    """

    @event.listens_for(engine, 'connect')
    def do_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, 'begin')
    def do_begin(conn: Any) -> None:
        conn.exec_driver_sql('BEGIN')


def create_db_engine(url: URL) -> Engine:
    if url.get_backend_name() == 'sqlite':
        # Local development and tests only, needs a file database since every
        # NullPool checkout opens a fresh connection
        engine = create_engine(
            url,
            poolclass=NullPool,
            connect_args={'timeout': settings.DB_CONNECT_TIMEOUT},
        )
        _enable_sqlite_savepoints(engine)
        return engine

    return create_engine(
        url,
        poolclass=NullPool,
        connect_args={
            'options': (
                f'-c timezone=utc '
                f'-c statement_timeout={settings.DB_STATEMENT_TIMEOUT} '
                f'-c idle_in_transaction_session_timeout={settings.DB_IDLE_IN_TRANSACTION_TIMEOUT}'
            ),
            'connect_timeout': settings.DB_CONNECT_TIMEOUT,
        },
        pool_pre_ping=True,  # Verify connections before use
    )


_engine = create_db_engine(get_database_url())
_session_maker = sessionmaker(autocommit=False, autoflush=False, bind=_engine)

if settings.DB_LOG_STATEMENTS:
    # Log statements and their execution times
    @event.listens_for(Engine, 'before_cursor_execute')
    def before_cursor_execute(
        conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: bool
    ) -> None:
        conn.info.setdefault('query_start_time', []).append(time.time())
        logger.info(f'Start Query: {statement} {parameters!r}')

    @event.listens_for(Engine, 'after_cursor_execute')
    def after_cursor_execute(
        conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: bool
    ) -> None:
        total = time.time() - conn.info['query_start_time'].pop(-1)
        logger.info(f'Query Time: {total}')


# Should be thread safe as well as coroutine safe!
_session_storage: ContextVar[SqlAlchemySession | None] = ContextVar('_session_storage', default=None)


class SessionNotAvailable(Exception):
    def __init__(self) -> None:
        msg = """
        No session is open in this context. Open one by using a `db`
        instance as a context manager e.g.:
        with db(commit_on_success=True):
            UserService.factory().find_by_id(user_id)
        """
        super().__init__(msg)


class SessionManagerMeta(type):
    """
    Access session as a property on context manager
    without having to init
    """

    @property
    def session(self) -> SqlAlchemySession:
        """
        Make a thread and coroutine safe session
        """
        session = _session_storage.get()
        if session is None:
            raise SessionNotAvailable

        return session


class SessionManager(metaclass=SessionManagerMeta):
    """
    Request scoped unit of work. Everything inside the block shares one
    session and one transaction, committed on a clean exit when asked to.
    """

    def __init__(
        self,
        session_kwargs: Dict[str, Any] | None = None,
        commit_on_success: bool = False,
    ):
        self.session_token: Optional[Any] = None
        self.session_kwargs = session_kwargs or {}
        self.commit_on_success = commit_on_success

    def enter(self) -> Any:
        # Nested managers (and pytest, which opens the outer one) share the
        # already open session rather than starting a second transaction
        if _session_storage.get() is None:
            session = _session_maker(**self.session_kwargs)
            self.session_token = _session_storage.set(session)

        return type(self)

    @property
    def owns_session(self) -> bool:
        return self.session_token is not None

    def cleanup(self) -> None:
        if not self.owns_session:
            return

        session = _session_storage.get()
        if session is not None:
            session.close()
        _session_storage.reset(self.session_token)
        self.session_token = None

    def __enter__(self) -> Any:
        return self.enter()

    def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        session = _session_storage.get()
        is_success = exc_type is None

        try:
            if session is not None and self.owns_session:
                if self.commit_on_success and is_success:
                    try:
                        session.commit()
                    except (OperationalError, InterfaceError) as err:
                        session.rollback()
                        raise StorageUnavailable('Could not commit transaction') from err
                else:
                    session.rollback()
        finally:
            self.cleanup()


# This is what external callers should access!
db: SessionManagerMeta = SessionManager
