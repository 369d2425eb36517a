import pytest
from sqlalchemy import create_engine, inspect, text

from alert.network.database import migrate

CREATE_USERS_REVISION = '20250610095404'


@pytest.fixture
def database_url(tmp_path) -> str:
    """
    Separate database so schema changes never touch the shared test database
    """
    return f'sqlite:///{tmp_path / "migrations.db"}'


def _inspect(url: str):
    engine = create_engine(url)
    try:
        with engine.connect() as connection:
            inspector = inspect(connection)
            tables = inspector.get_table_names()
            if 'users' not in tables:
                return tables, {}, set(), []
            columns = {column['name']: column for column in inspector.get_columns('users')}
            indexes = {index['name'] for index in inspector.get_indexes('users')}
            unique_constraints = inspector.get_unique_constraints('users')
            return tables, columns, indexes, unique_constraints
    finally:
        engine.dispose()


def _current_revision(url: str) -> str | None:
    engine = create_engine(url)
    try:
        with engine.connect() as connection:
            return connection.execute(text('SELECT version_num FROM alembic_version')).scalar()
    finally:
        engine.dispose()


def test_upgrade_creates_users_table(database_url):
    migrate.upgrade('head', url=database_url)

    tables, columns, indexes, unique_constraints = _inspect(database_url)
    assert 'users' in tables
    assert list(columns) == ['id', 'username', 'user_password', 'created_at', 'updated_at', 'archived_at']
    assert not columns['username']['nullable']
    assert not columns['user_password']['nullable']
    assert not columns['created_at']['nullable']
    assert not columns['updated_at']['nullable']
    assert columns['archived_at']['nullable']
    assert columns['created_at']['default'] is not None
    assert columns['updated_at']['default'] is not None
    assert {'idx_users_id', 'idx_users_username'} <= indexes
    assert [constraint['column_names'] for constraint in unique_constraints] == [['username']]
    assert _current_revision(database_url) == CREATE_USERS_REVISION


def test_upgrade_over_existing_table(database_url):
    migrate.upgrade('head', url=database_url)
    engine = create_engine(database_url)
    with engine.begin() as connection:
        connection.execute(
            text("INSERT INTO users (id, username, user_password) VALUES ('user-kept', 'kept', 'hash')")
        )
    engine.dispose()

    # Forget the version so the create runs again over the existing table
    migrate.stamp('base', url=database_url)
    migrate.upgrade('head', url=database_url)

    engine = create_engine(database_url)
    with engine.connect() as connection:
        row = connection.execute(text('SELECT username, created_at, updated_at FROM users')).one()
    engine.dispose()
    assert row.username == 'kept'
    # Timestamps default to insertion time
    assert row.created_at is not None
    assert row.updated_at is not None


def test_downgrade(database_url):
    migrate.upgrade('head', url=database_url)
    migrate.downgrade('base', url=database_url)

    tables, _, _, _ = _inspect(database_url)
    assert 'users' not in tables
    assert _current_revision(database_url) is None


def test_downgrade_over_missing_table(database_url):
    migrate.upgrade('head', url=database_url)
    migrate.downgrade('base', url=database_url)

    migrate.stamp(CREATE_USERS_REVISION, url=database_url)
    migrate.downgrade('base', url=database_url)

    tables, _, _, _ = _inspect(database_url)
    assert 'users' not in tables


def test_upgrade_after_downgrade(database_url):
    migrate.upgrade('head', url=database_url)
    migrate.downgrade('base', url=database_url)
    migrate.upgrade('head', url=database_url)

    tables, _, _, _ = _inspect(database_url)
    assert 'users' in tables
