import pytest

from alert.network.database import migrate


@pytest.fixture(scope='session', autouse=True)
def migrated_database():
    """
    Builds the schema once through the real migration chain
    """
    migrate.upgrade('head')
    yield
