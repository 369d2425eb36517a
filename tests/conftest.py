import os
import sys
import tempfile

from sqlalchemy.orm import Session

# Test Environment Overrides will override .env files
# THESE MUST BE SET BEFORE ANYTHING FROM alert IS IMPORTED
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Throwaway file database, every NullPool checkout has to see the same data
TEST_DB_DIR = tempfile.mkdtemp(prefix='alert-tests-')
EXPECTED_DATABASE_URL = f'sqlite:///{os.path.join(TEST_DB_DIR, "alert.db")}'
os.environ.setdefault('ENVIRONMENT', 'testing')
os.environ.setdefault('LOG_LEVEL', 'WARNING')
os.environ['DATABASE_URL'] = EXPECTED_DATABASE_URL

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from alert import setup

setup.run()

import pytest

# Add fixtures here
pytest_plugins = [
    'tests.factories.core.user',
]

# ruff: noqa: E402
from alert import settings
from alert.core.user import UserRead, UserService
from alert.network.database.session import db as session_manager

# When alert files are imported before the above patching, tests will use
# incorrect database settings.
if settings.DATABASE_URL != EXPECTED_DATABASE_URL or not settings.IS_TESTING:
    raise ValueError(
        'Patching of environment variables failed.\n'
        'This will cause unexpected test failures'
        'Check all alert imports are delayed until after patching.\n'
    )


@pytest.fixture(scope='function', autouse=True)
def db() -> Session:
    with session_manager(commit_on_success=False):
        session = session_manager.session

        # Patch commit() to prevent accidental commits in tests
        # This allows code under test to open its own committing db() block
        # without breaking test rollbacks
        def no_op_commit():
            # In tests, flush changes but don't actually commit
            # This makes the changes visible within the transaction
            # but keeps them rollbackable
            session.flush()

        session.commit = no_op_commit

        yield session_manager.session

    session.rollback()


@pytest.fixture(scope='function')
def user(user_factory) -> UserRead:
    user_create = user_factory.build()
    return UserService.factory().create(user_create.username, user_create.password_credential)


@pytest.fixture(scope='function')
def archived_user(user_factory) -> UserRead:
    user_create = user_factory.build()
    user_service = UserService.factory()
    created = user_service.create(user_create.username, user_create.password_credential)
    user_service.archive(created.id)
    return user_service.find_by_id(created.id)
