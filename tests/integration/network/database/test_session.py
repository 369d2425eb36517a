import pytest

from alert.core.user import UserService
from alert.network.database.session import db as session_manager


def test_nested_block_shares_the_session(db):
    with session_manager(commit_on_success=True) as nested:
        assert nested.session is db

    # The outer session stays open and usable
    assert session_manager.session is db
    assert UserService.factory().list_users() == []


def test_nested_block_does_not_roll_back_outer_work(db, user_factory):
    user_service = UserService.factory()
    user_create = user_factory.build()
    with session_manager(commit_on_success=True):
        user = user_service.create(user_create.username, user_create.password_credential)

    assert user_service.find_by_id(user.id) == user


def test_nested_block_error_keeps_outer_session(db):
    with pytest.raises(RuntimeError):
        with session_manager(commit_on_success=True):
            raise RuntimeError('boom')

    assert session_manager.session is db
