import contextvars
from unittest import mock

import pytest
from sqlalchemy.exc import InterfaceError, OperationalError

from alert.core.user import StorageUnavailable, User, UserService
from alert.network.database import session as network_session
from alert.network.database.session import SessionNotAvailable, db


def _operational_error() -> OperationalError:
    return OperationalError('SELECT 1', {}, Exception('server closed the connection unexpectedly'))


def test_read_transport_error_is_storage_unavailable():
    with mock.patch.object(User, 'get_query', side_effect=_operational_error()):
        with pytest.raises(StorageUnavailable):
            UserService.factory().find_by_id('user-missing')


def test_list_transport_error_is_storage_unavailable():
    with mock.patch.object(User, 'get_query', side_effect=InterfaceError('SELECT 1', {}, Exception('gone'))):
        with pytest.raises(StorageUnavailable):
            UserService.factory().list_users()


def test_availability_check_transport_error_is_storage_unavailable():
    with mock.patch.object(User, 'get_query', side_effect=_operational_error()):
        with pytest.raises(StorageUnavailable):
            UserService.factory().is_username_available('jdoe')


def _in_fresh_context(fn):
    # Runs outside the session the test fixture opened
    def run():
        network_session._session_storage.set(None)
        return fn()

    return contextvars.copy_context().run(run)


def test_commit_transport_error_is_storage_unavailable():
    fake_session = mock.MagicMock()
    fake_session.commit.side_effect = _operational_error()

    def commit():
        with db(commit_on_success=True):
            pass

    with mock.patch.object(network_session, '_session_maker', return_value=fake_session):
        with pytest.raises(StorageUnavailable):
            _in_fresh_context(commit)

    fake_session.rollback.assert_called_once()
    fake_session.close.assert_called_once()


def test_session_rolls_back_on_error():
    fake_session = mock.MagicMock()

    def fail():
        with db(commit_on_success=True):
            raise RuntimeError('boom')

    with mock.patch.object(network_session, '_session_maker', return_value=fake_session):
        with pytest.raises(RuntimeError):
            _in_fresh_context(fail)

    fake_session.commit.assert_not_called()
    fake_session.rollback.assert_called_once()


def test_session_not_available_outside_block():
    def read_session():
        return db.session

    with pytest.raises(SessionNotAvailable):
        _in_fresh_context(read_session)
