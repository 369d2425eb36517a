from unittest import mock

import pytest

from alert.core.user import PasswordCredentialService, UserService
from management import users as users_command


@pytest.fixture
def password():
    with mock.patch.object(users_command.getpass, 'getpass', return_value='correct horse battery') as getpass:
        yield getpass


def test_create(password, capsys):
    assert users_command.main(['create', 'jdoe']) == 0

    user = UserService.factory().find_by_username('jdoe')
    assert PasswordCredentialService.verify_password(user.password_credential, 'correct horse battery')
    assert user.id in capsys.readouterr().out


def test_create_rejects_short_password(capsys):
    with mock.patch.object(users_command.getpass, 'getpass', return_value='short'):
        assert users_command.main(['create', 'jdoe']) == 1

    assert UserService.factory().is_username_available('jdoe')


def test_create_rejects_mismatched_confirmation():
    with mock.patch.object(users_command.getpass, 'getpass', side_effect=['correct horse battery', 'other one']):
        with pytest.raises(SystemExit):
            users_command.main(['create', 'jdoe'])


def test_create_duplicate(password, user):
    assert users_command.main(['create', user.username]) == 1


def test_show(user, capsys):
    assert users_command.main(['show', user.username]) == 0
    output = capsys.readouterr().out
    assert user.id in output
    assert 'active' in output
    assert user.password_credential not in output


def test_show_missing():
    assert users_command.main(['show', 'nobody']) == 1


def test_set_password(password, user):
    assert users_command.main(['set-password', user.username]) == 0

    updated = UserService.factory().find_by_id(user.id)
    assert PasswordCredentialService.verify_password(updated.password_credential, 'correct horse battery')
    assert updated.updated_at > user.updated_at


def test_set_password_archived(password, archived_user):
    assert users_command.main(['set-password', archived_user.username]) == 1


def test_archive(user):
    assert users_command.main(['archive', user.username]) == 0
    assert UserService.factory().find_by_id(user.id).is_archived

    assert users_command.main(['archive', user.username]) == 1


def test_list(user, archived_user, capsys):
    assert users_command.main(['list']) == 0
    output = capsys.readouterr().out
    assert user.id in output
    assert archived_user.id in output

    assert users_command.main(['list', '--status', 'archived']) == 0
    output = capsys.readouterr().out
    assert user.id not in output
    assert archived_user.id in output


def test_create_rejects_overlong_username(password, capsys):
    assert users_command.main(['create', 'u' * 256]) == 1
    assert UserService.factory().list_users() == []
