"""
User administration from a terminal, e.g.:
    python management/users.py create jdoe
    python management/users.py list --status archived
"""

import argparse
import getpass
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
# ruff: noqa: E402
from alert import setup

setup.run()
from loguru import logger
from pydantic import ValidationError

from alert.common.exceptions import InternalException
from alert.core.user import PasswordCredentialService, UserRead, UserService, UserStatus
from alert.network.database.session import db


def prompt_password() -> str:
    password = getpass.getpass('Password: ')
    confirmation = getpass.getpass('Confirm password: ')
    if password != confirmation:
        raise SystemExit('Passwords do not match')

    return password


def hash_new_password() -> str:
    password = prompt_password()
    PasswordCredentialService.password_meets_policy(password)
    return PasswordCredentialService.hash_password(password)


def format_user(user: UserRead) -> str:
    archived = user.archived_at.isoformat() if user.archived_at else '-'
    return f'{user.id}\t{user.username}\t{user.status}\t{user.created_at.isoformat()}\t{archived}'


def create(args: argparse.Namespace) -> None:
    password_credential = hash_new_password()
    with db(commit_on_success=True):
        user = UserService.factory().create(args.username, password_credential)
    print(format_user(user))


def show(args: argparse.Namespace) -> None:
    with db():
        user = UserService.factory().find_by_username(args.username)
    print(format_user(user))


def set_password(args: argparse.Namespace) -> None:
    password_credential = hash_new_password()
    with db(commit_on_success=True):
        user_service = UserService.factory()
        user = user_service.find_by_username(args.username)
        user_service.update_credential(user.id, password_credential)
    print(f'updated password for {args.username}')


def archive(args: argparse.Namespace) -> None:
    with db(commit_on_success=True):
        user_service = UserService.factory()
        user = user_service.find_by_username(args.username)
        user_service.archive(user.id)
    print(f'archived {args.username}')


def list_users(args: argparse.Namespace) -> None:
    with db():
        users = UserService.factory().list_users(status=UserStatus.parse_or_none(args.status))
    for user in users:
        print(format_user(user))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Manage alert users')
    subparsers = parser.add_subparsers(dest='command', required=True)

    create_parser = subparsers.add_parser('create', help='create a user, prompts for the password')
    create_parser.add_argument('username')
    create_parser.set_defaults(handler=create)

    show_parser = subparsers.add_parser('show', help='show a user, archived users included')
    show_parser.add_argument('username')
    show_parser.set_defaults(handler=show)

    set_password_parser = subparsers.add_parser('set-password', help='replace the password of an active user')
    set_password_parser.add_argument('username')
    set_password_parser.set_defaults(handler=set_password)

    archive_parser = subparsers.add_parser('archive', help='archive a user, this can not be undone')
    archive_parser.add_argument('username')
    archive_parser.set_defaults(handler=archive)

    list_parser = subparsers.add_parser('list', help='list users ordered by creation')
    list_parser.add_argument('--status', choices=UserStatus.list_all(), default=None)
    list_parser.set_defaults(handler=list_users)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        args.handler(args)
    except InternalException as e:
        logger.error(f'{args.command} failed: {e}')
        return 1
    except ValidationError as e:
        # Field errors only, input values may be secrets
        fields = ', '.join('.'.join(str(part) for part in error['loc']) for error in e.errors())
        logger.error(f'{args.command} failed: invalid {fields}')
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
