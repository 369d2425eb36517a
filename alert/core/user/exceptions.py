from alert.common.exceptions import InternalException
from alert.network.database.repository.exceptions import StorageUnavailable


class UserException(InternalException):
    pass


class UserNotFound(UserException):
    default_detail = 'User not found.'
    default_code = 'user_not_found'


class UserConflict(UserException):
    default_detail = 'User conflicts with an existing user.'
    default_code = 'user_conflict'


class UsernameAlreadyExists(UserConflict):
    default_detail = 'Username is already taken.'
    default_code = 'username_already_exists'


class UserAlreadyArchived(UserConflict):
    default_detail = 'User is archived.'
    default_code = 'user_already_archived'


class PasswordFailsPolicyCheck(UserException):
    default_detail = 'Password does not meet the password policy.'
    default_code = 'password_fails_policy_check'


__all__ = [
    'PasswordFailsPolicyCheck',
    'StorageUnavailable',
    'UserAlreadyArchived',
    'UserConflict',
    'UserException',
    'UserNotFound',
    'UsernameAlreadyExists',
]
