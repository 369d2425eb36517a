from alert.core.user.credentials import PasswordCredentialService
from alert.core.user.domains import UserCreate, UserCredentialUpdate, UserRead, UserStatus
from alert.core.user.exceptions import (
    PasswordFailsPolicyCheck,
    StorageUnavailable,
    UserAlreadyArchived,
    UserConflict,
    UsernameAlreadyExists,
    UserNotFound,
)
from alert.core.user.models import User
from alert.core.user.service import UserService

__all__ = [
    'PasswordCredentialService',
    'PasswordFailsPolicyCheck',
    'StorageUnavailable',
    'User',
    'UserAlreadyArchived',
    'UserConflict',
    'UserCreate',
    'UserCredentialUpdate',
    'UserNotFound',
    'UserRead',
    'UserService',
    'UserStatus',
    'UsernameAlreadyExists',
]
