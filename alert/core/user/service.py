from loguru import logger

from alert.common.nanoid import NanoIdType
from alert.core.user.domains import UserCreate, UserCredentialUpdate, UserRead, UserStatus
from alert.core.user.exceptions import UserAlreadyArchived, UserConflict, UsernameAlreadyExists, UserNotFound
from alert.core.user.models import User
from alert.network.database.repository.exceptions import (
    RepositoryConflict,
    RepositoryObjectArchived,
    RepositoryObjectNotFound,
)


class UserService:
    """
    Create, read, update and archive users. Errors propagate, there are no
    retries here. Credentials come in already hashed.
    """

    @classmethod
    def factory(cls) -> 'UserService':
        return cls()

    def create(self, username: str, password_credential: str) -> UserRead:
        user_create = UserCreate(username=username, password_credential=password_credential)
        try:
            # The unique constraint decides races between concurrent creates
            user = User.create(user_create)
        except RepositoryConflict as err:
            if User.get_or_none(username=username) is not None:
                raise UsernameAlreadyExists(f'Username already exists: {username}') from err
            raise UserConflict(f'Could not create user: {username}', context=err.context) from err

        logger.info(f'created user {user.id}')
        return user

    def find_by_id(self, user_id: NanoIdType) -> UserRead:
        try:
            return User.get(id=user_id)
        except RepositoryObjectNotFound:
            raise UserNotFound(message=f'User not found with id: {user_id}')

    def find_by_username(self, username: str) -> UserRead:
        try:
            return User.get(username=username)
        except RepositoryObjectNotFound:
            raise UserNotFound(message=f'User not found with username: {username}')

    def update_credential(self, user_id: NanoIdType, new_password_credential: str) -> None:
        credential_update = UserCredentialUpdate(password_credential=new_password_credential)
        try:
            # Locks the row, archived users are rejected under the lock
            User.update(user_id, **credential_update.to_dict())
        except RepositoryObjectNotFound:
            raise UserNotFound(message=f'User not found with id: {user_id}')
        except RepositoryObjectArchived:
            raise UserAlreadyArchived(f'Cannot change credential of archived user: {user_id}')

        logger.info(f'updated credential for user {user_id}')

    def archive(self, user_id: NanoIdType) -> None:
        try:
            User.archive(user_id)
        except RepositoryObjectNotFound:
            raise UserNotFound(message=f'User not found with id: {user_id}')
        except RepositoryObjectArchived:
            raise UserAlreadyArchived(f'User already archived: {user_id}')

        logger.info(f'archived user {user_id}')

    def is_username_available(self, username: str) -> bool:
        # Archived users keep their username
        return User.count(username=username) == 0

    def list_users(self, status: UserStatus | str | None = None) -> list[UserRead]:
        clauses = []
        if status is not None:
            if UserStatus(status) == UserStatus.ARCHIVED:
                clauses.append(User.archived_at.is_not(None))
            else:
                clauses.append(User.archived_at.is_(None))

        return User.list(*clauses, ordering=['created_at', 'id'])
