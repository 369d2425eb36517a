import datetime

from pydantic import Field, computed_field

from alert.common.domain import BaseDomain
from alert.common.enum import BaseEnum
from alert.common.nanoid import NanoIdType
from alert.core.user.constants import PASSWORD_CREDENTIAL_MAX_LENGTH, USERNAME_MAX_LENGTH


class UserStatus(BaseEnum):
    ACTIVE = 'active'
    ARCHIVED = 'archived'


class UserCreate(BaseDomain):
    username: str = Field(min_length=1, max_length=USERNAME_MAX_LENGTH)
    # Opaque hash, never plaintext
    password_credential: str = Field(min_length=1, max_length=PASSWORD_CREDENTIAL_MAX_LENGTH, repr=False)


class UserRead(BaseDomain):
    id: NanoIdType
    username: str
    password_credential: str = Field(repr=False)
    created_at: datetime.datetime
    updated_at: datetime.datetime
    archived_at: datetime.datetime | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> UserStatus:
        return UserStatus.ARCHIVED if self.archived_at is not None else UserStatus.ACTIVE

    @property
    def is_archived(self) -> bool:
        return self.status == UserStatus.ARCHIVED


class UserCredentialUpdate(BaseDomain):
    password_credential: str = Field(min_length=1, max_length=PASSWORD_CREDENTIAL_MAX_LENGTH, repr=False)
