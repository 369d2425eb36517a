from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from alert.common.model import ArchivableModelMixin, BaseModel
from alert.core.user.constants import PASSWORD_CREDENTIAL_MAX_LENGTH, USER_PK_ABBREV, USERNAME_MAX_LENGTH
from alert.core.user.domains import UserCreate, UserRead


class User(ArchivableModelMixin, BaseModel[UserRead, UserCreate]):
    __tablename__ = 'users'

    username: Mapped[str] = mapped_column(String(length=USERNAME_MAX_LENGTH), unique=True, nullable=False)
    # Column keeps its historical name
    password_credential: Mapped[str] = mapped_column(
        'user_password', String(length=PASSWORD_CREDENTIAL_MAX_LENGTH), nullable=False
    )

    __pk_abbrev__ = USER_PK_ABBREV
    __read_domain__ = UserRead
    __create_domain__ = UserCreate

    __table_args__ = (
        Index('idx_users_id', 'id'),
        Index('idx_users_username', 'username'),
    )
