from datetime import datetime
from importlib import import_module
from typing import Any, Optional

from loguru import logger
from sqlalchemy import DateTime, String, func
from sqlalchemy.ext.declarative import declared_attr
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from alert import settings
from alert.common.nanoid import NanoId
from alert.common.utils import next_timestamp, utc_now
from alert.network.database.repository.exceptions import RepositoryObjectArchived
from alert.network.database.repository.mixin import (
    CreateDomainType,
    ReadDomainType,
    RepositoryMixin,
)


class BaseModel(DeclarativeBase, RepositoryMixin[ReadDomainType, CreateDomainType]):
    __pk_abbrev__: str = NotImplemented

    @declared_attr
    def id(cls) -> Mapped[str]:
        # Ensure an abbreviation is implemented
        if cls.__pk_abbrev__ == NotImplemented:
            raise NotImplementedError(f'__pk_abbrev__ must be implemented for {cls.__name__}')

        abbrev = cls.__pk_abbrev__
        return mapped_column(String(length=255), primary_key=True, default=lambda: NanoId.gen(abbrev=abbrev))

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime, nullable=False, default=utc_now, server_default=func.now())

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime, nullable=False, default=utc_now, server_default=func.now())

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(id={self.id!r})'

    @classmethod
    def _create(cls, **attributes: Any) -> 'BaseModel[Any, Any]':
        # One clock read so a fresh row starts with created_at == updated_at
        now = utc_now()
        attributes.setdefault('created_at', now)
        attributes.setdefault('updated_at', now)
        return super()._create(**attributes)


class ArchivableModelMixin:
    """
    Soft delete. Archiving stamps archived_at once, the row stays put and stays
    readable but is otherwise frozen.
    """

    @declared_attr
    def archived_at(cls) -> Mapped[Optional[datetime]]:
        return mapped_column(DateTime, nullable=True, default=None)

    @classmethod
    def archive(cls, id: str) -> Any:
        model_instance = cls._get_locked(id)  # type: ignore[attr-defined]
        if model_instance.archived_at is not None:
            raise RepositoryObjectArchived(f'{cls.__name__} with id {id} is already archived')

        archived_at = next_timestamp(model_instance.updated_at)
        model_instance.archived_at = archived_at
        model_instance.updated_at = archived_at
        cls._flush(model_instance)  # type: ignore[attr-defined]

        return cls._to_domain(model_instance)  # type: ignore[attr-defined]

    @classmethod
    def update(cls, id: str, **updates: Any) -> Any:
        if 'archived_at' in updates:
            raise ValueError(f'archived_at of {cls.__name__} is only set through archive')

        model_instance = cls._get_locked(id)  # type: ignore[attr-defined]
        if model_instance.archived_at is not None:
            raise RepositoryObjectArchived(f'{cls.__name__} {id} is archived and can not change')

        return super().update(id, **updates)  # type: ignore[misc]


def import_model_modules() -> list[Any]:
    """
    Used by things like Alembic and Shell to bring in the relevant models
    Looks for `models.py` in directories registered.
    """
    model_modules = []
    for app in settings.BOUNDARIES:
        import_path = f'{settings.BASE_MODULE}.{app}.models'
        logger.debug(f'importing: {import_path}')
        module = import_module(import_path)
        model_modules.append(module)

    return model_modules
