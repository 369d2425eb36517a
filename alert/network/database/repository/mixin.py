from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Generic, Iterator, List, Optional, Type, TypeVar, Union

from loguru import logger
from sqlalchemy.exc import (
    IntegrityError,
    InterfaceError,
    MultipleResultsFound,
    NoResultFound,
    OperationalError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Query, Session
from sqlalchemy.sql.elements import BinaryExpression, ColumnElement, UnaryExpression

from alert.common.domain import BaseDomain
from alert.common.utils import next_timestamp
from alert.network.database.repository.exceptions import (
    MultipleRepositoryObjectsFound,
    RepositoryConflict,
    RepositoryObjectNotFound,
    StorageUnavailable,
)
from alert.network.database.session import db

if TYPE_CHECKING:
    from alert.common.model import BaseModel


@contextmanager
def storage_errors(model_name: str) -> Iterator[None]:
    """
    Connection level failures become StorageUnavailable, everything else
    propagates untouched
    """
    try:
        yield
    except (OperationalError, InterfaceError, PoolTimeoutError) as err:
        logger.error(f'storage unavailable while accessing {model_name}: {err.__class__.__name__}')
        raise StorageUnavailable(f'Storage unavailable while accessing {model_name}') from err


class BaseQueryManager:
    def __init__(self, model: Type['BaseModel']) -> None:  # type: ignore[type-arg]
        self.model = model

    def get_query(self, *clauses: Any, **specification: Any) -> 'Query[BaseModel]':  # type: ignore[type-arg]
        query = self.model._get_session().query(self.model)
        for clause in clauses:
            query = query.where(clause)
        for key, value in specification.items():
            query = self.model._parse_specification(query, key, value)
        return query


ReadDomainType = TypeVar('ReadDomainType', bound=BaseDomain)
CreateDomainType = TypeVar('CreateDomainType', bound=BaseDomain)


class RepositoryMixin(Generic[ReadDomainType, CreateDomainType]):
    """
    Database access layer. All interaction with the database should be routed
    through this layer. all public interfaces accept domains subclasses from the
    pydantic base class with from_attributes for simple domain -> orm mapping
    """

    __create_domain__: Type[CreateDomainType] = NotImplemented
    __read_domain__: Type[ReadDomainType] = NotImplemented
    # Set at insert, updated_at is only ever written by update itself
    __immutable_fields__: tuple[str, ...] = ('id', 'created_at', 'updated_at')
    query_manager: Type[BaseQueryManager] | None = BaseQueryManager

    @classmethod
    def _get_session(cls) -> Session:
        return db.session

    @classmethod
    def get_query(cls, *clauses: Any, **specification: Any) -> 'Query[BaseModel]':  # type: ignore[type-arg]
        if cls.query_manager is None:
            raise ValueError(f'query_manager not set for {cls.__name__}')
        return cls.query_manager(cls).get_query(*clauses, **specification)  # type: ignore[arg-type]

    @classmethod
    def get(cls, *clauses: Union[BinaryExpression[Any], ColumnElement[bool]], **specification: Any) -> ReadDomainType:
        instance = cls._get(*clauses, **specification)

        return cls._to_domain(instance)

    @classmethod
    def get_or_none(cls, *clauses: Any, **specification: Any) -> ReadDomainType | None:
        try:
            instance = cls._get(*clauses, **specification)
        except RepositoryObjectNotFound:
            return None

        return cls._to_domain(instance)

    @classmethod
    def get_for_update(cls, id: str) -> ReadDomainType:
        """
        Reads and row locks an object for the rest of the transaction, use it
        ahead of a check-then-write so concurrent writers queue up behind us
        """
        instance = cls._get_locked(id)

        return cls._to_domain(instance)

    @classmethod
    def _get(cls, *clauses: Any, **specification: Any) -> 'BaseModel[Any, Any]':
        with storage_errors(cls.__name__):
            try:
                return cls.get_query(*clauses, **specification).one()
                # assert one and only one object returned
            except MultipleResultsFound:
                raise MultipleRepositoryObjectsFound(f'Multiple results found for {cls.__name__}: {specification}!')
            except NoResultFound:
                raise RepositoryObjectNotFound(f'{cls.__name__}: {specification or clauses} not found!')

    @classmethod
    def _get_locked(cls, id: str) -> 'BaseModel[Any, Any]':
        with storage_errors(cls.__name__):
            try:
                return cls.get_query(id=id).with_for_update().populate_existing().one()
            except NoResultFound:
                raise RepositoryObjectNotFound(f'{cls.__name__} with id {id} not found!')

    @classmethod
    def list(
        cls,
        *clauses: Any,
        ordering: Optional[List[Union[str, UnaryExpression]]] = None,
        **specification: Any,  # type: ignore[type-arg]
    ) -> List[ReadDomainType]:
        with storage_errors(cls.__name__):
            query = cls.get_query(*clauses, **specification)
            if ordering:
                query = query.order_by(*cls._parse_ordering(ordering))
            return [cls._to_domain(obj) for obj in query]

    @classmethod
    def count(cls, *clauses: Any, **specification: Any) -> int:
        with storage_errors(cls.__name__):
            return int(cls.get_query(*clauses, **specification).count())

    @classmethod
    def create(cls, domain_obj: CreateDomainType) -> ReadDomainType:
        model_instance = cls._create(**domain_obj.to_dict())
        return cls._to_domain(model_instance)

    @classmethod
    def update(cls, id: str, **updates: Any) -> ReadDomainType:
        """
        Applies updates to a single row and refreshes updated_at. Refuses unknown
        attributes and fields that are managed here or immutable after insert.
        """
        for key in updates:
            if key in cls.__immutable_fields__:
                raise ValueError(f"The key '{key}' can not be changed once {cls.__name__} is created.")

        model_instance = cls._get_locked(id)
        for key, value in updates.items():
            if not hasattr(model_instance, key):
                raise ValueError(f"The key '{key}' is not a valid attribute for this model.")
            setattr(model_instance, key, value)

        if hasattr(model_instance, 'updated_at'):
            model_instance.updated_at = next_timestamp(model_instance.updated_at)

        cls._flush(model_instance)

        return cls._to_domain(model_instance)

    @classmethod
    def _create(cls, **attributes: Any) -> 'BaseModel[Any, Any]':
        model_instance = cls(**attributes)
        session = cls._get_session()
        with storage_errors(cls.__name__):
            try:
                # Savepoint keeps the surrounding transaction usable when the insert is rejected
                with session.begin_nested():
                    session.add(model_instance)
            except IntegrityError as err:
                raise RepositoryConflict(
                    f'{cls.__name__} conflicts with an existing row', context={'detail': str(err.orig)}
                ) from err

        return model_instance  # type: ignore[return-value]

    @classmethod
    def _flush(cls, model_instance: 'BaseModel[Any, Any]') -> None:
        session = cls._get_session()
        with storage_errors(cls.__name__):
            try:
                with session.begin_nested():
                    session.flush([model_instance])
            except IntegrityError as err:
                raise RepositoryConflict(
                    f'{cls.__name__} conflicts with an existing row', context={'detail': str(err.orig)}
                ) from err

    @classmethod
    def _parse_ordering(
        cls, ordering: List[Union[str, 'UnaryExpression[Any]']] | None = None
    ) -> List['UnaryExpression[Any]']:
        """
        Parses str references for a field like:
        ['-created_at', 'username']
        """
        order_expressions = []
        if ordering:
            for order in ordering:
                if isinstance(order, str):
                    if order[0] == '-':
                        # Get rid of first character
                        ordering_attr = getattr(cls, order[1:])
                        order_expressions.append(ordering_attr.desc())
                    else:
                        ordering_attr = getattr(cls, order)
                        order_expressions.append(ordering_attr.asc())
                else:
                    # Assume already an expression
                    order_expressions.append(order)

        return order_expressions

    @classmethod
    def _parse_specification(cls, query: Any, key: Any, value: Any) -> Any:
        """
        Parses keyword lookups like username='jdoe' into equality clauses
        """
        return query.where(getattr(cls, key) == value)

    @classmethod
    def _to_domain(cls, model_instance: 'BaseModel[Any, Any]') -> ReadDomainType:
        return cls.__read_domain__.model_validate(model_instance)  # type: ignore[no-any-return]
