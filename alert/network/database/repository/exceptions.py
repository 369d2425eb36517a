from alert.common.exceptions import InternalException


class RepositoryObjectNotFound(InternalException):
    """
    Wraps sqlalchemy exception when an object does not exist
    """

    default_detail = 'Object not found.'
    default_code = 'not_found'


class MultipleRepositoryObjectsFound(InternalException):
    """
    Wraps sqlalchemy exception when multiple results are returned when
    only one is expected
    """

    ...


class RepositoryConflict(InternalException):
    """
    Wraps sqlalchemy IntegrityError, a unique or primary key constraint
    rejected the write
    """

    default_detail = 'Conflicts with an existing object.'
    default_code = 'conflict'


class RepositoryObjectArchived(RepositoryConflict):
    """
    The row was soft deleted, archived rows only ever get read
    """

    default_detail = 'Object is archived.'
    default_code = 'archived'


class StorageUnavailable(InternalException):
    """
    Connection or transport failure talking to the database. Surfaced as is,
    retrying is up to the caller.
    """

    default_detail = 'Storage unavailable.'
    default_code = 'storage_unavailable'
