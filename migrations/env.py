from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from alert import setup
from alert.common.model import BaseModel
from alert.network.database.session import get_database_url

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
# Skipped when alert already routed logging into loguru (management, tests)
if config.config_file_name is not None and config.attributes.get('configure_logger', True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

setup.configure_models()
target_metadata = BaseModel.metadata


def get_url() -> str:
    # An explicit url (tests pass one through the Config) wins over settings
    url = config.get_main_option('sqlalchemy.url')
    if url:
        return url

    return get_database_url().render_as_string(hide_password=False)


class MissingMigrationMessage(Exception): ...


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    This configures the context with just a URL
    and not an Engine, though an Engine is acceptable
    here as well.  By skipping the Engine creation
    we don't even need a DBAPI to be available.

    Calls to context.execute() here emit the given string to the
    script output.

    """
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={'paramstyle': 'named'},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode.

    In this scenario we need to create an Engine
    and associate a connection with the context.
    """
    configuration = config.get_section(config.config_ini_section) or {}
    configuration['sqlalchemy.url'] = get_url()

    if getattr(config.cmd_opts, 'autogenerate', False) and not getattr(config.cmd_opts, 'message', None):
        raise MissingMigrationMessage(
            "Missing migration message!\n Add with `alembic revision --autogenerate -m 'some message'`"
        )

    connectable = engine_from_config(
        configuration,
        prefix='sqlalchemy.',
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == 'sqlite',
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
