from alembic import command
from alembic.config import Config
from loguru import logger

from alert import settings


def get_alembic_config(url: str | None = None) -> Config:
    """
    Alembic config for programmatic runs. Logging is left to loguru, and an
    explicit url overrides the one migrations/env.py would build from settings.
    """
    alembic_config = Config(settings.ALEMBIC_INI)
    alembic_config.set_main_option('script_location', settings.MIGRATIONS_DIR)
    alembic_config.attributes['configure_logger'] = False
    if url:
        # ConfigParser interpolation, literal % must be doubled
        alembic_config.set_main_option('sqlalchemy.url', url.replace('%', '%%'))

    return alembic_config


def upgrade(revision: str = 'head', url: str | None = None) -> None:
    logger.info(f'migrating database up to {revision}')
    command.upgrade(get_alembic_config(url), revision)


def downgrade(revision: str = 'base', url: str | None = None) -> None:
    logger.info(f'migrating database down to {revision}')
    command.downgrade(get_alembic_config(url), revision)


def stamp(revision: str, url: str | None = None) -> None:
    command.stamp(get_alembic_config(url), revision)
