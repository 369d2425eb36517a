import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
# ruff: noqa: E402
from alert import settings
from alert.common.logs import configure_logging

configure_logging()
from loguru import logger

from alert.network.database import migrate
from alert.network.database.session import get_database_url
from management.utils import run_terminal_cmd

if settings.ENVIRONMENT == 'production':
    raise Exception('🛑 STOP! 🛑 You likely did not mean to do this on production...')


def reset_postgres():
    url = get_database_url()
    os.environ['PGPASSWORD'] = url.password or ''
    db_user = url.username
    db_name = url.database

    drop_create_public_schema = (
        # Kill any open connections
        f'SELECT pg_terminate_backend(pg_stat_activity.pid) '
        f"FROM pg_stat_activity WHERE pg_stat_activity.datname = '{db_name}' "
        f'AND pid <> pg_backend_pid();'
        # Drop and recreate schema
        f'DROP SCHEMA IF EXISTS public CASCADE;'
        f'CREATE SCHEMA public;'
        f'GRANT ALL ON SCHEMA public TO {db_user};'
        f'GRANT ALL ON SCHEMA public TO public;'
    )

    reset_command = (
        f'psql -U {db_user} -d {db_name} -h {url.host} -p {url.port or 5432} -c "{drop_create_public_schema}"'
    )
    print(reset_command)
    run_terminal_cmd(reset_command)


def reset_sqlite():
    db_path = get_database_url().database
    if db_path and os.path.exists(db_path):
        logger.info(f'removing {db_path}')
        os.remove(db_path)


def main():
    logger.info('Resetting database...')
    if get_database_url().get_backend_name() == 'sqlite':
        reset_sqlite()
    else:
        reset_postgres()

    migrate.upgrade('head')
    logger.info('Database reset ✅')


if __name__ == '__main__':
    main()
