import os

from decouple import Choices, config

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
BASE_MODULE = 'alert'
MIGRATIONS_DIR = os.path.join(BASE_DIR, 'migrations')
ALEMBIC_INI = os.path.join(BASE_DIR, 'alembic.ini')

DEBUG = config('DEBUG', default=False, cast=bool)
ENVIRONMENT = config('ENVIRONMENT', default='local', cast=Choices(['local', 'testing', 'staging', 'production']))
IS_PRODUCTION = ENVIRONMENT == 'production'
IS_STAGING = ENVIRONMENT == 'staging'
IS_TESTING = ENVIRONMENT == 'testing'  # Set in tests/conftest.py
IS_DEPLOYED_ENV = IS_PRODUCTION or IS_STAGING

LOG_LEVEL = config('LOG_LEVEL', 'INFO')

# A full DATABASE_URL (e.g. injected by the container platform) wins over the individual parts
DATABASE_URL = config('DATABASE_URL', default=None)
DB_NAME = config('DB_NAME', default='alert')
DB_USER = config('DB_USER', default='alert')
DB_PASSWORD = config('DB_PASSWORD', default='dev1')
DB_HOST = config('DB_HOST', default='127.0.0.1')
DB_PORT = config('DB_PORT', default=5432, cast=int)
DB_LOG_STATEMENTS = config('DB_LOG_STATEMENTS', default=False, cast=bool)
DB_CONNECT_TIMEOUT = config('DB_CONNECT_TIMEOUT', default=10, cast=int)  # seconds
DB_STATEMENT_TIMEOUT = config('DB_STATEMENT_TIMEOUT', default=300000, cast=int)  # ms, 5 min
DB_IDLE_IN_TRANSACTION_TIMEOUT = config('DB_IDLE_IN_TRANSACTION_TIMEOUT', default=600000, cast=int)  # ms, 10 min

# Modules whose `models.py` registers tables on the shared metadata
BOUNDARIES = [
    'core.user',
]
