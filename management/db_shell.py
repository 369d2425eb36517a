import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
# ruff: noqa: E402
from alert.network.database.session import get_database_url

url = get_database_url()

if url.get_backend_name() == 'sqlite':
    dbshell_command = f'sqlite3 {url.database}'
else:
    os.environ['PGPASSWORD'] = url.password or ''
    dbshell_command = f'psql -U {url.username} -d {url.database} -h {url.host} -p {url.port or 5432}'

os.system(dbshell_command)
