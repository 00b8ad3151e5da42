"""
Database configuration for the Forklift Service Tracker.

Resolution order:
- DATABASE_URL (postgres://, postgresql:// or sqlite:///path)
- Individual DB_* environment variables (PostgreSQL)
- Local SQLite file for development and tests
"""
import os
import re
from pathlib import Path

POSTGRES_URL_PATTERN = re.compile(
    r'postgres(?:ql)?://(?P<user>[^:]+):(?P<password>[^@]+)@(?P<host>[^:/]+)(?::(?P<port>\d+))?/(?P<name>[^?]+)'
)


def get_database_config(base_dir: Path) -> dict:
    """
    Returns the Django DATABASES['default'] entry for this environment.
    """
    database_url = os.getenv('DATABASE_URL', '')

    if database_url.startswith('postgres'):
        return _parse_postgres_url(database_url)

    if database_url.startswith('sqlite:///'):
        return {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': database_url[len('sqlite:///'):] or base_dir / 'db.sqlite3',
        }

    if os.getenv('DB_HOST'):
        return _get_env_config()

    return {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': base_dir / 'db.sqlite3',
    }


def _parse_postgres_url(url: str) -> dict:
    """Parse a PostgreSQL DATABASE_URL into a Django config."""
    match = POSTGRES_URL_PATTERN.match(url)
    if not match:
        raise ValueError("Invalid DATABASE_URL format")

    return _with_pool_settings({
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': match.group('name'),
        'USER': match.group('user'),
        'PASSWORD': match.group('password'),
        'HOST': match.group('host'),
        'PORT': match.group('port') or '5432',
    })


def _get_env_config() -> dict:
    """Build config from individual environment variables."""
    config = {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.getenv('DB_NAME', 'forklifts'),
        'USER': os.getenv('DB_USER', 'postgres'),
        'HOST': os.getenv('DB_HOST', 'localhost'),
        'PORT': os.getenv('DB_PORT', '5432'),
    }

    password = os.getenv('DB_PASSWORD')
    if password:
        config['PASSWORD'] = password

    if os.getenv('DB_SSLMODE'):
        config['OPTIONS'] = {'sslmode': os.getenv('DB_SSLMODE')}

    return _with_pool_settings(config)


def _with_pool_settings(config: dict) -> dict:
    # Lambda containers must not hold connections between invocations
    if os.getenv('AWS_LAMBDA_FUNCTION_NAME'):
        config['CONN_MAX_AGE'] = 0
        config.setdefault('OPTIONS', {})['connect_timeout'] = 5
    else:
        config['CONN_MAX_AGE'] = int(os.getenv('DB_CONN_MAX_AGE', '60'))
    return config
