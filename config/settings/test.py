"""Test settings.

In-memory SQLite, fast password hashing and inline celery tasks. Tests
that need real row locks check ``connection.features.has_select_for_update``
and are skipped on SQLite. Run them against PostgreSQL with the
``postgres`` extra installed:

    DB_ENGINE=django.db.backends.postgresql DB_NAME=reservations \\
    DB_USER=postgres DB_PASSWORD=postgres DB_HOST=localhost pytest

pytest-django creates and drops ``test_<DB_NAME>`` for the run.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': os.environ.get('DB_ENGINE', 'django.db.backends.sqlite3'),  # noqa: F405
        'NAME': os.environ.get('DB_NAME', ':memory:'),  # noqa: F405
        'USER': os.environ.get('DB_USER', ''),  # noqa: F405
        'PASSWORD': os.environ.get('DB_PASSWORD', ''),  # noqa: F405
        'HOST': os.environ.get('DB_HOST', ''),  # noqa: F405
        'PORT': os.environ.get('DB_PORT', ''),  # noqa: F405
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

RESERVATIONS_AUDIT_REQUIRED_DEFAULT = False
RESERVATIONS_MAX_DURATION_HOURS_DEFAULT = 72.0

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

LOGGING['root']['level'] = 'CRITICAL'  # noqa: F405
