"""Development settings for the room reservations project.

This module extends the base settings with development specific
configuration, such as enabling debug, allowing all hosts and running
celery tasks inline so no broker is required. Do not use these settings
in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Run audit tasks inline unless a broker is explicitly configured
CELERY_TASK_ALWAYS_EAGER = os.environ.get('CELERY_TASK_ALWAYS_EAGER', 'true').lower() == 'true'  # noqa: F405
