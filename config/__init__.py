"""Top-level package for Django configuration.

This package exposes project configuration for the room reservations
service. It contains settings modules for different environments, the
celery application and entry points for WSGI and ASGI.
"""

# Import the Celery application as soon as Django starts. Without this
# the shared task registry will not be populated.
from .celery import app as celery_app  # noqa: F401
