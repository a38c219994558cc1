"""Core app package.

Cross-cutting pieces used by every other app: the error taxonomy raised by
services, the runtime configuration store, the audit trail pipeline
(domain event -> message bus -> celery task -> ``AuditLog`` row),
capability checks, pagination and the health check endpoint.
"""
