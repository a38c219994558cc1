"""Users app package.

Defines the custom user model (email login, account status, account-level
ban and soft delete) together with the active-user lookups the reservation
engine uses to validate participants. Use ``apps.users.models.CustomUser``
as the AUTH_USER_MODEL throughout the project.
"""
