"""Facilities app package.

Catalog of buildings and the rooms on their floors. Rooms are the unit of
exclusivity for reservations. The catalog is maintained through the Django
admin; the API only exposes read-only listings for the booking portal.
"""
