"""Reservations app package.

The room reservation engine: admission policy, per-room conflict detection
under a row lock, the reservation lifecycle (create, resubmit, cancel,
approve, reject), facility bans and usage leaderboards. Overlapping
holding reservations of one room are prevented by locking the room row
inside ``transaction.atomic()`` before the conflict check.
"""
