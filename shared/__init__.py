"""
Shared Kernel

Framework-light building blocks reused by the reservation apps:
value objects for time intervals, domain events, the unit of work and
the in-process message bus.
"""
