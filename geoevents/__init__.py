"""Geospatial event discovery: radius search, interest matching and notifications.

Components are wired together by :mod:`geoevents.container`; the reminder
sweeper runs through ``python -m geoevents.worker``.
"""

__version__ = "0.1.0"
