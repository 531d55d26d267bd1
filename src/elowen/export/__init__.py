"""
Elowen Export - Routine to calendar (.ics).
"""

from .ics import CalendarExport, build_export, encode

__all__ = ["CalendarExport", "build_export", "encode"]
