"""
Elowen - Calendar export.

Serializes a DailyRoutine into an iCalendar (RFC 5545) document with two
daily recurring events:

    Elowen Morning Routine   08:00 local, every day, no end
    Elowen Evening Routine   21:00 local, every day, no end

Output depends only on the routine and `now`; `now` feeds UID, DTSTAMP and
the DTSTART date.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from pathlib import Path

from elowen.core.models import DailyRoutine, Period, RoutineStep

MIME_TYPE = "text/calendar"
FILENAME = "elowen-skincare-routine.ics"
PRODID = "-//Elowen Skincare//NONSGML v1.0//EN"
UID_DOMAIN = "elowen.ai"

CRLF = "\r\n"
MAX_LINE_OCTETS = 75

# (title, period, local start HHMM)
ROUTINE_EVENTS = [
    ("Morning Routine", Period.AM, "0800"),
    ("Evening Routine", Period.PM, "2100"),
]


# =============================================================================
# Formatting helpers
# =============================================================================


def escape_text(value: str) -> str:
    """Escape a TEXT property value."""
    value = value.replace("\r\n", "\n").replace("\r", "\n")
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def fold_line(line: str) -> str:
    """Fold a content line at 75 octets without splitting UTF-8 sequences."""
    if len(line.encode("utf-8")) <= MAX_LINE_OCTETS:
        return line

    parts: list[str] = []
    current = ""
    current_octets = 0
    limit = MAX_LINE_OCTETS
    for ch in line:
        size = len(ch.encode("utf-8"))
        if current_octets + size > limit:
            parts.append(current)
            current, current_octets = "", 0
            limit = MAX_LINE_OCTETS - 1  # continuation lines start with a space
        current += ch
        current_octets += size
    parts.append(current)
    return (CRLF + " ").join(parts)


def unfold(document: str) -> str:
    """Undo line folding (for readers and tests)."""
    return document.replace(CRLF + " ", "")


def utc_stamp(moment: datetime) -> str:
    """UTC basic form, e.g. 20261019T083000Z."""
    return moment.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def normalize_title(title: str) -> str:
    return re.sub(r"\s", "", title.lower())


def describe_steps(steps: list[RoutineStep]) -> str:
    """One "{name}: {description}" line per step, in stored order."""
    return "\n".join(f"{step.name}: {step.description}" for step in steps)


# =============================================================================
# Encoder
# =============================================================================


def _event_lines(title: str, steps: list[RoutineStep], start_hhmm: str, now: datetime, local: datetime) -> list[str]:
    epoch_ms = int(now.timestamp() * 1000)
    return [
        "BEGIN:VEVENT",
        f"UID:{normalize_title(title)}-{epoch_ms}@{UID_DOMAIN}",
        f"DTSTAMP:{utc_stamp(now)}",
        f"DTSTART;VALUE=DATE-TIME:{local:%Y%m%d}T{start_hhmm}00",
        "RRULE:FREQ=DAILY",
        f"SUMMARY:{escape_text('Elowen ' + title)}",
        f"DESCRIPTION:{escape_text(describe_steps(steps))}",
        "END:VEVENT",
    ]


def encode(routine: DailyRoutine, now: datetime, tz: tzinfo | None = None) -> str:
    """
    Encode the routine as an iCalendar document.

    Args:
        routine: Routine to export (not modified)
        now: Encoding instant; naive values are read as system local time
        tz: Zone whose wall clock the events start in (default: system local)

    Returns:
        The document, CRLF-terminated lines, folded at 75 octets
    """
    local = now.astimezone(tz) if tz is not None else now.astimezone()

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
    ]
    for title, period, start in ROUTINE_EVENTS:
        lines += _event_lines(title, routine.steps(period), start, now, local)
    lines.append("END:VCALENDAR")

    return "".join(fold_line(line) + CRLF for line in lines)


@dataclass(frozen=True)
class CalendarExport:
    """A ready-to-save calendar file."""
    content: str
    filename: str = FILENAME
    mime_type: str = MIME_TYPE

    def write(self, directory: Path | str = ".") -> Path:
        """Write the file (bytes, so CRLF endings survive) and return its path."""
        path = Path(directory) / self.filename
        path.write_bytes(self.content.encode("utf-8"))
        return path


def build_export(routine: DailyRoutine, now: datetime, tz: tzinfo | None = None) -> CalendarExport:
    return CalendarExport(content=encode(routine, now, tz))
