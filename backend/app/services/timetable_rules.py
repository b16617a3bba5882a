from __future__ import annotations

DAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

TIME_SLOTS: tuple[str, ...] = (
    "09:30-10:25",
    "10:25-11:20",
    "11:20-12:20",
    "12:20-13:15",
    "13:15-14:10",
    "14:10-14:30",
    "14:30-15:25",
    "15:25-16:20",
)

# Recess bands; nothing may ever be scheduled in them.
BREAK_SLOTS: frozenset[str] = frozenset({"11:20-12:20", "14:10-14:30"})

ACTIVE_SLOTS: tuple[str, ...] = tuple(slot for slot in TIME_SLOTS if slot not in BREAK_SLOTS)

MAX_LECTURES_PER_DAY = 6
MAX_SAME_DAY_SUBJECT = 2
MAX_CONSECUTIVE_RUN = 2


def is_break_slot(time_slot: str) -> bool:
    return time_slot in BREAK_SLOTS


def day_order(day: str) -> int:
    return DAYS.index(day) if day in DAYS else len(DAYS)
