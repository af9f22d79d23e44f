# events/slots.py
"""
Slot schedule helpers.

An event day is cut into `slot_count` slots of `slot_minutes` each,
starting at `first_slot`. Slot times are plain `datetime.time` values;
the API exchanges them as "HH:MM:SS" strings.
"""
from datetime import date, datetime, time, timedelta
from typing import List, Optional


def generate_slots(event) -> List[time]:
    """All slot start times of one event day, in order."""
    base = datetime.combine(date.today(), event.first_slot)
    step = timedelta(minutes=event.slot_minutes)
    slots = []
    for i in range(event.slot_count):
        start = base + i * step
        # Never roll over into the next day
        if start.date() != base.date():
            break
        slots.append(start.time())
    return slots


def parse_slot(value) -> Optional[time]:
    """
    Parse "HH:MM" / "HH:MM:SS" (or a time) into a time.

    Returns None if the value is empty or malformed.
    """
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value.replace(microsecond=0)
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(str(value).strip(), fmt).time()
        except ValueError:
            continue
    return None


def is_valid_slot(event, slot: time) -> bool:
    return slot in generate_slots(event)


def format_slot(slot: Optional[time]) -> Optional[str]:
    if slot is None:
        return None
    return slot.strftime("%H:%M:%S")


def parse_event_date(value) -> Optional[date]:
    """Parse an ISO "YYYY-MM-DD" date; None if empty or malformed."""
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None
