"""Weekly availability maps.

A barber's availability is stored as a JSON string such as
``{"monday": ["09:00-12:00", "13:00-17:00"], "tuesday": ["09:00-17:00"]}``.
Keys are lowercase weekday names, values are lists of ``HH:MM-HH:MM`` ranges.
"""

import json
import re
from typing import Dict, List, Optional

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_RANGE_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)-([01]\d|2[0-3]):([0-5]\d)$")

EMPTY_AVAILABILITY = "{}"


class AvailabilityError(ValueError):
    pass


def parse_availability(raw: Optional[str]) -> Dict[str, List[str]]:
    """Decode and validate an availability string; empty input means no hours"""
    if raw is None or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise AvailabilityError(f"Availability must be valid JSON: {e.msg}") from e

    if not isinstance(data, dict):
        raise AvailabilityError("Availability must be a JSON object keyed by weekday")

    result: Dict[str, List[str]] = {}
    for day, ranges in data.items():
        if day not in WEEKDAYS:
            raise AvailabilityError(f"Unknown weekday: {day!r}")
        if not isinstance(ranges, list):
            raise AvailabilityError(f"Availability for {day} must be a list of time ranges")
        for time_range in ranges:
            if not isinstance(time_range, str):
                raise AvailabilityError(f"Invalid time range for {day}: {time_range!r}")
            match = _RANGE_RE.match(time_range)
            if not match:
                raise AvailabilityError(f"Invalid time range for {day}: {time_range!r}")
            start = match.group(1) + match.group(2)
            end = match.group(3) + match.group(4)
            if end <= start:
                raise AvailabilityError(f"Time range for {day} must end after it starts: {time_range}")
        result[day] = list(ranges)
    return result


def normalize_availability(raw: Optional[str]) -> str:
    """Validate and re-encode with weekdays in calendar order"""
    parsed = parse_availability(raw)
    ordered = {day: parsed[day] for day in WEEKDAYS if day in parsed}
    return json.dumps(ordered)


def available_days(raw: Optional[str]) -> List[str]:
    parsed = parse_availability(raw)
    return [day for day in WEEKDAYS if parsed.get(day)]
