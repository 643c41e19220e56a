import re
from datetime import timedelta
from typing import List, Tuple

from .errors import UserError

ZERO = timedelta(0)
SECOND = timedelta(seconds=1)

MAX_PARTS = 4
FIELDS = ("seconds", "minutes", "hours", "days")
UNIT_SECONDS = {"seconds": 1, "minutes": 60, "hours": 3600, "days": 86400}

FORMAT_ADVICE = 'Provide the duration in the following format: "d:h:m:s.ms"'
OVERFLOW_ADVICE = "Make sure the value is within a reasonable range"

_NUMBER = re.compile(r"[0-9]+")


class DurationError(UserError):
    pass


class DurationFormatError(DurationError):
    """Shape of the input is wrong; the specific reason is the cause."""

    def __init__(self, reason: str, hint: str) -> None:
        super().__init__("Failed to parse the duration", FORMAT_ADVICE)
        self.reason = reason
        self.__cause__ = UserError(reason, hint)


class MissingPartsError(DurationFormatError):
    def __init__(self) -> None:
        super().__init__(
            "Missing parts",
            "Make sure to provide at least the seconds part of the duration",
        )


class TooManyPartsError(DurationFormatError):
    def __init__(self, count: int) -> None:
        super().__init__(
            "Too many parts",
            "Make sure to provide at most 4 parts for days, hours, minutes, and seconds",
        )
        self.count = count


class TooManySecondsPartsError(DurationFormatError):
    def __init__(self) -> None:
        super().__init__(
            "Too many parts in seconds.milliseconds",
            "Make sure to provide at most one dot in the seconds part",
        )


class InvalidPartError(DurationError):
    def __init__(self, field: str, text: str) -> None:
        super().__init__(
            f"Failed to parse the {field} part",
            f"Make sure to provide a valid number for the {field} part",
        )
        self.field = field
        self.text = text


class DurationOverflowError(DurationError):
    def __init__(self, unit: str) -> None:
        super().__init__(
            "Duration overflow",
            "The provided duration is too large to be represented",
        )
        self.unit = unit


class UnknownPartError(DurationError):
    def __init__(self, index: int) -> None:
        super().__init__(
            "Invalid duration part",
            "Make sure to provide a valid number for the duration part",
        )
        self.index = index


def _parse_number(text: str, field: str) -> int:
    if not _NUMBER.fullmatch(text):
        if text:
            reason = f"invalid digit found in {text!r}"
        else:
            reason = "cannot parse a number from an empty string"
        raise InvalidPartError(field, text) from ValueError(reason)
    return int(text)


def _add_unit(total: timedelta, value: int, unit: str) -> timedelta:
    try:
        if unit == "milliseconds":
            return total + timedelta(milliseconds=value)
        return total + timedelta(seconds=value * UNIT_SECONDS[unit])
    except OverflowError as err:
        detail = UserError(f"Overflow in {unit}", OVERFLOW_ADVICE)
        detail.__cause__ = err
        raise DurationOverflowError(unit) from detail


def _split_fields(text: str) -> List[str]:
    # At most MAX_PARTS + 1 tokens, so an extra field is reported, not folded in.
    parts = text.rsplit(":", MAX_PARTS)
    parts.reverse()
    return parts


def parse_duration(text: str) -> timedelta:
    """Parse ``[[[d:]h:]m:]s[.ms]`` into a non-negative timedelta.

    Fields are read right to left. Raises a DurationError subclass naming
    the offending part; values too large for a timedelta are reported as
    DurationOverflowError instead of being truncated.
    """
    if not text:
        raise MissingPartsError()
    parts = _split_fields(text)
    if len(parts) > MAX_PARTS:
        raise TooManyPartsError(len(parts))

    pieces = parts[0].split(".", 2)
    if len(pieces) > 2:
        raise TooManySecondsPartsError()
    seconds = _parse_number(pieces[0], "seconds")
    millis = _parse_number(pieces[1], "milliseconds") if len(pieces) == 2 else 0

    total = _add_unit(ZERO, seconds, "seconds")
    total = _add_unit(total, millis, "milliseconds")
    for index, part in enumerate(parts[1:], start=1):
        if index >= len(FIELDS):
            raise UnknownPartError(index)
        unit = FIELDS[index]
        total = _add_unit(total, _parse_number(part, unit), unit)
    return total


def split_duration(value: timedelta) -> Tuple[int, int, int, int]:
    total = max(0, value // SECOND)
    days = total // 86400
    hours = (total % 86400) // 3600
    minutes = (total % 3600) // 60
    seconds = total % 60
    return days, hours, minutes, seconds


def format_duration(value: timedelta) -> str:
    days, hours, minutes, seconds = split_duration(value)
    text = ""
    if days > 0:
        text += f"{days}d "
    if hours > 0 or days > 0:
        text += f"{hours}h "
    if minutes > 0 or hours > 0 or days > 0:
        text += f"{minutes}m "
    return text + f"{seconds}s"
