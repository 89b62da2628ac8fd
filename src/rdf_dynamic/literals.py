"""
Lexical codecs for the supported XSD datatypes.

decode_lexical() turns the lexical form of a recognized datatype into a
native value; encode_scalar() does the reverse and picks the canonical
datatype for a native value.

Grammar notes:
  boolean   ::= 'true' | 'false' | '1' | '0'
  duration  ::= '-'? 'P' (n 'Y')? (n 'M')? (n 'D')? ('T' (n 'H')? (n 'M')? (n ('.' n)? 'S')?)?
  dateTime  ::= yyyy '-' mm '-' dd 'T' hh ':' mm ':' ss ('.' s+)? (zone)?

Years in a duration count as 365 days and months as 30 days, since
datetime.timedelta has no calendar units. Fractional seconds beyond
microsecond precision are truncated.
"""

import base64
import binascii
import math
import re
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Optional

from rdf_dynamic.errors import LiteralDecodeError, UnsupportedValueError
from rdf_dynamic.terms import Datatype, NativeType


_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_DOUBLE_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_DATETIME_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(Z|[+-]\d{2}:\d{2})?$"
)
_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(Z|[+-]\d{2}:\d{2})?$")
_DURATION_RE = re.compile(
    r"^(-)?P(?:(\d+)Y)?(?:(\d+)M)?(?:(\d+)D)?"
    r"(T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)(?:\.(\d+))?S)?)?$"
)

_MICROSECONDS_PER_DAY = 86_400 * 10 ** 6
_ONE_MICROSECOND = timedelta(microseconds=1)


# =============================================================================
# Decoding
# =============================================================================

def decode_lexical(lexical: str, datatype: Datatype) -> Any:
    """
    Decode the lexical form of a recognized datatype.

    Args:
        lexical: Literal lexical form
        datatype: The literal's datatype

    Returns:
        The native value

    Raises:
        LiteralDecodeError: If the lexical form is malformed for the datatype
    """
    native = datatype.native
    if native is NativeType.STRING:
        return lexical
    if native is NativeType.BOOLEAN:
        return _decode_boolean(lexical)
    if native is NativeType.INTEGER:
        return _decode_integer(lexical, datatype)
    if native is NativeType.DECIMAL:
        return _decode_decimal(lexical)
    if native is NativeType.FLOAT:
        return _decode_double(lexical, datatype)
    if native is NativeType.DATETIME:
        value = _decode_datetime(lexical)
        if datatype is Datatype.DATETIME_STAMP and value.tzinfo is None:
            raise LiteralDecodeError(f"dateTimeStamp requires a timezone: {lexical!r}")
        return value
    if native is NativeType.DATE:
        return _decode_date(lexical)
    if native is NativeType.DURATION:
        return _decode_duration(lexical, datatype)
    if native is NativeType.BINARY:
        return _decode_binary(lexical, datatype)
    raise LiteralDecodeError(f"No decoder for {datatype.value}")


def _decode_boolean(lexical: str) -> bool:
    text = lexical.strip()
    if text in ("true", "1"):
        return True
    if text in ("false", "0"):
        return False
    raise LiteralDecodeError(f"Invalid boolean: {lexical!r}")


def _decode_integer(lexical: str, datatype: Datatype) -> int:
    text = lexical.strip()
    if not _INTEGER_RE.match(text):
        raise LiteralDecodeError(f"Invalid {datatype.value}: {lexical!r}")
    value = int(text)
    low, high = datatype.bounds
    if (low is not None and value < low) or (high is not None and value > high):
        raise LiteralDecodeError(f"{datatype.value} out of range: {lexical!r}")
    return value


def _decode_decimal(lexical: str) -> Decimal:
    text = lexical.strip()
    if not _DECIMAL_RE.match(text):
        raise LiteralDecodeError(f"Invalid decimal: {lexical!r}")
    return Decimal(text)


def _decode_double(lexical: str, datatype: Datatype) -> float:
    text = lexical.strip()
    # rdflib normalizes special values to Python spellings ("inf", "nan")
    special = text.upper()
    if special in ("INF", "+INF"):
        return math.inf
    if special == "-INF":
        return -math.inf
    if special == "NAN":
        return math.nan
    if not _DOUBLE_RE.match(text):
        raise LiteralDecodeError(f"Invalid {datatype.value}: {lexical!r}")
    return float(text)


def _parse_zone(zone: Optional[str]) -> Optional[timezone]:
    if zone is None:
        return None
    if zone == "Z":
        return timezone.utc
    sign = -1 if zone[0] == "-" else 1
    hours, minutes = int(zone[1:3]), int(zone[4:6])
    if hours > 14 or minutes > 59:
        raise ValueError(f"timezone offset out of range: {zone}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _decode_datetime(lexical: str) -> datetime:
    match = _DATETIME_RE.match(lexical.strip())
    if not match:
        raise LiteralDecodeError(f"Invalid dateTime: {lexical!r}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    micro = int((fraction or "")[:6].ljust(6, "0"))
    try:
        tz = _parse_zone(zone)
        # 24:00:00 is the first instant of the following day
        if hour == "24" and minute == "00" and second == "00" and not micro:
            value = datetime(int(year), int(month), int(day), tzinfo=tz) + timedelta(days=1)
        else:
            value = datetime(
                int(year), int(month), int(day),
                int(hour), int(minute), int(second), micro,
                tzinfo=tz,
            )
    except (ValueError, OverflowError) as e:
        raise LiteralDecodeError(f"Invalid dateTime: {lexical!r} ({e})") from e
    return value


def _decode_date(lexical: str) -> date:
    """Decode xsd:date. A timezone is validated but dropped: date has no tzinfo."""
    match = _DATE_RE.match(lexical.strip())
    if not match:
        raise LiteralDecodeError(f"Invalid date: {lexical!r}")
    year, month, day, zone = match.groups()
    try:
        _parse_zone(zone)
        return date(int(year), int(month), int(day))
    except ValueError as e:
        raise LiteralDecodeError(f"Invalid date: {lexical!r} ({e})") from e


def _decode_duration(lexical: str, datatype: Datatype) -> timedelta:
    text = lexical.strip()
    match = _DURATION_RE.match(text)
    if not match:
        raise LiteralDecodeError(f"Invalid {datatype.value}: {lexical!r}")
    (negative, years, months, days, time_part,
     hours, minutes, seconds, fraction) = match.groups()

    if not any((years, months, days, hours, minutes, seconds)):
        raise LiteralDecodeError(f"Duration has no components: {lexical!r}")
    if time_part is not None and not any((hours, minutes, seconds)):
        raise LiteralDecodeError(f"Duration has an empty time part: {lexical!r}")
    if datatype is Datatype.DAYTIME_DURATION and (years or months):
        raise LiteralDecodeError(f"dayTimeDuration cannot use years or months: {lexical!r}")

    total_days = int(days or 0) + 365 * int(years or 0) + 30 * int(months or 0)
    total_seconds = (
        3600 * int(hours or 0)
        + 60 * int(minutes or 0)
        + int(seconds or 0)
    )
    micro = int((fraction or "")[:6].ljust(6, "0"))
    total = total_days * _MICROSECONDS_PER_DAY + total_seconds * 10 ** 6 + micro
    if negative:
        total = -total
    try:
        return timedelta(microseconds=total)
    except OverflowError as e:
        raise LiteralDecodeError(f"Duration out of range: {lexical!r}") from e


def _decode_binary(lexical: str, datatype: Datatype) -> bytes:
    text = "".join(lexical.split())
    try:
        if datatype is Datatype.HEX_BINARY:
            return bytes.fromhex(text)
        return base64.b64decode(text, validate=True)
    except (ValueError, binascii.Error) as e:
        raise LiteralDecodeError(f"Invalid {datatype.value}: {lexical!r}") from e


# =============================================================================
# Encoding
# =============================================================================

def encode_scalar(value: Any) -> Optional[tuple[str, Datatype]]:
    """
    Encode a native scalar as (lexical form, datatype).

    Strings are not handled here: they become plain literals without a
    datatype. Returns None when the value's type has no datatype mapping.
    """
    # bool before int, datetime before date: subclass order matters
    if isinstance(value, bool):
        return ("true" if value else "false"), Datatype.BOOLEAN
    if isinstance(value, int):
        return str(value), Datatype.INTEGER
    if isinstance(value, Decimal):
        return _encode_decimal(value), Datatype.DECIMAL
    if isinstance(value, float):
        return _encode_double(value), Datatype.DOUBLE
    if isinstance(value, datetime):
        return value.isoformat(), Datatype.DATETIME
    if isinstance(value, date):
        return value.isoformat(), Datatype.DATE
    if isinstance(value, timedelta):
        return encode_duration(value), Datatype.DURATION
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii"), Datatype.BASE64_BINARY
    return None


def _encode_decimal(value: Decimal) -> str:
    if not value.is_finite():
        raise UnsupportedValueError(f"xsd:decimal cannot represent {value}")
    return format(value, "f")


def _encode_double(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "INF" if value > 0 else "-INF"
    return repr(value)


def encode_duration(value: timedelta) -> str:
    """Canonical xsd:duration lexical form of a timedelta."""
    total = value // _ONE_MICROSECOND
    sign = "-" if total < 0 else ""
    total = abs(total)

    days, rest = divmod(total, _MICROSECONDS_PER_DAY)
    seconds, micro = divmod(rest, 10 ** 6)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)

    out = "P"
    if days:
        out += f"{days}D"
    clock = ""
    if hours:
        clock += f"{hours}H"
    if minutes:
        clock += f"{minutes}M"
    if seconds or micro:
        if micro:
            clock += f"{seconds}.{micro:06d}".rstrip("0") + "S"
        else:
            clock += f"{seconds}S"
    if clock:
        out += "T" + clock
    if out == "P":
        return "PT0S"
    return sign + out
