"""libotp.totp -- TOTP / RFC 6238 token generation"""

from __future__ import annotations

import calendar
import dataclasses
import datetime
import hmac
import time as _time
from typing import Callable, Optional, Union

from libotp._utils.bytes import StrOrBytes
from libotp._utils.validation import validate_serial
from libotp.hotp import check_digits, compute_hotp, normalize_token
from libotp.secret import normalize

__all__ = [
    "DEFAULT_PERIOD",
    "TimeLike",
    "TotpToken",
    "normalize_time",
    "time_to_counter",
    "compute_totp",
    "current_totp",
    "generate_totp",
    "verify_totp",
]

#: default number of seconds per time step
DEFAULT_PERIOD = 30

TimeLike = Union[int, float, datetime.datetime]

Clock = Callable[[], float]


@dataclasses.dataclass(frozen=True)
class TotpToken:
    """
    Token generated for a single time step.

    .. attribute:: token

        decimal-formatted token as a string

    .. attribute:: counter

        HOTP counter value used to generate the token

    .. attribute:: period

        number of seconds in the time step
    """

    token: str
    counter: int
    period: int = DEFAULT_PERIOD

    @property
    def start_time(self) -> int:
        """unix epoch time when the token became valid"""
        return self.counter * self.period

    @property
    def expire_time(self) -> int:
        """unix epoch time when the token expires"""
        return (self.counter + 1) * self.period

    def remaining(self, now: float) -> float:
        """number of seconds the token is still valid for at <now>"""
        return max(0, self.expire_time - now)

    def valid(self, now: float) -> bool:
        return self.start_time <= now < self.expire_time


#=============================================================================
# time helpers
#=============================================================================

def normalize_time(value: Optional[TimeLike], clock: Clock = _time.time) -> int:
    """
    Normalize time value to unix epoch seconds.

    :arg value:
        Can be ``None``, :class:`!datetime`,
        or unix epoch timestamp as :class:`!float` or :class:`!int`.
        If ``None``, reads **clock**. Naive datetimes are treated as UTC.

    :returns:
        unix epoch timestamp as :class:`int`, truncated to whole seconds.
    """
    if value is None:
        value = clock()
    if isinstance(value, bool):
        pass
    elif isinstance(value, int):
        return value
    elif isinstance(value, float):
        # NOTE: check sign first, int(-0.5) would truncate to 0
        if value < 0:
            msg = "time must be >= 0"
            raise ValueError(msg)
        return int(value)
    elif isinstance(value, datetime.datetime):
        # NOTE: utctimetuple() treats naive datetimes as UTC, and drops microseconds
        return calendar.timegm(value.utctimetuple())
    msg = f"time must be int, float, or datetime, not {type(value).__name__}"
    raise TypeError(msg)


def time_to_counter(now: TimeLike, period: int = DEFAULT_PERIOD) -> int:
    """
    convert timestamp to HOTP counter: the number of whole
    <period> second steps since the unix epoch.
    """
    validate_serial(period, "period", min=1)
    now = normalize_time(now)
    if now < 0:
        msg = "time must be >= 0"
        raise ValueError(msg)
    return now // period


#=============================================================================
# token generation
#=============================================================================

def compute_totp(
    secret: StrOrBytes,
    digits: int,
    now: TimeLike,
    period: int = DEFAULT_PERIOD,
) -> str:
    """
    Generate the token for the time step containing **now**.

    :arg secret:
        base32 encoded secret (spaces allowed, any case), or raw :class:`!bytes`.

    :arg digits: number of digits in the token, 6 or 8.

    :arg now:
        unix epoch timestamp as :class:`!int` or :class:`!float`, or a :class:`!datetime`.

    :arg period: number of seconds per time step. Defaults to 30.

    >>> compute_totp("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ", 8, 59)
    '94287082'
    """
    check_digits(digits)
    key = normalize(secret)
    return compute_hotp(key, time_to_counter(now, period), digits)


def current_totp(
    secret: StrOrBytes,
    digits: int = 6,
    period: int = DEFAULT_PERIOD,
    clock: Clock = _time.time,
) -> str:
    """generate the token for the current system time"""
    return compute_totp(secret, digits, normalize_time(None, clock), period)


def generate_totp(
    secret: StrOrBytes,
    now: Optional[TimeLike] = None,
    digits: int = 6,
    period: int = DEFAULT_PERIOD,
    clock: Clock = _time.time,
) -> TotpToken:
    """
    Generate token for the specified time, wrapped in a :class:`TotpToken`.

    Usage example::

        >>> generate_totp("s3jdvb7qd2r7jpxx", 1419622739)
        TotpToken(token='897212', counter=47320757, period=30)
    """
    check_digits(digits)
    key = normalize(secret)
    counter = time_to_counter(normalize_time(now, clock), period)
    return TotpToken(compute_hotp(key, counter, digits), counter, period)


def verify_totp(
    secret: StrOrBytes,
    token: Union[str, bytes, int],
    now: Optional[TimeLike] = None,
    digits: int = 6,
    period: int = DEFAULT_PERIOD,
    clock: Clock = _time.time,
) -> bool:
    """
    Check if token matches the one for the time step containing **now**.
    Only the current step is checked, callers wanting to accept
    neighbouring steps should check those times themselves.

    :raises ~libotp.errors.MalformedTokenError:
        if token is malformed.
    """
    token = normalize_token(token, digits)
    expected = generate_totp(secret, now, digits, period, clock).token
    return hmac.compare_digest(token, expected)
