"""libotp.hotp -- HOTP / RFC 4226 token generation"""

from __future__ import annotations

import hashlib
import hmac
import re
import struct
from typing import Union

from libotp._utils.bytes import to_text
from libotp._utils.validation import validate_serial
from libotp.errors import InvalidDigitCount, MalformedTokenError

__all__ = [
    "SUPPORTED_DIGITS",
    "check_digits",
    "compute_hotp",
    "normalize_token",
]

#: token lengths accepted by :func:`compute_hotp`
SUPPORTED_DIGITS = (6, 8)

#: counters are serialized as 8 byte unsigned ints
_MAX_COUNTER = (1 << 64) - 1

#: regex used to clean whitespace from tokens
_clean_re = re.compile(r"\s", re.ASCII)


def check_digits(digits: int) -> int:
    """
    validate number of digits requested for a token.

    :raises ~libotp.errors.InvalidDigitCount: if digits isn't 6 or 8.
    """
    if type(digits) is not int or digits not in SUPPORTED_DIGITS:
        raise InvalidDigitCount(digits)
    return digits


#=============================================================================
# token generation
#=============================================================================

def compute_hotp(key: bytes, counter: int, digits: int = 6) -> str:
    """
    implementation of the lowlevel HOTP generation algorithm.

    :arg key: raw secret as :class:`!bytes`
    :arg counter: HOTP counter, as non-negative integer < 2**64
    :arg digits: number of digits in the token, 6 or 8.

    :returns: token as decimal string, zero-padded to **digits** characters.

    >>> compute_hotp(b"12345678901234567890", 0)
    '755224'
    """
    check_digits(digits)
    if not isinstance(key, bytes):
        msg = f"key must be bytes, not {type(key).__name__}"
        raise TypeError(msg)
    validate_serial(counter, "counter")
    if counter > _MAX_COUNTER:
        msg = "counter must fit in 64 bits"
        raise ValueError(msg)

    # generate digest
    digest = hmac.new(key, struct.pack(">Q", counter), hashlib.sha1).digest()

    # derive 31-bit token value (dynamic truncation)
    offset = digest[-1] & 0xF
    value = struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF

    # render to decimal string, keeping last <digits> digits
    return "%0*d" % (digits, value % 10**digits)


#=============================================================================
# token parsing
#=============================================================================

def normalize_token(token: Union[str, bytes, int], digits: int = 6) -> str:
    """
    normalize OTP token representation:
    strips whitespace, converts integers to zero-padded string,
    validates token content & number of digits.

    :raises ~libotp.errors.MalformedTokenError:
        if token has wrong number of digits, or contains non-numeric characters.
    """
    check_digits(digits)
    if isinstance(token, int) and not isinstance(token, bool):
        if token < 0:
            raise MalformedTokenError("Token must not be negative")
        token = "%0*d" % (digits, token)
    else:
        try:
            token = _clean_re.sub("", to_text(token, param="token"))
        except UnicodeDecodeError as err:
            raise MalformedTokenError("Token must contain only the digits 0-9") from err
        if not (token.isascii() and token.isdigit()):
            raise MalformedTokenError("Token must contain only the digits 0-9")
    if len(token) != digits:
        raise MalformedTokenError(f"Token must have exactly {digits} digits")
    return token
