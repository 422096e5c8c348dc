"""libotp.secret -- shared secret generation & base32 encoding helpers"""

from __future__ import annotations

import base64
import re
import secrets
import warnings
from typing import Callable, Literal, Optional

import typing_extensions

from libotp._logging import logger
from libotp._utils.bytes import StrOrBytes, to_text
from libotp.errors import InvalidSecretFormat, SecureRandomUnavailable, WeakSecretWarning

__all__ = [
    "DEFAULT_SECRET_SIZE",
    "RandomSource",
    "generate_secret",
    "normalize",
    "canonical",
    "b32encode",
    "group_string",
    "pretty_secret",
    "decode_secret",
]

#: number of random bytes in a new secret (matches the SHA1 digest size, per RFC 4226)
DEFAULT_SECRET_SIZE = 20

#: minimum number of bytes before a secret is considered weak
MIN_SECRET_SIZE = 10

#: callable returning the requested number of cryptographically secure bytes
RandomSource = Callable[[int], bytes]

SecretFormat = Literal["base32", "hex", "raw"]

#: regex used to clean whitespace & separators from secrets
_clean_re = re.compile(r"\s|-", re.ASCII)


def b32encode(key: bytes) -> str:
    """
    wrapper around :func:`base64.b32encode` which strips padding,
    and returns a native string.
    """
    return base64.b32encode(key).rstrip(b"=").decode("ascii")


def group_string(value: str, size: int = 4, sep: str = " ") -> str:
    """
    reformat string into groups of <size> characters, separated by **sep**.
    the final group may be shorter.
    """
    return sep.join(value[offset : offset + size] for offset in range(0, len(value), size))


def _read_random(random_source: RandomSource, size: int) -> bytes:
    try:
        data = random_source(size)
    except (OSError, NotImplementedError) as err:
        raise SecureRandomUnavailable(f"secure random source failed: {err}") from err
    if not isinstance(data, bytes) or len(data) != size:
        msg = f"secure random source did not return {size} bytes"
        raise SecureRandomUnavailable(msg)
    return data


def generate_secret(
    human_readable: bool = False,
    *,
    size: int = DEFAULT_SECRET_SIZE,
    random_source: Optional[RandomSource] = None,
) -> str:
    """
    Generate a new random secret, encoded as upper case base32 without padding.

    :param human_readable:
        If ``True``, a space is inserted between every 4 character group,
        e.g. ``"OMBH 5TDM ..."`` (39 characters for the default size).

    :param size:
        Number of random bytes in the secret. Defaults to 20.

    :param random_source:
        Callable returning ``n`` secure random bytes.
        Defaults to :func:`secrets.token_bytes`.

    :raises ~libotp.errors.SecureRandomUnavailable:
        if the random source fails.
    """
    if size < MIN_SECRET_SIZE:
        msg = f"size must be >= {MIN_SECRET_SIZE}"
        raise ValueError(msg)
    key = _read_random(random_source or secrets.token_bytes, size)
    logger.debug("generated new %d-byte secret", size)
    return pretty_secret(key) if human_readable else b32encode(key)


def pretty_secret(key: bytes, sep: str = " ") -> str:
    """
    pretty-print raw secret as grouped base32, for users who must type it
    into their authenticator by hand.

    >>> pretty_secret(b"Hello!\\xde\\xad\\xbe\\xef")
    'JBSW Y3DP EHPK 3PXP'
    """
    return group_string(b32encode(key), sep=sep)


def _b32decode(text: str) -> bytes:
    # NOTE: check before upper(), unicode case mapping can produce base32 chars (e.g. 'ı' -> 'I')
    if not text.isascii():
        raise InvalidSecretFormat("secret must be ascii text")
    text = _clean_re.sub("", text).rstrip("=").upper()
    pad = -len(text) % 8
    try:
        return base64.b32decode(text + "=" * pad)
    except ValueError as err:
        raise InvalidSecretFormat(f"secret is not a valid base32 string: {err}") from err


def _check_size(key: bytes, size: Optional[int]) -> bytes:
    if not key:
        raise InvalidSecretFormat("secret must not be empty")
    if size is not None and len(key) != size:
        msg = f"secret must decode to {size} bytes, got {len(key)}"
        raise InvalidSecretFormat(msg)
    if len(key) < MIN_SECRET_SIZE:
        logger.warning("secret is only %d bytes long", len(key))
        warnings.warn(
            f"for security purposes, secret should be >= {MIN_SECRET_SIZE} bytes",
            WeakSecretWarning,
            stacklevel=3,
        )
    return key


def normalize(secret: StrOrBytes, *, size: Optional[int] = None) -> bytes:
    """
    Resolve a secret to raw bytes.

    :class:`!str` secrets are base32 text (grouped or not, any case);
    whitespace, ``-`` separators and trailing padding are ignored.
    :class:`!bytes` secrets are the raw key, and are returned as-is.

    :param size:
        If set, the secret must be exactly this many bytes.

    :raises ~libotp.errors.InvalidSecretFormat:
        if the text isn't valid base32, or the secret has an unexpected size.
    """
    if isinstance(secret, bytes):
        return _check_size(secret, size)
    if not isinstance(secret, str):
        msg = f"secret must be str or bytes, not {type(secret).__name__}"
        raise TypeError(msg)
    return _check_size(_b32decode(secret), size)


def canonical(secret: StrOrBytes) -> str:
    """return the ungrouped, upper case base32 form of a secret (text or raw bytes)"""
    return b32encode(normalize(secret))


def decode_secret(key: StrOrBytes, format: SecretFormat = "base32") -> bytes:
    """
    decode a secret according to the specified format:
    ``"base32"`` (base32 text), ``"hex"`` (hexadecimal text), or ``"raw"`` (bytes).
    text formats also accept ascii-encoded bytes.
    """
    if format == "raw":
        if not isinstance(key, bytes):
            msg = f"raw secret must be bytes, not {type(key).__name__}"
            raise TypeError(msg)
        return _check_size(key, None)
    try:
        text = to_text(key, param="secret")
    except UnicodeDecodeError as err:
        raise InvalidSecretFormat("secret must be ascii text") from err
    if format == "hex":
        try:
            key = bytes.fromhex(_clean_re.sub("", text))
        except ValueError as err:
            raise InvalidSecretFormat(f"secret is not a valid hex string: {err}") from err
        return _check_size(key, None)
    if format == "base32":
        return _check_size(_b32decode(text), None)
    typing_extensions.assert_never(format)
