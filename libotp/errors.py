"""libotp.errors -- exceptions & warnings raised by libotp"""

from __future__ import annotations

from typing import Any

__all__ = [
    "OTPError",
    "InvalidDigitCount",
    "InvalidSecretFormat",
    "SecureRandomUnavailable",
    "MalformedTokenError",
    "MalformedURIError",
    "WeakSecretWarning",
]


class OTPError(Exception):
    """
    Base class for all errors raised by libotp.

    :attr param: name of the parameter which caused the error, if known.
    """

    _default_message = "otp error"

    def __init__(self, msg: str | None = None, *, param: str | None = None) -> None:
        self.param = param
        super().__init__(msg or self._default_message)


class InvalidDigitCount(OTPError, ValueError):
    """raised when a token length other than 6 or 8 digits is requested"""

    def __init__(self, digits: Any, param: str = "digits") -> None:
        self.value = digits
        super().__init__(f"{param} must be either 6 or 8, got {digits!r}", param=param)


class InvalidSecretFormat(OTPError, ValueError):
    """raised when a secret can't be decoded, or decodes to the wrong size"""

    _default_message = "secret is not a valid base32 string"

    def __init__(self, msg: str | None = None, *, param: str = "secret") -> None:
        super().__init__(msg, param=param)


class SecureRandomUnavailable(OTPError, RuntimeError):
    """raised when the cryptographic random source can't provide bytes"""

    _default_message = "secure random source is unavailable"

    def __init__(self, msg: str | None = None) -> None:
        super().__init__(msg, param="random_source")


class MalformedTokenError(OTPError, ValueError):
    """raised when an OTP token has the wrong length or non-digit characters"""

    _default_message = "unrecognized token"

    def __init__(self, msg: str | None = None) -> None:
        super().__init__(msg, param="token")


class MalformedURIError(OTPError, ValueError):
    """raised by :func:`libotp.uri.parse_uri` when a uri can't be parsed"""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid otpauth uri: {reason}", param="uri")


class WeakSecretWarning(UserWarning):
    """issued when a secret has fewer bytes than is considered safe"""
