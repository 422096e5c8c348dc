"""libotp.context -- application-wide TOTP settings"""

from __future__ import annotations

import dataclasses
import time as _time
from typing import TYPE_CHECKING, Callable, Optional, Union

from libotp._utils.validation import validate_serial
from libotp.hotp import check_digits
from libotp.secret import DEFAULT_SECRET_SIZE, MIN_SECRET_SIZE, generate_secret
from libotp.totp import DEFAULT_PERIOD, generate_totp, verify_totp
from libotp.uri import build_uri

if TYPE_CHECKING:
    from libotp._utils.bytes import StrOrBytes
    from libotp.secret import RandomSource
    from libotp.totp import TimeLike, TotpToken

__all__ = ["OTPContext"]


@dataclasses.dataclass(frozen=True)
class OTPContext:
    """
    Application-wide TOTP settings.

    An instance of this class should be created once by the application,
    and used to create secrets, tokens and provisioning uris
    with consistent settings::

        >>> context = OTPContext(digits=8, issuer="Example Org")
        >>> secret = context.new_secret()
        >>> uri = context.to_uri(secret, "alice@example.org")
        >>> token = context.token(secret)

    :param digits: number of digits in generated tokens, 6 (the default) or 8.
    :param period: number of seconds per time step, defaults to 30.
    :param issuer: default issuer for :meth:`to_uri`.
    :param secret_size: number of bytes in secrets created by :meth:`new_secret`.
    :param random_source: callable returning secure random bytes.
    :param clock: callable returning the current unix time.
        Intended for examples & unittests, not real-world use.
    """

    digits: int = 6
    period: int = DEFAULT_PERIOD
    issuer: Optional[str] = None
    secret_size: int = DEFAULT_SECRET_SIZE
    random_source: Optional[RandomSource] = None
    clock: Callable[[], float] = _time.time

    def __post_init__(self) -> None:
        check_digits(self.digits)
        validate_serial(self.period, "period", min=1)
        validate_serial(self.secret_size, "secret_size", min=MIN_SECRET_SIZE)

    def using(self, **kwds) -> OTPContext:
        """return a copy of this context, with some settings replaced"""
        return dataclasses.replace(self, **kwds)

    def new_secret(self, human_readable: bool = False) -> str:
        return generate_secret(
            human_readable,
            size=self.secret_size,
            random_source=self.random_source,
        )

    def generate(self, secret: StrOrBytes, now: Optional[TimeLike] = None) -> TotpToken:
        return generate_totp(secret, now, self.digits, self.period, self.clock)

    def token(self, secret: StrOrBytes, now: Optional[TimeLike] = None) -> str:
        return self.generate(secret, now).token

    def verify(
        self,
        secret: StrOrBytes,
        token: Union[str, bytes, int],
        now: Optional[TimeLike] = None,
    ) -> bool:
        return verify_totp(secret, token, now, self.digits, self.period, self.clock)

    def to_uri(
        self, secret: StrOrBytes, account: str, issuer: Optional[str] = None
    ) -> str:
        """
        render provisioning uri for <account>.
        **issuer** defaults to the context's issuer, or an empty string.
        """
        if issuer is None:
            issuer = self.issuer or ""
        return build_uri(secret, account, issuer)
