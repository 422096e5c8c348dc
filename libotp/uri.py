"""libotp.uri -- otpauth:// provisioning uri rendering & parsing"""

from __future__ import annotations

import dataclasses
from typing import Optional
from urllib.parse import parse_qsl, quote, unquote, urlparse

from libotp._logging import logger
from libotp._utils.bytes import StrOrBytes, to_text
from libotp.errors import InvalidDigitCount, MalformedURIError
from libotp.hotp import check_digits
from libotp.secret import canonical
from libotp.totp import DEFAULT_PERIOD

__all__ = [
    "ProvisioningURI",
    "build_uri",
    "parse_uri",
]

URI_TEMPLATE = "otpauth://totp/{label}?secret={secret}&issuer={issuer}"


def _quote(value: str) -> str:
    # NOTE: form-urlencoding (as used by most key uri generators) leaves '*' as-is
    #       and escapes '~'. not using urllib.parse.quote_plus() because it
    #       encodes ' ' as '+', while authenticator apps expect '%20'.
    return quote(value, safe="*").replace("~", "%7E")


def build_uri(secret: StrOrBytes, account: str, issuer: str) -> str:
    """
    Serialize secret, account and issuer into a provisioning URI, per
    Google Authenticator's `KeyUriFormat <https://github.com/google/google-authenticator/wiki/Key-Uri-Format>`_.

    The returned URI is typically rendered as a QR code,
    see :func:`libotp.qr.write_qr_code`.

    :arg secret:
        base32 encoded secret (spaces allowed, any case), or raw :class:`!bytes`.

    >>> build_uri("jbsw y3dp ehpk 3pxp", "alice@google.com", "Example Org")
    'otpauth://totp/Example%20Org%3Aalice%40google.com?secret=JBSWY3DPEHPK3PXP&issuer=Example%20Org'

    :raises ~libotp.errors.InvalidSecretFormat:
        if the secret isn't valid base32.
    """
    return URI_TEMPLATE.format(
        label=_quote(f"{issuer}:{account}"),
        secret=_quote(canonical(secret)),
        issuer=_quote(issuer),
    )


@dataclasses.dataclass(frozen=True)
class ProvisioningURI:
    """contents of a parsed provisioning uri"""

    secret: str
    account: str
    issuer: Optional[str] = None
    digits: int = 6
    period: int = DEFAULT_PERIOD

    def to_uri(self) -> str:
        """
        render back to a provisioning uri.
        non-default ``digits`` and ``period`` are appended as extra parameters.
        """
        uri = build_uri(self.secret, self.account, self.issuer or "")
        if self.digits != 6:
            uri += f"&digits={self.digits}"
        if self.period != DEFAULT_PERIOD:
            uri += f"&period={self.period}"
        return uri


def _parse_int(source: str, param: str) -> int:
    try:
        return int(source)
    except ValueError:
        raise MalformedURIError(f"malformed {param!r} parameter") from None


def parse_uri(uri: StrOrBytes) -> ProvisioningURI:
    """
    Parse a provisioning uri (such as returned by :func:`build_uri`).

    Only ``totp`` uris are accepted. Unknown parameters are ignored.

    :raises ~libotp.errors.MalformedURIError:
        if the uri cannot be parsed or contains errors.

    :raises ~libotp.errors.InvalidSecretFormat:
        if the ``secret`` parameter isn't valid base32.
    """
    result = urlparse(to_text(uri, param="uri").strip())
    if result.scheme != "otpauth":
        raise MalformedURIError("wrong uri scheme")
    if result.netloc != "totp":
        raise MalformedURIError("unsupported OTP type")

    # decode label from uri path
    label = result.path
    if label.startswith("/") and len(label) > 1:
        label = unquote(label[1:])
    else:
        raise MalformedURIError("missing label")

    # split issuer prefix from account
    issuer: Optional[str]
    if ":" in label:
        try:
            issuer, account = label.split(":")
        except ValueError:  # too many ":"
            raise MalformedURIError("malformed label") from None
    else:
        issuer, account = None, label

    # parse query params
    params: dict[str, str] = {}
    for key, value in parse_qsl(result.query, keep_blank_values=True):
        if key in params:
            raise MalformedURIError(f"duplicate parameter ({key!r})")
        params[key] = value

    # synchronize issuer prefix w/ issuer param
    if "issuer" in params:
        if issuer is not None and params["issuer"] != issuer:
            raise MalformedURIError("conflicting issuer identifiers")
        issuer = params.pop("issuer")

    secret = params.pop("secret", None)
    if not secret:
        raise MalformedURIError("missing 'secret' parameter")

    algorithm = params.pop("algorithm", "SHA1")
    if algorithm.upper() != "SHA1":
        raise MalformedURIError(f"unsupported algorithm ({algorithm!r})")

    kwds = {}
    if "digits" in params:
        digits = _parse_int(params.pop("digits"), "digits")
        try:
            kwds["digits"] = check_digits(digits)
        except InvalidDigitCount as err:
            raise MalformedURIError(str(err)) from err
    if "period" in params:
        period = _parse_int(params.pop("period"), "period")
        if period < 1:
            raise MalformedURIError("'period' must be >= 1")
        kwds["period"] = period
    if params:
        # deviation from key uri format, or newer revision of it
        logger.debug("ignoring unexpected otpauth uri parameters: %r", sorted(params))

    return ProvisioningURI(
        secret=canonical(secret),
        account=account,
        issuer=issuer,
        **kwds,
    )
