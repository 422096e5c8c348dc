"""libotp -- TOTP / RFC 6238 tokens, secrets & provisioning uris"""

from libotp.context import OTPContext
from libotp.errors import (
    InvalidDigitCount,
    InvalidSecretFormat,
    MalformedTokenError,
    MalformedURIError,
    OTPError,
    SecureRandomUnavailable,
    WeakSecretWarning,
)
from libotp.hotp import compute_hotp
from libotp.secret import canonical, generate_secret, normalize
from libotp.totp import TotpToken, compute_totp, current_totp, generate_totp, verify_totp
from libotp.uri import ProvisioningURI, build_uri, parse_uri

__version__ = "1.0.0"

__all__ = [
    "OTPContext",
    "OTPError",
    "InvalidDigitCount",
    "InvalidSecretFormat",
    "MalformedTokenError",
    "MalformedURIError",
    "SecureRandomUnavailable",
    "WeakSecretWarning",
    "ProvisioningURI",
    "TotpToken",
    "build_uri",
    "canonical",
    "compute_hotp",
    "compute_totp",
    "current_totp",
    "generate_secret",
    "generate_totp",
    "normalize",
    "parse_uri",
    "verify_totp",
]
