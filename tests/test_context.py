import dataclasses

import pytest

from libotp.context import OTPContext
from libotp.errors import InvalidDigitCount, SecureRandomUnavailable
from libotp.secret import b32encode, normalize
from libotp.totp import TotpToken, compute_totp
from libotp.uri import parse_uri
from tests.utils_ import KEY4, RFC_KEY_B32, counting_random_source


def test_defaults():
    context = OTPContext()
    assert context.digits == 6
    assert context.period == 30
    assert context.issuer is None
    assert context.secret_size == 20

    secret = context.new_secret()
    assert len(secret) == 32
    assert len(context.new_secret(human_readable=True)) == 39
    assert len(context.token(secret)) == 6


def test_validates_settings():
    with pytest.raises(InvalidDigitCount):
        OTPContext(digits=7)
    with pytest.raises(ValueError):
        OTPContext(period=0)
    with pytest.raises(ValueError):
        OTPContext(secret_size=4)
    with pytest.raises(TypeError):
        OTPContext(period="30")


def test_is_immutable():
    context = OTPContext()
    with pytest.raises(dataclasses.FrozenInstanceError):
        context.digits = 8


def test_using():
    context = OTPContext(issuer="Example Org")
    other = context.using(digits=8)
    assert other.digits == 8
    assert other.issuer == "Example Org"
    assert context.digits == 6

    with pytest.raises(InvalidDigitCount):
        context.using(digits=9)


def test_new_secret_w_random_source():
    context = OTPContext(secret_size=16, random_source=counting_random_source)
    assert normalize(context.new_secret()) == bytes(range(16))

    def broken(size: int) -> bytes:
        raise NotImplementedError

    with pytest.raises(SecureRandomUnavailable):
        context.using(random_source=broken).new_secret()


def test_generate_and_verify():
    context = OTPContext(digits=8, clock=lambda: 59.0)
    assert context.generate(RFC_KEY_B32) == TotpToken("94287082", 1, 30)
    assert context.token(RFC_KEY_B32) == "94287082"
    assert context.token(RFC_KEY_B32, 1111111109) == "07081804"
    assert context.verify(RFC_KEY_B32, "94287082")
    assert not context.verify(RFC_KEY_B32, "07081804")
    assert context.verify(RFC_KEY_B32, "07081804", now=1111111109)

    context = OTPContext(period=60)
    assert context.generate(RFC_KEY_B32, 1111111111).token == "360094"


def test_to_uri():
    context = OTPContext(issuer="Example Org")
    assert (
        context.to_uri(KEY4, "alice@example.org")
        == "otpauth://totp/Example%20Org%3Aalice%40example.org"
        "?secret=JBSWY3DPEHPK3PXP&issuer=Example%20Org"
    )
    assert context.to_uri(KEY4, "alice", issuer="Other").endswith("&issuer=Other")
    assert OTPContext().to_uri(KEY4, "alice").endswith("&issuer=")


def test_raw_key_means_same_secret_for_uri_and_token():
    raw = b"JBSWY3DPEHPK3PXPJBSW"
    context = OTPContext(issuer="X", clock=lambda: 1419622739)

    provisioned = normalize(parse_uri(context.to_uri(raw, "a")).secret)
    assert provisioned == raw

    # client scanning the uri generates the same token as the server
    assert compute_totp(provisioned, 6, 1419622739) == context.token(raw)
    assert context.verify(b32encode(raw), context.token(raw))
