import logging

import pytest

from libotp.errors import InvalidSecretFormat, MalformedURIError
from libotp.secret import generate_secret, normalize
from libotp.uri import ProvisioningURI, build_uri, parse_uri
from tests.utils_ import KEY4, KEY4_RAW

GOOGLE_URI = "otpauth://totp/Example:alice@google.com?secret=JBSWY3DPEHPK3PXP&issuer=Example"


def test_build_uri():
    assert (
        build_uri(KEY4, "user@example.com", "Example Company")
        == "otpauth://totp/Example%20Company%3Auser%40example.com"
        "?secret=JBSWY3DPEHPK3PXP&issuer=Example%20Company"
    )


def test_build_uri_canonicalizes_secret():
    secret = generate_secret(human_readable=True)
    uri = build_uri(secret.lower(), "user@example.com", "Example Company")
    assert f"secret={secret.replace(' ', '')}&" in uri


def test_build_uri_encodes_spaces_as_percent20():
    uri = build_uri(KEY4, "John Smith", "Example Company")
    assert "+" not in uri
    assert " " not in uri
    assert uri.count("%20") == 3
    assert uri.startswith("otpauth://totp/Example%20Company%3AJohn%20Smith?")


def test_build_uri_escapes_reserved_chars():
    uri = build_uri(KEY4, "a+b&c=d/e", "x?y#z")
    assert (
        uri == "otpauth://totp/x%3Fy%23z%3Aa%2Bb%26c%3Dd%2Fe"
        "?secret=JBSWY3DPEHPK3PXP&issuer=x%3Fy%23z"
    )
    # unicode is utf-8 encoded
    assert build_uri(KEY4, "jörg", "Ünïcode").endswith("&issuer=%C3%9Cn%C3%AFcode")


def test_build_uri_uses_form_encoding_for_star_and_tilde():
    # form-urlencoding leaves '*' as-is, and escapes '~'
    assert (
        build_uri(KEY4, "a*b~c", "I")
        == "otpauth://totp/I%3Aa*b%7Ec?secret=JBSWY3DPEHPK3PXP&issuer=I"
    )
    assert build_uri(KEY4, "a", "~*").endswith("&issuer=%7E*")
    assert parse_uri(build_uri(KEY4, "a*b~c", "I~")).account == "a*b~c"


def test_build_uri_w_raw_key():
    assert build_uri(KEY4_RAW, "alice", "Example") == build_uri(KEY4, "alice", "Example")
    # ascii bytes are a raw key too, not base32 text
    raw = b"JBSWY3DPEHPK3PXPJBSW"
    result = parse_uri(build_uri(raw, "alice", "Example"))
    assert normalize(result.secret) == raw


def test_build_uri_permits_empty_strings():
    assert build_uri(KEY4, "", "") == "otpauth://totp/%3A?secret=JBSWY3DPEHPK3PXP&issuer="


def test_build_uri_rejects_invalid_secret():
    with pytest.raises(InvalidSecretFormat):
        build_uri("JBSWY3DPEHPK3PX1", "user@example.com", "Example Company")


def test_parse_uri():
    result = parse_uri(GOOGLE_URI)
    assert result == ProvisioningURI(
        secret=KEY4, account="alice@google.com", issuer="Example", digits=6, period=30
    )

    # secret case insensitive
    assert parse_uri(GOOGLE_URI.replace(KEY4, KEY4.lower())).secret == KEY4

    # label w/o issuer prefix
    result = parse_uri("otpauth://totp/alice@google.com?secret=JBSWY3DPEHPK3PXP")
    assert result.account == "alice@google.com"
    assert result.issuer is None

    # issuer only in parameter
    result = parse_uri(
        "otpauth://totp/alice@google.com?secret=JBSWY3DPEHPK3PXP&issuer=Example"
    )
    assert result.issuer == "Example"


def test_parse_uri_round_trip():
    secret = generate_secret(human_readable=True)
    uri = build_uri(secret, "user@example.com", "Example Company")
    result = parse_uri(uri)
    assert result.secret == secret.replace(" ", "")
    assert result.account == "user@example.com"
    assert result.issuer == "Example Company"
    assert result.to_uri() == uri

    result = parse_uri(build_uri(KEY4, "", ""))
    assert result.account == ""
    assert result.issuer == ""


def test_parse_uri_optional_params():
    result = parse_uri(GOOGLE_URI + "&digits=8&period=60&algorithm=SHA1")
    assert result.digits == 8
    assert result.period == 60


def test_provisioning_uri_keeps_digits_and_period():
    result = parse_uri(GOOGLE_URI + "&digits=8&period=60")
    uri = result.to_uri()
    assert uri.endswith("&issuer=Example&digits=8&period=60")
    assert parse_uri(uri) == result

    # defaults aren't rendered
    assert "digits" not in parse_uri(GOOGLE_URI).to_uri()
    assert "period" not in parse_uri(GOOGLE_URI).to_uri()


def test_parse_uri_ignores_unknown_params(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG, logger="libotp")
    assert parse_uri(GOOGLE_URI + "&image=foo.png").secret == KEY4
    assert "image" in caplog.text


@pytest.mark.parametrize(
    "uri",
    [
        "http://totp/Example:alice@google.com?secret=JBSWY3DPEHPK3PXP",
        "otpauth://hotp/Example:alice@google.com?secret=JBSWY3DPEHPK3PXP&counter=1",
        "otpauth://totp/?secret=JBSWY3DPEHPK3PXP",
        "otpauth://totp?secret=JBSWY3DPEHPK3PXP",
        "otpauth://totp/Example:alice:smith?secret=JBSWY3DPEHPK3PXP",
        "otpauth://totp/Example:alice@google.com?digits=6",
        "otpauth://totp/Example:alice@google.com?secret=",
        "otpauth://totp/Example:alice@google.com?secret=JBSWY3DPEHPK3PXP&issuer=Other",
        "otpauth://totp/alice@google.com?secret=JBSWY3DPEHPK3PXP&secret=JBSWY3DPEHPK3PXP",
        "otpauth://totp/alice@google.com?secret=JBSWY3DPEHPK3PXP&digits=7",
        "otpauth://totp/alice@google.com?secret=JBSWY3DPEHPK3PXP&digits=six",
        "otpauth://totp/alice@google.com?secret=JBSWY3DPEHPK3PXP&period=0",
        "otpauth://totp/alice@google.com?secret=JBSWY3DPEHPK3PXP&period=abc",
        "otpauth://totp/alice@google.com?secret=JBSWY3DPEHPK3PXP&algorithm=SHA256",
    ],
)
def test_parse_uri_rejects_malformed(uri: str) -> None:
    with pytest.raises(MalformedURIError) as exc_info:
        parse_uri(uri)
    assert exc_info.value.param == "uri"


def test_parse_uri_rejects_invalid_secret():
    with pytest.raises(InvalidSecretFormat):
        parse_uri("otpauth://totp/Example:alice@google.com?secret=JBSWY3DP@3PXP")
