import importlib

import pytest
from pytest_archon import archrule


def test_core_does_not_import_qr_backends() -> None:
    (
        archrule("qr-backends-only-in-libotp.qr")
        .match("libotp*")
        .exclude("libotp.qr")
        .should_not_import("qrcode*", "PIL*", "libotp.qr")
        .check("libotp")
    )


@pytest.mark.parametrize(
    "name",
    [
        "libotp",
        "libotp.context",
        "libotp.errors",
        "libotp.hotp",
        "libotp.qr",
        "libotp.secret",
        "libotp.totp",
        "libotp.uri",
    ],
)
def test_public_modules_have_docstring(name: str) -> None:
    module = importlib.import_module(name)
    assert module.__doc__
    assert module.__doc__.startswith(f"{name} -- ")
