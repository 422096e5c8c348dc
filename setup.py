"""
libotp setup script
"""
#=============================================================================
# init script env -- ensure cwd = root of source dir
#=============================================================================
import os
root_dir = os.path.abspath(os.path.join(__file__, ".."))
os.chdir(root_dir)

#=============================================================================
# imports
#=============================================================================
import re

from setuptools import setup, find_packages

#=============================================================================
# version string
#=============================================================================

# pull version string from libotp, without importing it
# (dependencies may not be installed yet)
with open(os.path.join(root_dir, "libotp", "__init__.py")) as fh:
    version = re.search(r'^__version__ = "([^"]+)"', fh.read(), re.M).group(1)

#=============================================================================
# static text
#=============================================================================
SUMMARY = "TOTP / RFC 6238 one-time passwords, secrets & provisioning uris"

DESCRIPTION = """\
libotp generates time-based one-time passwords (RFC 6238 TOTP, built on
RFC 4226 HOTP) compatible with Google Authenticator and similar apps.
It also creates the artifacts needed to provision a user's device:
random base32 secrets, ``otpauth://`` provisioning uris,
and (with the ``qr`` extra) QR code images of those uris.
"""

KEYWORDS = """\
totp hotp otp 2fa mfa
google authenticator otpauth
"""

CLASSIFIERS = """\
Intended Audience :: Developers
License :: OSI Approved :: MIT License
Natural Language :: English
Operating System :: OS Independent
Programming Language :: Python :: 3
Programming Language :: Python :: Implementation :: CPython
Programming Language :: Python :: Implementation :: PyPy
Topic :: Security :: Cryptography
Topic :: Software Development :: Libraries
""".splitlines()

if '.dev' in version:
    CLASSIFIERS.append("Development Status :: 3 - Alpha")
else:
    CLASSIFIERS.append("Development Status :: 5 - Production/Stable")

QR_REQUIRES = ["qrcode>=7.4", "pillow>=9.1"]

#=============================================================================
# run setup
#=============================================================================
setup(
    # package info
    packages=find_packages(root_dir, include=["libotp", "libotp.*"]),
    zip_safe=True,
    python_requires=">=3.9",

    # metadata
    name="libotp",
    version=version,
    license="MIT",

    description=SUMMARY,
    long_description=DESCRIPTION,
    keywords=KEYWORDS,
    classifiers=CLASSIFIERS,

    install_requires=[
        "typing_extensions>=4.0",
    ],
    extras_require={
        "qr": QR_REQUIRES,
        "test": ["pytest>=7", "pytest-archon>=0.0.6"] + QR_REQUIRES,
    },
)

#=============================================================================
# eof
#=============================================================================
