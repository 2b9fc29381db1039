"""Shared pytest configuration for the test suite."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

KeyFactory = Callable[..., str]


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Tag every test that is not marked as system as a unit test."""

    for item in items:
        if "system" not in item.keywords:
            item.add_marker(pytest.mark.unit)


def _generate_private_key(kind: str):
    if kind == "ed25519":
        return ed25519.Ed25519PrivateKey.generate()
    if kind == "rsa":
        return rsa.generate_private_key(public_exponent=65537, key_size=2048)
    if kind == "ecdsa":
        return ec.generate_private_key(ec.SECP256R1())
    msg = f"unsupported key kind: {kind}"
    raise ValueError(msg)


@pytest.fixture()
def make_public_key() -> KeyFactory:
    """Return a factory producing OpenSSH public key lines."""

    def _make(kind: str = "ed25519", comment: str | None = "user@laptop") -> str:
        public = _generate_private_key(kind).public_key()
        line = public.public_bytes(
            serialization.Encoding.OpenSSH,
            serialization.PublicFormat.OpenSSH,
        ).decode("ascii")
        return f"{line} {comment}" if comment else line

    return _make


@pytest.fixture()
def make_private_key() -> KeyFactory:
    """Return a factory producing OpenSSH-format private key text."""

    def _make(kind: str = "ed25519") -> str:
        return (
            _generate_private_key(kind)
            .private_bytes(
                serialization.Encoding.PEM,
                serialization.PrivateFormat.OpenSSH,
                serialization.NoEncryption(),
            )
            .decode("ascii")
        )

    return _make


@pytest.fixture()
def fake_home(tmp_path: Path) -> Path:
    """Provide an empty home directory containing an empty ``.ssh`` folder."""

    home = tmp_path / "home"
    (home / ".ssh").mkdir(parents=True)
    return home


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Drop CLI log handlers so they never outlive captured streams."""

    yield
    package_logger = logging.getLogger("sshcopyid")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
