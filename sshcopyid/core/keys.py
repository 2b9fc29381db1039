"""Parsing and validation of OpenSSH public key records."""

from __future__ import annotations

import base64
import binascii
import re
import struct
from dataclasses import dataclass
from pathlib import Path

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.serialization import load_ssh_public_key

from sshcopyid.core.errors import InvalidKeyFormat

__all__ = ["PublicKeyMaterial", "looks_like_private_key", "parse_public_key"]

_ALGORITHM_PATTERN = re.compile(r"^(?:ssh-|ecdsa-|sk-)[A-Za-z0-9@._+-]+$")
_PRIVATE_KEY_MARKER = "PRIVATE KEY-----"

# Key types cryptography can load; anything else is only checked structurally.
_LOADABLE_ALGORITHMS = frozenset(
    {
        "ssh-rsa",
        "ssh-ed25519",
        "ecdsa-sha2-nistp256",
        "ecdsa-sha2-nistp384",
        "ecdsa-sha2-nistp521",
    }
)


@dataclass(frozen=True, slots=True)
class PublicKeyMaterial:
    """A validated single-line SSH public key record."""

    line: str
    algorithm: str
    blob: bytes
    comment: str
    source: Path | None = None

    @property
    def fingerprint(self) -> str:
        """Return the OpenSSH-style ``SHA256:`` fingerprint of the key."""

        digest = hashes.Hash(hashes.SHA256())
        digest.update(self.blob)
        encoded = base64.b64encode(digest.finalize()).decode("ascii").rstrip("=")
        return f"SHA256:{encoded}"


def looks_like_private_key(text: str) -> bool:
    """Return ``True`` when ``text`` carries a PEM or OpenSSH private key header."""

    return _PRIVATE_KEY_MARKER in text


def _embedded_algorithm(blob: bytes) -> str:
    """Read the length-prefixed algorithm name at the start of a key blob."""

    if len(blob) < 4:
        msg = "key data is truncated"
        raise ValueError(msg)
    (length,) = struct.unpack(">I", blob[:4])
    name = blob[4 : 4 + length]
    if len(name) != length:
        msg = "key data is truncated"
        raise ValueError(msg)
    try:
        return name.decode("ascii")
    except UnicodeDecodeError as exc:
        msg = "key type inside key data is not ASCII"
        raise ValueError(msg) from exc


def parse_public_key(text: str, *, source: Path | None = None) -> PublicKeyMaterial:
    """Validate ``text`` as a single SSH public key record.

    Blank lines and surrounding whitespace are ignored. The record must hold an
    algorithm token followed by a base64 payload whose embedded key type
    matches the token; anything after the payload is kept as the comment.

    Raises:
        InvalidKeyFormat: if the text is empty, holds a private key, holds more
            than one record, or the record is malformed.
    """

    if looks_like_private_key(text):
        hint = "it is a private key"
        if source is not None:
            hint += f"; pass the public key instead (e.g. {source}.pub)"
        raise InvalidKeyFormat(source, hint)

    lines = [line.strip() for line in text.lstrip("\ufeff").splitlines() if line.strip()]
    if not lines:
        raise InvalidKeyFormat(source, "the file is empty")
    if len(lines) > 1:
        raise InvalidKeyFormat(source, f"expected a single key record, found {len(lines)} lines")

    fields = lines[0].split(maxsplit=2)
    if len(fields) < 2:
        raise InvalidKeyFormat(source, "missing key data after the key type")
    algorithm, payload = fields[0], fields[1]
    comment = fields[2] if len(fields) == 3 else ""

    if not _ALGORITHM_PATTERN.match(algorithm):
        raise InvalidKeyFormat(source, f"unknown key type '{algorithm}'")

    try:
        blob = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidKeyFormat(source, "key data is not valid base64") from exc

    try:
        embedded = _embedded_algorithm(blob)
    except ValueError as exc:
        raise InvalidKeyFormat(source, str(exc)) from exc
    if embedded != algorithm:
        raise InvalidKeyFormat(
            source, f"key type '{algorithm}' does not match key data ('{embedded}')"
        )

    if algorithm in _LOADABLE_ALGORITHMS:
        try:
            load_ssh_public_key(f"{algorithm} {payload}".encode("ascii"))
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyFormat(source, f"key data is corrupt ({exc})") from exc

    return PublicKeyMaterial(
        line=lines[0],
        algorithm=algorithm,
        blob=blob,
        comment=comment,
        source=source,
    )
