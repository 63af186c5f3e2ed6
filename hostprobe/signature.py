"""RSA/SHA-256 signature verification against a DER-encoded RSA public key."""

from __future__ import annotations

import base64
import binascii
import logging

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey, RSAPublicNumbers

log = logging.getLogger(__name__)

_TAG_INTEGER = 0x02
_TAG_SEQUENCE = 0x30


class DerError(ValueError):
    """The DER data is truncated or not the structure that was expected."""


def read_der_length(data: bytes, offset: int) -> tuple[int, int]:
    """Decode the DER length at ``offset``; return it and the offset just past it."""
    if offset >= len(data):
        raise DerError(f"length expected at offset {offset}, data ends")
    first = data[offset]
    offset += 1
    if not first & 0x80:
        return first, offset
    count = first & 0x7F
    if count == 0:
        raise DerError("indefinite length is not allowed in DER")
    if offset + count > len(data):
        raise DerError(f"length of {count} bytes at offset {offset} runs past the data")
    return int.from_bytes(data[offset : offset + count], "big"), offset + count


def _read_tag(data: bytes, offset: int, tag: int) -> tuple[int, int]:
    if offset >= len(data):
        raise DerError(f"tag 0x{tag:02x} expected at offset {offset}, data ends")
    if data[offset] != tag:
        raise DerError(f"tag 0x{tag:02x} expected at offset {offset}, found 0x{data[offset]:02x}")
    length, offset = read_der_length(data, offset + 1)
    if offset + length > len(data):
        raise DerError(f"element of {length} bytes at offset {offset} runs past the data")
    return length, offset


def _read_integer(data: bytes, offset: int) -> tuple[int, int]:
    length, offset = _read_tag(data, offset, _TAG_INTEGER)
    if length == 0:
        raise DerError(f"empty integer at offset {offset}")
    value = int.from_bytes(data[offset : offset + length], "big")
    return value, offset + length


def parse_rsa_public_key(der: bytes) -> tuple[int, int]:
    """Modulus and public exponent of a PKCS#1 RSAPublicKey in DER form."""
    data = bytes(der)
    _, offset = _read_tag(data, 0, _TAG_SEQUENCE)
    modulus, offset = _read_integer(data, offset)
    exponent, _ = _read_integer(data, offset)
    return modulus, exponent


def load_public_key(der: bytes) -> RSAPublicKey:
    """Build an RSA public key from PKCS#1 DER bytes."""
    modulus, exponent = parse_rsa_public_key(der)
    return RSAPublicNumbers(exponent, modulus).public_key()


def _decode_signature(signature_b64: str | bytes) -> bytes | None:
    text = signature_b64.decode("ascii", errors="replace") if isinstance(
        signature_b64, (bytes, bytearray)
    ) else signature_b64
    compact = "".join(text.split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        log.debug("Signature is not valid base64: %s", exc)
        return None


def verify_signature(
    data: str | bytes,
    signature_b64: str | bytes,
    public_key: bytes | RSAPublicKey,
) -> bool:
    """True when ``signature_b64`` is a PKCS#1 v1.5 SHA-256 signature of ``data``.

    ``public_key`` is either a key object or PKCS#1 DER bytes; an unreadable
    key raises DerError.
    """
    key = public_key if isinstance(public_key, RSAPublicKey) else load_public_key(public_key)
    message = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    signature = _decode_signature(signature_b64)
    if signature is None:
        return False
    try:
        key.verify(signature, message, padding.PKCS1v15(), hashes.SHA256())
    except InvalidSignature:
        log.error("Error verifying digest")
        return False
    return True