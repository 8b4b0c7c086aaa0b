"""
StatusList2021 codec.

Encoding: base64url(gzip(bitstring)) without padding.
https://www.w3.org/TR/2023/WD-vc-status-list-20230427/
"""

from __future__ import annotations

import base64
import binascii
import logging
import struct
import zlib
from typing import Any

from vc_status_list.bitstring import Bitstring
from vc_status_list.context import (
    SL_V1_CONTEXT,
    STATUS_LIST_CREDENTIAL_TYPE,
    STATUS_LIST_TYPE,
    VC_V1_CONTEXT,
)
from vc_status_list.errors import DecodeError, InvalidArgumentError

logger = logging.getLogger(__name__)

# gzip member header: magic, deflate, no flags, mtime 0, no extra flags, OS unix
_GZIP_HEADER = b"\x1f\x8b\x08\x00\x00\x00\x00\x00\x00\x03"
_COMPRESS_LEVEL = 6

# 16 MiB of decoded bytes, 134,217,728 entries
MAX_DECODED_BYTES = 16 * 1024 * 1024


def _gzip(data: bytes) -> bytes:
    """Compress data into a single reproducible gzip member."""
    compressor = zlib.compressobj(_COMPRESS_LEVEL, zlib.DEFLATED, -zlib.MAX_WBITS)
    body = compressor.compress(data) + compressor.flush()
    trailer = struct.pack("<II", zlib.crc32(data) & 0xFFFFFFFF, len(data) & 0xFFFFFFFF)
    return _GZIP_HEADER + body + trailer


def _gunzip(data: bytes, max_bytes: int) -> bytes:
    """Decompress every gzip member in data, producing at most max_bytes."""
    chunks: list[bytes] = []
    size = 0
    while True:
        decompressor = zlib.decompressobj(16 + zlib.MAX_WBITS)
        chunk = decompressor.decompress(data, max_bytes - size + 1)
        size += len(chunk)
        if size > max_bytes:
            raise ValueError(f"decompressed status list exceeds {max_bytes} bytes")
        if not decompressor.eof:
            raise zlib.error("unexpected end of file")
        chunks.append(chunk)
        # anything after a member must be another member
        data = decompressor.unused_data
        if not data:
            return b"".join(chunks)


def _base64url_decode(data: str) -> bytes:
    padding = -len(data) % 4
    return base64.b64decode(data + "=" * padding, altchars=b"-_", validate=True)


def create_list(length: int) -> Bitstring:
    """Create an all-zero status list.

    Args:
        length: Number of entries in the list.

    Raises:
        InvalidArgumentError: If length is not a positive integer.
    """
    return Bitstring(length)


def encode_list(status_list: Bitstring) -> str:
    """Encode a status list for credentialSubject.encodedList.

    The output depends only on the list's bytes, so it is safe to use as a
    cache key.
    """
    if not isinstance(status_list, Bitstring):
        raise InvalidArgumentError('"list" must be a Bitstring.')
    compressed = _gzip(status_list.to_bytes())
    return base64.urlsafe_b64encode(compressed).decode("ascii").rstrip("=")


def decode_list(
    encoded_list: str, length: int | None = None, max_bytes: int = MAX_DECODED_BYTES
) -> Bitstring:
    """Decode credentialSubject.encodedList into a status list.

    Args:
        encoded_list: Unpadded base64url of a gzipped bitstring.
        length: Exact bit length to restore. The encoding only carries
            whole bytes, so without it the length is 8 * decoded bytes.
        max_bytes: Upper bound on the decompressed size.

    Returns:
        The decoded Bitstring.

    Raises:
        InvalidArgumentError: If encoded_list is not a string, or length
            does not fit the decoded bytes.
        DecodeError: If the base64 or gzip layer is malformed, or the
            decompressed list is larger than max_bytes.
    """
    if not isinstance(encoded_list, str):
        raise InvalidArgumentError('"encodedList" must be a string.')
    try:
        compressed = _base64url_decode(encoded_list)
        data = _gunzip(compressed, max_bytes)
    except (binascii.Error, zlib.error, ValueError) as e:
        raise DecodeError(str(e)) from e
    if not data:
        raise DecodeError("decoded status list is empty")

    logger.debug("Decoded status list of %d bytes", len(data))
    return Bitstring.from_bytes(data, length)


def create_credential(
    credential_id: str,
    status_list: Bitstring,
    status_purpose: str,
    issuer: str | dict[str, Any] | None = None,
    issuance_date: str | None = None,
) -> dict[str, Any]:
    """Build an unsigned StatusList2021Credential.

    Args:
        credential_id: URL of the status list credential.
        status_list: The list to embed.
        status_purpose: e.g. "revocation" or "suspension".
        issuer: Optional issuer to include.
        issuance_date: Optional issuanceDate to include.

    Returns:
        The credential, ready to be signed by the caller.

    Raises:
        InvalidArgumentError: If a required argument is missing.
    """
    if not (credential_id and isinstance(credential_id, str)):
        raise InvalidArgumentError('"id" is required.')
    if not isinstance(status_list, Bitstring):
        raise InvalidArgumentError('"list" is required.')
    if not (status_purpose and isinstance(status_purpose, str)):
        raise InvalidArgumentError('"statusPurpose" is required.')

    credential: dict[str, Any] = {
        "@context": [VC_V1_CONTEXT, SL_V1_CONTEXT],
        "id": credential_id,
        "type": ["VerifiableCredential", STATUS_LIST_CREDENTIAL_TYPE],
        "credentialSubject": {
            "id": f"{credential_id}#list",
            "type": STATUS_LIST_TYPE,
            "encodedList": encode_list(status_list),
            "statusPurpose": status_purpose,
        },
    }
    if issuer is not None:
        credential["issuer"] = issuer
    if issuance_date is not None:
        credential["issuanceDate"] = issuance_date
    return credential
