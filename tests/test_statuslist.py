"""Tests for the bitstring and the StatusList2021 codec."""

import base64
import gzip

import pytest

from vc_status_list import (
    SL_V1_CONTEXT,
    VC_V1_CONTEXT,
    Bitstring,
    DecodeError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    create_credential,
    create_list,
    decode_list,
    encode_list,
)

from conftest import ENCODED_LIST_100K


def b64url(data):
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


class TestBitstring:
    """Tests for the fixed-length bit vector."""

    def test_create(self):
        """Test a new bitstring is all zeros."""
        bitstring = Bitstring(8)
        assert bitstring.length == 8
        assert len(bitstring) == 8
        assert bitstring.to_bytes() == b"\x00"
        assert not any(bitstring.get(i) for i in range(8))

    def test_storage_is_byte_aligned(self):
        """Test storage rounds up to whole bytes."""
        assert len(Bitstring(1).to_bytes()) == 1
        assert len(Bitstring(9).to_bytes()) == 2
        assert len(Bitstring(100000).to_bytes()) == 12500

    @pytest.mark.parametrize("length", [None, 0, -1, "8", 1.5, True])
    def test_invalid_length(self, length):
        """Test non-positive or non-integer lengths are rejected."""
        with pytest.raises(InvalidArgumentError):
            Bitstring(length)

    def test_set_and_get(self):
        """Test setting and clearing a bit."""
        bitstring = Bitstring(16)
        bitstring.set(10, True)
        assert bitstring.get(10) is True
        assert bitstring.get(9) is False
        assert bitstring.get(11) is False
        bitstring.set(10, False)
        assert bitstring.get(10) is False

    def test_msb_first(self):
        """Test index 0 is the most significant bit of byte 0."""
        bitstring = Bitstring(16)
        bitstring.set(0, True)
        bitstring.set(15, True)
        assert bitstring.to_bytes() == b"\x80\x01"

    @pytest.mark.parametrize("index", [-1, 8, 100])
    def test_index_out_of_range(self, index):
        """Test get and set reject indices outside the list."""
        bitstring = Bitstring(8)
        with pytest.raises(IndexOutOfRangeError):
            bitstring.get(index)
        with pytest.raises(IndexOutOfRangeError):
            bitstring.set(index, True)

    def test_index_out_of_range_is_index_error(self):
        """Test out-of-range errors are also IndexError."""
        with pytest.raises(IndexError):
            Bitstring(8).get(8)

    def test_length_is_fixed_within_last_byte(self):
        """Test bits past length in the last byte are not addressable."""
        bitstring = Bitstring(10)
        bitstring.get(9)
        with pytest.raises(IndexOutOfRangeError):
            bitstring.get(10)

    def test_from_bytes(self):
        """Test building a bitstring from raw bytes."""
        bitstring = Bitstring.from_bytes(b"\x40\x00")
        assert bitstring.length == 16
        assert bitstring.get(1) is True
        assert bitstring.count() == 1

    def test_from_bytes_length_mismatch(self):
        """Test an explicit length must fit the buffer."""
        with pytest.raises(InvalidArgumentError):
            Bitstring.from_bytes(b"\x00\x00", length=8)
        with pytest.raises(InvalidArgumentError):
            Bitstring.from_bytes(b"\x00\x00", length=17)

    def test_equality(self):
        """Test equality compares length and bits."""
        a, b = Bitstring(12), Bitstring(12)
        assert a == b
        b.set(3, True)
        assert a != b
        assert Bitstring(8) != Bitstring(16)


class TestCreateList:
    """Tests for create_list."""

    def test_create_list(self):
        """Test creating a list of 8 entries."""
        status_list = create_list(8)
        assert status_list.length == 8

    def test_missing_length(self):
        """Test a missing length is a TypeError."""
        with pytest.raises(TypeError):
            create_list(None)


class TestEncodeDecode:
    """Tests for encodedList encoding and decoding."""

    def test_encode_reference_list(self):
        """Test a 100k zero list encodes to the reference value."""
        assert encode_list(create_list(100000)) == ENCODED_LIST_100K

    def test_decode_reference_list(self):
        """Test the reference value decodes to exactly 100k zero bits."""
        status_list = decode_list(ENCODED_LIST_100K)
        assert status_list.length == 100000
        assert status_list.count() == 0

    def test_sparse_list_compresses(self):
        """Test a sparse list encodes far below its raw size."""
        encoded = encode_list(create_list(100000))
        assert len(encoded) < 100
        assert "=" not in encoded
        assert "+" not in encoded and "/" not in encoded

    def test_encode_is_stable(self):
        """Test the same bits always encode to the same string."""
        a = create_list(4096)
        b = create_list(4096)
        a.set(100, True)
        b.set(100, True)
        assert encode_list(a) == encode_list(b)

    def test_round_trip_with_set_bits(self):
        """Test set bits survive encoding."""
        status_list = create_list(131072)
        for index in (0, 7, 8, 65535, 131071):
            status_list.set(index, True)
        decoded = decode_list(encode_list(status_list))
        assert decoded == status_list
        assert decoded.count() == 5

    def test_round_trip_exact_length(self):
        """Test the original length is restored when passed in."""
        status_list = create_list(13)
        status_list.set(12, True)
        encoded = encode_list(status_list)
        assert decode_list(encoded).length == 16
        decoded = decode_list(encoded, length=13)
        assert decoded.length == 13
        assert decoded.get(12) is True

    def test_decode_invalid(self):
        """Test decoding garbage fails with a DecodeError."""
        with pytest.raises(DecodeError) as exc_info:
            decode_list("INVALID-XYZ")
        assert "Could not decode encoded status list" in str(exc_info.value)
        assert exc_info.value.reason

    def test_decode_not_base64(self):
        """Test characters outside base64url are rejected."""
        with pytest.raises(DecodeError):
            decode_list("not base64!")

    def test_decode_truncated_gzip(self):
        """Test a truncated gzip stream is rejected."""
        with pytest.raises(DecodeError):
            decode_list(ENCODED_LIST_100K[:30])

    def test_decode_missing(self):
        """Test a missing encodedList is an InvalidArgumentError."""
        with pytest.raises(InvalidArgumentError):
            decode_list(None)

    def test_decode_gzip_from_other_encoders(self):
        """Test padded base64url of a standard gzip stream decodes."""
        encoded = base64.urlsafe_b64encode(gzip.compress(bytes(128))).decode()
        status_list = decode_list(encoded)
        assert status_list.length == 1024

    def test_decode_trailing_garbage(self):
        """Test bytes after the gzip member are rejected."""
        compressed = gzip.compress(bytes(16)) + b"JUNKJUNK"
        with pytest.raises(DecodeError):
            decode_list(b64url(compressed))

    def test_decode_multiple_members(self):
        """Test every gzip member is decoded, in order."""
        compressed = gzip.compress(bytes(16)) + gzip.compress(b"\xff" * 16)
        status_list = decode_list(b64url(compressed))
        assert status_list.length == 256
        assert status_list.count() == 128
        assert status_list.get(127) is False
        assert status_list.get(128) is True

    def test_decode_size_limit(self):
        """Test a list larger than max_bytes is rejected."""
        encoded = encode_list(create_list(8 * 4096))
        with pytest.raises(DecodeError) as exc_info:
            decode_list(encoded, max_bytes=4095)
        assert "exceeds 4095 bytes" in str(exc_info.value)
        assert decode_list(encoded, max_bytes=4096).length == 8 * 4096

    def test_decode_size_limit_across_members(self):
        """Test the size limit covers all members together."""
        compressed = gzip.compress(bytes(16)) + gzip.compress(bytes(16))
        with pytest.raises(DecodeError):
            decode_list(b64url(compressed), max_bytes=24)


class TestCreateCredential:
    """Tests for create_credential."""

    def test_create_credential(self):
        """Test the StatusList2021Credential shape."""
        credential_id = "https://example.com/status/1"
        status_list = create_list(100000)
        credential = create_credential(credential_id, status_list, "revocation")
        assert credential == {
            "@context": [VC_V1_CONTEXT, SL_V1_CONTEXT],
            "id": credential_id,
            "type": ["VerifiableCredential", "StatusList2021Credential"],
            "credentialSubject": {
                "id": f"{credential_id}#list",
                "type": "StatusList2021",
                "encodedList": ENCODED_LIST_100K,
                "statusPurpose": "revocation",
            },
        }

    def test_create_credential_with_issuer(self):
        """Test optional issuer and issuanceDate are included."""
        credential = create_credential(
            "https://example.com/status/1",
            create_list(8),
            "suspension",
            issuer="did:web:example.com",
            issuance_date="2025-01-01T00:00:00Z",
        )
        assert credential["issuer"] == "did:web:example.com"
        assert credential["issuanceDate"] == "2025-01-01T00:00:00Z"
        assert credential["credentialSubject"]["statusPurpose"] == "suspension"

    @pytest.mark.parametrize(
        "args",
        [
            (None, "list", "revocation"),
            ("https://example.com/status/1", None, "revocation"),
            ("https://example.com/status/1", "list", None),
        ],
    )
    def test_create_credential_missing_argument(self, args):
        """Test each required argument is checked."""
        credential_id, status_list, purpose = args
        if status_list == "list":
            status_list = create_list(8)
        with pytest.raises(InvalidArgumentError):
            create_credential(credential_id, status_list, purpose)
