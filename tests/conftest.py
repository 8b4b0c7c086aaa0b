"""Shared fixtures for vc-status-list tests."""

import base64

import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from vc_status_list import (
    SL_V1_CONTEXT,
    VC_V1_CONTEXT,
    EcdsaJcs2022Suite,
    StaticDocumentLoader,
    create_credential,
    create_list,
)

ISSUER = "did:web:example.com"
VERIFICATION_METHOD = "did:web:example.com#key-1"
REVOCATION_LIST_URL = "https://example.com/status/1"
SUSPENSION_LIST_URL = "https://example.com/status/2"
REVOKED_INDEX = 42
SUSPENDED_INDEX = 7

ENCODED_LIST_100K = "H4sIAAAAAAAAA-3BMQEAAADCoPVPbQsvoAAAAAAAAAAAAAAAAP4GcwM92tQwAAA"


@pytest.fixture
def ec_key_pair():
    """Generate a test EC P-256 key pair."""
    private_key = ec.generate_private_key(ec.SECP256R1())
    return private_key, private_key.public_key()


@pytest.fixture
def public_key_jwk(ec_key_pair):
    """Get the public key as JWK."""
    _, public_key = ec_key_pair
    public_numbers = public_key.public_numbers()

    x_bytes = public_numbers.x.to_bytes(32, byteorder="big")
    y_bytes = public_numbers.y.to_bytes(32, byteorder="big")

    return {
        "kty": "EC",
        "crv": "P-256",
        "x": base64.urlsafe_b64encode(x_bytes).decode().rstrip("="),
        "y": base64.urlsafe_b64encode(y_bytes).decode().rstrip("="),
    }


@pytest.fixture
def did_document(public_key_jwk):
    """Create a test DID Document."""
    return {
        "@context": [
            "https://www.w3.org/ns/did/v1",
            "https://w3id.org/security/jwk/v1",
        ],
        "id": ISSUER,
        "verificationMethod": [
            {
                "id": VERIFICATION_METHOD,
                "type": "JsonWebKey",
                "controller": ISSUER,
                "publicKeyJwk": public_key_jwk,
            }
        ],
        "authentication": [VERIFICATION_METHOD],
        "assertionMethod": [VERIFICATION_METHOD],
    }


@pytest.fixture
def suite():
    return EcdsaJcs2022Suite()


@pytest.fixture
def sign(ec_key_pair, suite):
    """Sign a document with the test private key."""
    private_key, _ = ec_key_pair

    def _sign(document):
        return suite.sign(
            document,
            private_key,
            VERIFICATION_METHOD,
            created="2025-01-15T10:00:00Z",
        )

    return _sign


@pytest.fixture
def revocation_slc(sign):
    """Signed revocation list with REVOKED_INDEX set."""
    status_list = create_list(100000)
    status_list.set(REVOKED_INDEX, True)
    return sign(
        create_credential(REVOCATION_LIST_URL, status_list, "revocation", issuer=ISSUER)
    )


@pytest.fixture
def suspension_slc(sign):
    """Signed suspension list with SUSPENDED_INDEX set."""
    status_list = create_list(100000)
    status_list.set(SUSPENDED_INDEX, True)
    return sign(
        create_credential(SUSPENSION_LIST_URL, status_list, "suspension", issuer=ISSUER)
    )


@pytest.fixture
def document_loader(did_document, revocation_slc, suspension_slc):
    """Loader serving the DID document and both status list credentials."""
    return StaticDocumentLoader(
        {
            ISSUER: did_document,
            REVOCATION_LIST_URL: revocation_slc,
            SUSPENSION_LIST_URL: suspension_slc,
        }
    )


@pytest.fixture
def make_credential():
    """Build a credential carrying the given credentialStatus."""

    def _make(credential_status=None, issuer=ISSUER):
        credential = {
            "@context": [VC_V1_CONTEXT, SL_V1_CONTEXT],
            "id": "urn:uuid:a0418a78-7924-11ea-8a23-10bf48838a41",
            "type": ["VerifiableCredential", "example:TestCredential"],
            "credentialSubject": {
                "id": "urn:uuid:4886029a-7925-11ea-9274-10bf48838a41",
                "example:test": "foo",
            },
            "issuer": issuer,
        }
        if credential_status is not None:
            credential["credentialStatus"] = credential_status
        return credential

    return _make


def revocation_entry(index="67342", **overrides):
    entry = {
        "id": f"{REVOCATION_LIST_URL}#{index}",
        "type": "StatusList2021Entry",
        "statusPurpose": "revocation",
        "statusListIndex": index,
        "statusListCredential": REVOCATION_LIST_URL,
    }
    entry.update(overrides)
    return entry


def suspension_entry(index="67343", **overrides):
    entry = {
        "id": f"{SUSPENSION_LIST_URL}#{index}",
        "type": "StatusList2021Entry",
        "statusPurpose": "suspension",
        "statusListIndex": index,
        "statusListCredential": SUSPENSION_LIST_URL,
    }
    entry.update(overrides)
    return entry
