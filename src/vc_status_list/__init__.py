"""
VC Status List - W3C StatusList2021 library.

Supports:
- Creating, encoding and decoding StatusList2021 bitstrings
- Building StatusList2021Credential documents
- Locating StatusList2021Entry claims on a credential
- Verifying credential status against signed status list credentials
- ecdsa-jcs-2022 (P-256) proofs on status list credentials
"""

from vc_status_list.bitstring import Bitstring
from vc_status_list.context import (
    SL_V1_CONTEXT,
    VC_V1_CONTEXT,
    assert_status_list_2021_context,
)
from vc_status_list.credential_status import (
    StatusListEntry,
    get_credential_status,
    get_status_entries,
    status_type_matches,
)
from vc_status_list.document_loader import (
    DocumentLoader,
    DocumentLoaderError,
    HttpDocumentLoader,
    StaticDocumentLoader,
)
from vc_status_list.errors import (
    DecodeError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    NotFoundError,
    ProofError,
    ResolutionError,
    StatusListError,
    StructuralError,
)
from vc_status_list.statuslist import (
    MAX_DECODED_BYTES,
    create_credential,
    create_list,
    decode_list,
    encode_list,
)
from vc_status_list.suites import EcdsaJcs2022Suite, ProofVerificationResult, Suite
from vc_status_list.verifier import (
    CredentialStatus,
    StatusEntryResult,
    StatusListVerifier,
    StatusVerificationResult,
    check_status,
)

__version__ = "0.1.0"

__all__ = [
    "Bitstring",
    "SL_V1_CONTEXT",
    "VC_V1_CONTEXT",
    "assert_status_list_2021_context",
    "StatusListEntry",
    "get_credential_status",
    "get_status_entries",
    "status_type_matches",
    "DocumentLoader",
    "DocumentLoaderError",
    "HttpDocumentLoader",
    "StaticDocumentLoader",
    "DecodeError",
    "IndexOutOfRangeError",
    "InvalidArgumentError",
    "NotFoundError",
    "ProofError",
    "ResolutionError",
    "StatusListError",
    "StructuralError",
    "MAX_DECODED_BYTES",
    "create_credential",
    "create_list",
    "decode_list",
    "encode_list",
    "EcdsaJcs2022Suite",
    "ProofVerificationResult",
    "Suite",
    "CredentialStatus",
    "StatusEntryResult",
    "StatusListVerifier",
    "StatusVerificationResult",
    "check_status",
]
