"""
Signature suites used to verify status list credentials.

A suite is any object with a verify(document, document_loader) method that
returns a ProofVerificationResult. EcdsaJcs2022Suite is the bundled
implementation:

- Proof type: DataIntegrityProof
- Cryptosuite: ecdsa-jcs-2022
- Curve: P-256 (secp256r1)
"""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Protocol

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from vc_status_list.document_loader import DocumentLoader

logger = logging.getLogger(__name__)


@dataclass
class ProofVerificationResult:
    """Result of cryptographic proof verification."""

    verified: bool
    cryptosuite: str
    verification_method: str
    error: str | None = None


class Suite(Protocol):
    """Capability that verifies the proof on a JSON document."""

    def verify(
        self, document: dict[str, Any], document_loader: DocumentLoader
    ) -> ProofVerificationResult: ...


def is_suite(value: Any) -> bool:
    """Return True if value looks like a Suite."""
    return callable(getattr(value, "verify", None))


def canonicalize_json(data: dict[str, Any]) -> str:
    """Canonicalize JSON in the manner of JCS (RFC 8785)."""
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def base64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def base64url_decode(data: str) -> bytes:
    """Decode base64url without padding."""
    padding = 4 - (len(data) % 4)
    if padding != 4:
        data += "=" * padding
    return base64.urlsafe_b64decode(data)


class EcdsaJcs2022Suite:
    """Data Integrity suite for ecdsa-jcs-2022 over P-256."""

    PROOF_TYPE = "DataIntegrityProof"
    CRYPTOSUITE = "ecdsa-jcs-2022"

    def sign(
        self,
        document: dict[str, Any],
        private_key: ec.EllipticCurvePrivateKey,
        verification_method: str,
        created: str | None = None,
    ) -> dict[str, Any]:
        """Return a copy of document with a DataIntegrityProof attached.

        Args:
            document: The unsigned document. Any existing proof is replaced.
            private_key: P-256 signing key.
            verification_method: Verification method id, e.g.
                did:web:example.com#key-1.
            created: Proof timestamp. Defaults to now (UTC).
        """
        unsigned = {k: v for k, v in document.items() if k != "proof"}
        message_bytes = canonicalize_json(unsigned).encode("utf-8")

        der_signature = private_key.sign(message_bytes, ec.ECDSA(hashes.SHA256()))
        r, s = decode_dss_signature(der_signature)
        raw_signature = r.to_bytes(32, byteorder="big") + s.to_bytes(32, byteorder="big")

        if created is None:
            created = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

        signed = dict(unsigned)
        signed["proof"] = {
            "type": self.PROOF_TYPE,
            "cryptosuite": self.CRYPTOSUITE,
            "created": created,
            "verificationMethod": verification_method,
            "proofPurpose": "assertionMethod",
            "proofValue": base64url_encode(raw_signature),
        }
        return signed

    def verify(
        self, document: dict[str, Any], document_loader: DocumentLoader
    ) -> ProofVerificationResult:
        """Verify the ecdsa-jcs-2022 proof on document.

        The verification method is resolved through document_loader, which
        may return either the DID document or the method itself.
        """
        proof = self._find_proof(document)
        if proof is None:
            return ProofVerificationResult(
                verified=False,
                cryptosuite=self.CRYPTOSUITE,
                verification_method="",
                error="No matching proofs found in the given document.",
            )

        verification_method = proof.get("verificationMethod", "")
        if not verification_method or not isinstance(verification_method, str):
            return ProofVerificationResult(
                verified=False,
                cryptosuite=self.CRYPTOSUITE,
                verification_method="",
                error="Missing verificationMethod in proof.",
            )

        try:
            public_key = self._resolve_public_key(verification_method, document_loader)
        except Exception as e:
            return ProofVerificationResult(
                verified=False,
                cryptosuite=self.CRYPTOSUITE,
                verification_method=verification_method,
                error=f"Verification method could not be resolved: {e}",
            )

        try:
            signature_valid = self._verify_signature(document, proof, public_key)
        except (ValueError, TypeError) as e:
            return ProofVerificationResult(
                verified=False,
                cryptosuite=self.CRYPTOSUITE,
                verification_method=verification_method,
                error=f"Signature verification error: {e}",
            )

        logger.debug("Proof by %s verified=%s", verification_method, signature_valid)
        return ProofVerificationResult(
            verified=signature_valid,
            cryptosuite=self.CRYPTOSUITE,
            verification_method=verification_method,
            error=None if signature_valid else "Invalid signature.",
        )

    def _find_proof(self, document: dict[str, Any]) -> dict[str, Any] | None:
        proofs = document.get("proof")
        if not isinstance(proofs, list):
            proofs = [proofs]
        for proof in proofs:
            if (
                isinstance(proof, dict)
                and proof.get("type") == self.PROOF_TYPE
                and proof.get("cryptosuite") == self.CRYPTOSUITE
            ):
                return proof
        return None

    def _resolve_public_key(
        self, verification_method: str, document_loader: DocumentLoader
    ) -> ec.EllipticCurvePublicKey:
        """Resolve a verification method to its P-256 public key.

        Raises:
            ValueError: If the method or its key cannot be found.
        """
        document = document_loader(verification_method)
        if not isinstance(document, dict):
            raise ValueError(f"No document for {verification_method}")

        if document.get("id") == verification_method and "publicKeyJwk" in document:
            method = document
        else:
            method = next(
                (
                    vm
                    for vm in document.get("verificationMethod", [])
                    if isinstance(vm, dict) and vm.get("id") == verification_method
                ),
                None,
            )
        if method is None:
            raise ValueError(
                f"Verification method {verification_method} not found in DID Document"
            )

        jwk = method.get("publicKeyJwk")
        if not isinstance(jwk, dict):
            raise ValueError(f"No publicKeyJwk in verification method {verification_method}")
        if jwk.get("kty") != "EC" or jwk.get("crv") != "P-256" or not jwk.get("x") or not jwk.get("y"):
            raise ValueError(f"Public key is not a valid P-256 EC key: {jwk}")

        x = int.from_bytes(base64url_decode(jwk["x"]), byteorder="big")
        y = int.from_bytes(base64url_decode(jwk["y"]), byteorder="big")
        return ec.EllipticCurvePublicNumbers(x, y, ec.SECP256R1()).public_key()

    def _verify_signature(
        self,
        document: dict[str, Any],
        proof: dict[str, Any],
        public_key: ec.EllipticCurvePublicKey,
    ) -> bool:
        """Verify the ECDSA signature over the canonical unsigned document.

        Both raw r||s (64 bytes) and DER signatures are accepted.
        """
        unsigned = {k: v for k, v in document.items() if k != "proof"}
        message_bytes = canonicalize_json(unsigned).encode("utf-8")

        proof_value = proof.get("proofValue")
        if not isinstance(proof_value, str):
            raise ValueError("proofValue must be a string")
        signature_bytes = base64url_decode(proof_value)

        if len(signature_bytes) == 64:
            r = int.from_bytes(signature_bytes[:32], byteorder="big")
            s = int.from_bytes(signature_bytes[32:], byteorder="big")
            signature_bytes = encode_dss_signature(r, s)

        try:
            public_key.verify(signature_bytes, message_bytes, ec.ECDSA(hashes.SHA256()))
            return True
        except InvalidSignature:
            return False
