"""
StatusList2021 status verification.

For each StatusList2021Entry on a credential:

1. Validate the entry fields
2. Load the referenced status list credential
3. Validate its type, credentialSubject type and @context
4. Verify its proof (optional)
5. Decode its encodedList
6. Check the status purpose
7. Read the bit at statusListIndex
8. Check that both credentials share an issuer (optional)

check_status never raises: every failure is reported in the returned
StatusVerificationResult. Its verified flag says whether the status
information is authentic and well-formed; whether the credential is
revoked or suspended is reported separately per entry.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from vc_status_list.context import (
    STATUS_LIST_CREDENTIAL_TYPE,
    STATUS_LIST_ENTRY_TYPE,
    STATUS_LIST_TYPE,
    assert_status_list_2021_context,
)
from vc_status_list.credential_status import StatusListEntry, get_status_entries
from vc_status_list.document_loader import DocumentLoader
from vc_status_list.errors import (
    InvalidArgumentError,
    NotFoundError,
    ProofError,
    ResolutionError,
    StatusListError,
    StructuralError,
)
from vc_status_list.statuslist import decode_list
from vc_status_list.suites import Suite, is_suite

logger = logging.getLogger(__name__)


class CredentialStatus(Enum):
    """Credential status values."""

    VALID = "valid"
    REVOKED = "revoked"
    SUSPENDED = "suspended"
    UNKNOWN = "unknown"


@dataclass
class StatusEntryResult:
    """Outcome of checking one credentialStatus entry."""

    verified: bool
    credential_status: dict[str, Any] | None
    status: CredentialStatus | None = None
    is_set: bool | None = None
    purpose: str | None = None
    index: int | None = None
    error: Exception | None = None


@dataclass
class StatusVerificationResult:
    """Aggregated outcome of check_status."""

    verified: bool
    results: list[StatusEntryResult] = field(default_factory=list)
    error: Exception | None = None

    @property
    def revoked(self) -> bool:
        """True if any verified entry reports revocation."""
        return any(
            r.verified and r.status == CredentialStatus.REVOKED for r in self.results
        )

    @property
    def suspended(self) -> bool:
        """True if any verified entry reports suspension."""
        return any(
            r.verified and r.status == CredentialStatus.SUSPENDED for r in self.results
        )


def _issuer_id(issuer: Any) -> str | None:
    if isinstance(issuer, str):
        return issuer
    if isinstance(issuer, dict):
        return issuer.get("id")
    return None


def _normalize_suites(suite: Any) -> list[Suite]:
    if isinstance(suite, (list, tuple)):
        suites = list(suite)
    else:
        suites = [suite]
    if suite is None or not all(is_suite(s) for s in suites):
        raise InvalidArgumentError('"suite" must be an object or an array of objects.')
    return suites


def _status_for(purpose: str, is_set: bool) -> CredentialStatus:
    if not is_set:
        return CredentialStatus.VALID
    if purpose == "revocation":
        return CredentialStatus.REVOKED
    if purpose == "suspension":
        return CredentialStatus.SUSPENDED
    return CredentialStatus.UNKNOWN


def _load_status_list_credential(
    url: str, document_loader: DocumentLoader
) -> dict[str, Any]:
    try:
        document = document_loader(url)
    except Exception as e:
        raise ResolutionError(
            f'Could not load "{STATUS_LIST_CREDENTIAL_TYPE}"; reason: {e}'
        ) from e
    if not isinstance(document, dict):
        raise ResolutionError(
            f'Could not load "{STATUS_LIST_CREDENTIAL_TYPE}"; reason: '
            f'document at "{url}" is not an object.'
        )
    return document


def _validate_status_list_credential(slc: dict[str, Any]) -> dict[str, Any]:
    types = slc.get("type")
    if isinstance(types, str):
        types = [types]
    if not isinstance(types, list) or STATUS_LIST_CREDENTIAL_TYPE not in types:
        raise StructuralError(
            f'Status list credential type must include "{STATUS_LIST_CREDENTIAL_TYPE}".'
        )
    subject = slc.get("credentialSubject")
    if not isinstance(subject, dict) or subject.get("type") != STATUS_LIST_TYPE:
        raise StructuralError(f'Status list type must be "{STATUS_LIST_TYPE}".')
    assert_status_list_2021_context(slc)
    return subject


def _verify_proof(
    slc: dict[str, Any], suites: list[Suite], document_loader: DocumentLoader
) -> None:
    errors: list[Any] = []
    for suite in suites:
        try:
            result = suite.verify(slc, document_loader)
        except Exception as e:
            errors.append(e)
            continue
        if isinstance(result, dict):
            verified, detail = result.get("verified"), result.get("error")
        else:
            verified = getattr(result, "verified", False)
            detail = getattr(result, "error", None)
        if verified is True:
            return
        errors.append(detail)

    message = f'"{STATUS_LIST_CREDENTIAL_TYPE}" not verified'
    first = next((e for e in errors if e), None)
    if first is not None:
        message += f": {str(first).rstrip('.')}"
    raise ProofError(message + ".", errors=errors)


def _check_entry(
    credential: dict[str, Any],
    entry: StatusListEntry,
    document_loader: DocumentLoader,
    suites: list[Suite],
    verify_status_list_credential: bool,
    verify_matching_issuers: bool,
) -> tuple[bool, CredentialStatus]:
    logger.debug("Resolving %s", entry.status_list_credential)
    slc = _load_status_list_credential(entry.status_list_credential, document_loader)
    subject = _validate_status_list_credential(slc)

    if verify_status_list_credential:
        logger.debug("Verifying proof on %s", entry.status_list_credential)
        _verify_proof(slc, suites, document_loader)

    status_list = decode_list(subject.get("encodedList"))

    slc_purpose = subject.get("statusPurpose")
    if slc_purpose != entry.status_purpose:
        raise StructuralError(
            f'The status purpose "{slc_purpose}" of the status list credential '
            f'does not match the status purpose "{entry.status_purpose}" in the '
            "credential."
        )

    is_set = status_list.get(entry.status_list_index)

    if verify_matching_issuers:
        issuer = _issuer_id(credential.get("issuer"))
        slc_issuer = _issuer_id(slc.get("issuer"))
        if not (issuer and slc_issuer and issuer == slc_issuer):
            raise StructuralError(
                "Issuers of the status list credential and verifiable "
                "credential do not match."
            )

    return is_set, _status_for(entry.status_purpose, is_set)


def _check_one(
    credential: dict[str, Any],
    item: dict[str, Any],
    document_loader: DocumentLoader,
    suites: list[Suite],
    verify_status_list_credential: bool,
    verify_matching_issuers: bool,
) -> StatusEntryResult:
    entry: StatusListEntry | None = None
    try:
        entry = StatusListEntry.from_dict(item)
        is_set, status = _check_entry(
            credential,
            entry,
            document_loader,
            suites,
            verify_status_list_credential,
            verify_matching_issuers,
        )
    except Exception as e:
        logger.warning("Status entry %s failed: %s", item.get("id"), e)
        return StatusEntryResult(
            verified=False,
            credential_status=item,
            purpose=entry.status_purpose if entry else None,
            index=entry.status_list_index if entry else None,
            error=e,
        )
    return StatusEntryResult(
        verified=True,
        credential_status=item,
        status=status,
        is_set=is_set,
        purpose=entry.status_purpose,
        index=entry.status_list_index,
    )


def _check_statuses(
    credential: Any,
    document_loader: Any,
    suite: Any,
    verify_status_list_credential: bool,
    verify_matching_issuers: bool,
    allow_missing_status: bool,
    max_workers: int | None,
) -> StatusVerificationResult:
    if not isinstance(credential, dict):
        raise InvalidArgumentError('"credential" must be an object.')
    if not callable(document_loader):
        raise InvalidArgumentError('"documentLoader" must be a function.')
    suites = _normalize_suites(suite) if verify_status_list_credential else []

    if credential.get("credentialStatus") is None:
        if allow_missing_status:
            return StatusVerificationResult(verified=True, results=[])
        raise NotFoundError('"credentialStatus" is missing or invalid.')

    items = get_status_entries(credential)
    if not items:
        raise StructuralError(
            f'"credentialStatus.type" must be "{STATUS_LIST_ENTRY_TYPE}".'
        )

    def check(item: dict[str, Any]) -> StatusEntryResult:
        return _check_one(
            credential,
            item,
            document_loader,
            suites,
            verify_status_list_credential,
            verify_matching_issuers,
        )

    if max_workers and max_workers > 1 and len(items) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(check, items))
    else:
        results = [check(item) for item in items]

    verified = all(r.verified for r in results)
    error = next((r.error for r in results if r.error is not None), None)
    return StatusVerificationResult(verified=verified, results=results, error=error)


def check_status(
    credential: dict[str, Any] | None = None,
    document_loader: DocumentLoader | None = None,
    suite: Suite | list[Suite] | None = None,
    *,
    verify_status_list_credential: bool = True,
    verify_matching_issuers: bool = True,
    allow_missing_status: bool = False,
    max_workers: int | None = None,
) -> StatusVerificationResult:
    """Check every StatusList2021Entry on a credential.

    Args:
        credential: The credential whose status is checked.
        document_loader: Callable resolving status list credential URLs
            (and, for proof verification, verification methods).
        suite: One suite or a list of suites. Required unless
            verify_status_list_credential is False.
        verify_status_list_credential: Whether to verify the proof on each
            status list credential.
        verify_matching_issuers: Whether the credential and status list
            credential must have the same issuer.
        allow_missing_status: Whether a credential without credentialStatus
            verifies (with no results) instead of failing.
        max_workers: Check entries on a thread pool of this size. Results
            keep input order.

    Returns:
        StatusVerificationResult. Never raises; failures are in .error and
        in each entry's result.
    """
    try:
        result = _check_statuses(
            credential,
            document_loader,
            suite,
            verify_status_list_credential,
            verify_matching_issuers,
            allow_missing_status,
            max_workers,
        )
    except StatusListError as e:
        logger.debug("Status check failed: %s", e)
        return StatusVerificationResult(verified=False, results=[], error=e)
    except Exception as e:
        logger.exception("Unexpected error during status check")
        return StatusVerificationResult(verified=False, results=[], error=e)

    logger.info(
        "Status check for %s: verified=%s (%d entries)",
        credential.get("id"),
        result.verified,
        len(result.results),
    )
    return result


class StatusListVerifier:
    """Reusable status checker bound to a loader and suites."""

    def __init__(
        self,
        document_loader: DocumentLoader,
        suite: Suite | list[Suite] | None = None,
        verify_status_list_credential: bool = True,
        verify_matching_issuers: bool = True,
        allow_missing_status: bool = False,
        max_workers: int | None = None,
    ) -> None:
        """Initialize the verifier.

        Args:
            document_loader: Loader for status list credentials.
            suite: Suite(s) verifying status list credential proofs.
            verify_status_list_credential: Whether to verify proofs.
            verify_matching_issuers: Whether issuers must match.
            allow_missing_status: Whether status-less credentials pass.
            max_workers: Thread pool size for multi-entry credentials.
        """
        self.document_loader = document_loader
        self.suite = suite
        self.verify_status_list_credential = verify_status_list_credential
        self.verify_matching_issuers = verify_matching_issuers
        self.allow_missing_status = allow_missing_status
        self.max_workers = max_workers

    def check(self, credential: dict[str, Any]) -> StatusVerificationResult:
        """Check the status of a credential with this verifier's settings."""
        return check_status(
            credential,
            self.document_loader,
            self.suite,
            verify_status_list_credential=self.verify_status_list_credential,
            verify_matching_issuers=self.verify_matching_issuers,
            allow_missing_status=self.allow_missing_status,
            max_workers=self.max_workers,
        )
