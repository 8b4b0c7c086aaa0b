"""
Locating StatusList2021Entry claims inside a credential.

credentialStatus may be a single object or an array of objects (e.g. one
for revocation, one for suspension). It is normalized to a list before any
other processing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from vc_status_list.context import (
    SL_V1_CONTEXT,
    STATUS_LIST_ENTRY_TYPE,
    assert_credential,
    assert_status_list_2021_context,
    get_contexts,
)
from vc_status_list.errors import (
    InvalidArgumentError,
    NotFoundError,
    StructuralError,
)


@dataclass
class StatusListEntry:
    """Validated view of a StatusList2021Entry."""

    status_list_credential: str
    status_list_index: int
    status_purpose: str
    id: str | None = None
    type: str = STATUS_LIST_ENTRY_TYPE

    @classmethod
    def from_dict(cls, entry: dict[str, Any]) -> StatusListEntry:
        """Parse a credentialStatus entry.

        Raises:
            InvalidArgumentError: If the index, list URL or purpose is
                malformed.
        """
        index = _parse_index(entry.get("statusListIndex"))
        if index is None:
            raise InvalidArgumentError('"statusListIndex" must be an integer.')

        url = entry.get("statusListCredential")
        if not (url and isinstance(url, str)):
            raise InvalidArgumentError(
                '"credentialStatus.statusListCredential" must be a string.'
            )

        purpose = entry.get("statusPurpose")
        if not isinstance(purpose, str):
            raise InvalidArgumentError(
                '"credentialStatus.statusPurpose" must be a string.'
            )

        return cls(
            status_list_credential=url,
            status_list_index=index,
            status_purpose=purpose,
            id=entry.get("id"),
            type=entry.get("type", STATUS_LIST_ENTRY_TYPE),
        )


def _parse_index(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return None


def _normalize(credential_status: Any) -> list[Any]:
    if isinstance(credential_status, list):
        return credential_status
    return [credential_status]


def _is_status_list_entry(item: Any) -> bool:
    return isinstance(item, dict) and item.get("type") == STATUS_LIST_ENTRY_TYPE


def get_status_entries(credential: dict[str, Any]) -> list[dict[str, Any]]:
    """Return every StatusList2021Entry in credentialStatus, in order.

    Returns an empty list if credentialStatus is absent.

    Raises:
        InvalidArgumentError: If credential is not an object.
        StructuralError: If credentialStatus is neither an object nor an
            array.
    """
    credential_status = assert_credential(credential).get("credentialStatus")
    if credential_status is None:
        return []
    if not isinstance(credential_status, (dict, list)):
        raise StructuralError('"credentialStatus" is invalid.')
    return [item for item in _normalize(credential_status) if _is_status_list_entry(item)]


def status_type_matches(credential: dict[str, Any]) -> bool:
    """Check whether a credential uses StatusList2021 for its status.

    The credential and the base @context entry are validated strictly. A
    missing status list context or credentialStatus yields False.

    Raises:
        InvalidArgumentError: If credential is not an object or @context is
            not an array.
        StructuralError: If the first @context value is wrong, or
            credentialStatus is malformed.
    """
    if SL_V1_CONTEXT not in get_contexts(credential):
        return False
    return len(get_status_entries(credential)) > 0


def get_credential_status(
    credential: dict[str, Any], status_purpose: str | None = None
) -> dict[str, Any]:
    """Return the StatusList2021Entry for the given purpose.

    Args:
        credential: The credential to search.
        status_purpose: e.g. "revocation" or "suspension".

    Returns:
        The first matching entry, unchanged.

    Raises:
        InvalidArgumentError: If the arguments are malformed.
        StructuralError: If the @context is not StatusList2021-compatible.
        NotFoundError: If there is no matching entry.
    """
    assert_status_list_2021_context(credential)
    if not isinstance(status_purpose, str):
        raise InvalidArgumentError('"statusPurpose" must be a string.')

    credential_status = credential.get("credentialStatus")
    if not isinstance(credential_status, (dict, list)):
        raise NotFoundError('"credentialStatus" is missing or invalid.')

    for item in _normalize(credential_status):
        if _is_status_list_entry(item) and item.get("statusPurpose") == status_purpose:
            return item

    raise NotFoundError(
        f'"credentialStatus" with type "{STATUS_LIST_ENTRY_TYPE}" and '
        f'status purpose "{status_purpose}" not found.'
    )
