"""
Context identifiers and the StatusList2021 @context check.

This is a structural check only: it looks at the position and presence of
two context URLs and does no JSON-LD processing.
"""

from __future__ import annotations

from typing import Any

from vc_status_list.errors import InvalidArgumentError, StructuralError

VC_V1_CONTEXT = "https://www.w3.org/2018/credentials/v1"
SL_V1_CONTEXT = "https://w3id.org/vc/status-list/2021/v1"

STATUS_LIST_ENTRY_TYPE = "StatusList2021Entry"
STATUS_LIST_CREDENTIAL_TYPE = "StatusList2021Credential"
STATUS_LIST_TYPE = "StatusList2021"


def assert_credential(credential: Any) -> dict[str, Any]:
    """Raise InvalidArgumentError unless credential is a JSON object."""
    if not isinstance(credential, dict):
        raise InvalidArgumentError('"credential" must be an object.')
    return credential


def get_contexts(credential: Any) -> list[Any]:
    """Return the @context list after checking its base entry.

    Raises:
        InvalidArgumentError: If credential is not an object or @context is
            not a list.
        StructuralError: If the first @context value is not the VC v1 context.
    """
    contexts = assert_credential(credential).get("@context")
    if not isinstance(contexts, list):
        raise InvalidArgumentError('"@context" must be an array.')
    if not contexts or contexts[0] != VC_V1_CONTEXT:
        raise StructuralError(
            f'The first "@context" value must be "{VC_V1_CONTEXT}".'
        )
    return contexts


def assert_status_list_2021_context(credential: Any) -> None:
    """Check that a credential declares the StatusList2021 context.

    Args:
        credential: The credential to check.

    Raises:
        InvalidArgumentError: If credential is not an object or @context is
            not a list.
        StructuralError: If the VC v1 context is not first, or the status
            list context is absent.
    """
    if SL_V1_CONTEXT not in get_contexts(credential):
        raise StructuralError(f'"@context" must include "{SL_V1_CONTEXT}".')
