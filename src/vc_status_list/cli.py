"""
Command-line interface for vc-status-list.

Usage:
    vc-status create https://example.com/status/1 --length 131072 --purpose revocation
    vc-status decode H4sIAAAAAAAAA-3BMQEAAADCoPVPbQsvoAAAAAAAAAAAAAAAAP4GcwM92tQwAAA --index 42
    vc-status check credential.json
    cat credential.json | vc-status check -
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from vc_status_list.document_loader import HttpDocumentLoader, StaticDocumentLoader
from vc_status_list.errors import StatusListError
from vc_status_list.statuslist import create_credential, create_list, decode_list
from vc_status_list.suites import EcdsaJcs2022Suite
from vc_status_list.verifier import (
    CredentialStatus,
    StatusVerificationResult,
    check_status,
)


console = Console()


class InputError(click.ClickException):
    """Unusable input; exits with status 2."""

    exit_code = 2


def _status_label(status: CredentialStatus | None) -> str:
    if status == CredentialStatus.VALID:
        return "[green]Valid[/]"
    if status == CredentialStatus.REVOKED:
        return "[red]Revoked[/]"
    if status == CredentialStatus.SUSPENDED:
        return "[yellow]Suspended[/]"
    if status == CredentialStatus.UNKNOWN:
        return "[dim]Set (unknown purpose)[/]"
    return "[dim]-[/]"


def format_result(result: StatusVerificationResult) -> None:
    """Format and print a status verification result."""
    if result.verified:
        title_status = "[bold green]VERIFIED[/]"
        panel_style = "green"
    else:
        title_status = "[bold red]NOT VERIFIED[/]"
        panel_style = "red"

    table = Table(box=None, padding=(0, 2))
    table.add_column("Purpose", style="dim")
    table.add_column("Index")
    table.add_column("Status")
    table.add_column("Detail")

    for entry in result.results:
        detail = f"[red]{entry.error}[/]" if entry.error else ""
        table.add_row(
            entry.purpose or "?",
            "?" if entry.index is None else str(entry.index),
            _status_label(entry.status),
            detail,
        )

    console.print(Panel(table, title=f"Credential Status: {title_status}", border_style=panel_style))

    if result.error and not result.results:
        console.print(f"\n[bold red]Error:[/] {result.error}")


def result_to_dict(result: StatusVerificationResult) -> dict[str, Any]:
    """Convert a result into JSON-serializable data."""
    return {
        "verified": result.verified,
        "revoked": result.revoked,
        "suspended": result.suspended,
        "error": str(result.error) if result.error else None,
        "results": [
            {
                "verified": entry.verified,
                "purpose": entry.purpose,
                "index": entry.index,
                "status": entry.status.value if entry.status else None,
                "error": str(entry.error) if entry.error else None,
            }
            for entry in result.results
        ],
    }


def load_json(source: str, timeout: float = 30.0) -> dict[str, Any]:
    """Load a JSON document from file, URL, or stdin.

    Args:
        source: File path, URL, or "-" for stdin.
        timeout: HTTP request timeout in seconds.

    Returns:
        Parsed JSON.
    """
    if source == "-":
        return json.loads(sys.stdin.read())

    if source.startswith("http://") or source.startswith("https://"):
        with httpx.Client(timeout=timeout) as client:
            response = client.get(
                source,
                headers={"Accept": "application/vc+ld+json, application/json"},
            )
            response.raise_for_status()
            return response.json()

    path = Path(source)
    if not path.exists():
        raise InputError(f"File not found: {source}")

    with path.open() as f:
        return json.load(f)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="vc-status-list")
def main(verbose: bool) -> None:
    """Create, decode and check W3C StatusList2021 status lists."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True))],
        )


@main.command()
@click.argument("credential_id")
@click.option("--length", type=int, default=131072, show_default=True, help="Number of entries")
@click.option("--purpose", default="revocation", show_default=True, help="Status purpose")
@click.option("--issuer", default=None, help="Issuer to include in the credential")
@click.option("--set", "set_indices", type=int, multiple=True, help="Index to set (repeatable)")
def create(
    credential_id: str,
    length: int,
    purpose: str,
    issuer: str | None,
    set_indices: tuple[int, ...],
) -> None:
    """Print an unsigned StatusList2021Credential."""
    try:
        status_list = create_list(length)
        for index in set_indices:
            status_list.set(index, True)
        credential = create_credential(credential_id, status_list, purpose, issuer=issuer)
    except StatusListError as e:
        raise InputError(str(e)) from e
    console.print_json(data=credential)


@main.command()
@click.argument("encoded_list")
@click.option("--length", type=int, default=None, help="Exact list length in bits")
@click.option("--index", "indices", type=int, multiple=True, help="Index to read (repeatable)")
def decode(encoded_list: str, length: int | None, indices: tuple[int, ...]) -> None:
    """Decode an encodedList and print its size and selected bits."""
    try:
        status_list = decode_list(encoded_list, length)
        bits = {str(index): status_list.get(index) for index in indices}
    except StatusListError as e:
        raise InputError(str(e)) from e
    console.print_json(
        data={"length": status_list.length, "set": status_list.count(), "bits": bits}
    )


@main.command()
@click.argument("source", required=True)
@click.option(
    "--document",
    "documents",
    type=click.Path(exists=True, dir_okay=False),
    multiple=True,
    help="Local JSON document served by its id instead of fetching it (repeatable)",
)
@click.option("--no-verify-proof", is_flag=True, help="Skip status list credential proof verification")
@click.option("--no-matching-issuers", is_flag=True, help="Allow a different status list issuer")
@click.option("--allow-missing-status", is_flag=True, help="Treat credentials without credentialStatus as verified")
@click.option("--no-ssl-verify", is_flag=True, help="Disable SSL certificate verification")
@click.option("--json-output", is_flag=True, help="Output result as JSON")
@click.option("--timeout", type=float, default=30.0, help="HTTP request timeout in seconds")
def check(
    source: str,
    documents: tuple[str, ...],
    no_verify_proof: bool,
    no_matching_issuers: bool,
    allow_missing_status: bool,
    no_ssl_verify: bool,
    json_output: bool,
    timeout: float,
) -> None:
    """Check the StatusList2021 status of a credential.

    SOURCE can be:
    - A file path (e.g., credential.json)
    - A URL (e.g., https://example.com/credentials/123)
    - "-" to read from stdin

    Examples:

        vc-status check credential.json

        vc-status check credential.json --document status-list.json --document did.json

        cat credential.json | vc-status check -
    """
    try:
        credential = load_json(source, timeout=timeout)

        loader = StaticDocumentLoader(
            fallback=HttpDocumentLoader(timeout=timeout, verify_ssl=not no_ssl_verify)
        )
        for path in documents:
            document = load_json(path)
            if not isinstance(document, dict):
                raise InputError(f"Document is not a JSON object: {path}")
            if not document.get("id"):
                raise InputError(f"Document has no id: {path}")
            loader.add(document["id"], document)

        result = check_status(
            credential,
            loader,
            EcdsaJcs2022Suite(),
            verify_status_list_credential=not no_verify_proof,
            verify_matching_issuers=not no_matching_issuers,
            allow_missing_status=allow_missing_status,
        )

    except click.ClickException:
        raise

    except json.JSONDecodeError as e:
        if json_output:
            console.print_json(data={"error": f"Invalid JSON: {e}"})
        else:
            console.print(f"[red]Error:[/] Invalid JSON: {e}")
        sys.exit(2)

    except httpx.HTTPError as e:
        if json_output:
            console.print_json(data={"error": f"HTTP error: {e}"})
        else:
            console.print(f"[red]Error:[/] HTTP error: {e}")
        sys.exit(2)

    if json_output:
        console.print_json(data=result_to_dict(result))
    else:
        format_result(result)

    sys.exit(0 if result.verified else 1)


if __name__ == "__main__":
    main()
