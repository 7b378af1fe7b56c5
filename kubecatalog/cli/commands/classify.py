"""Classify command: show how each XRD/CRD will be treated."""

import sys
from pathlib import Path

import cyclopts

from kubecatalog.cli.console import Console
from kubecatalog.domain.resource.service import classifier
from kubecatalog.domain.resource.service.parser import parse_resource
from kubecatalog.domain.shared.error import DomainError, InfrastructureError
from kubecatalog.infrastructure.discovery.file import FileDiscovery, FileDiscoveryConfig

app = cyclopts.App(name="classify", help="Show scope classification of XRDs and CRDs")

COLUMNS = [
    ("name", "Name"),
    ("type", "Type"),
    ("version", "Crossplane"),
    ("scope", "Scope"),
    ("claims", "Claims"),
    ("direct", "Direct XR"),
    ("namespace", "Namespace"),
    ("kind", "Creates"),
]


def _yes(value: bool) -> str:
    return "yes" if value else "no"


@app.default
def classify(*paths: Path) -> None:
    """Print the scope classification of every XRD and CRD found.

    Args:
        paths: Manifest files or directories.
    """
    console = Console()
    if not paths:
        console.error("No manifest paths given", hint="kubecatalog classify ./xrds")
        sys.exit(1)

    try:
        records = FileDiscovery(FileDiscoveryConfig(paths=list(paths))).discover()
    except InfrastructureError as e:
        console.error(e.message)
        sys.exit(1)

    rows = []
    for record in records:
        try:
            descriptor = parse_resource(record)
        except DomainError as e:
            console.warning(f"{record.name}: {e.message}")
            continue
        c = classifier.classify(descriptor)
        rows.append(
            {
                "name": descriptor.name,
                "type": descriptor.resource_type.upper(),
                "version": c.crossplane_version if descriptor.is_xrd else "-",
                "scope": c.scope,
                "claims": _yes(c.uses_claims),
                "direct": _yes(c.is_direct_xr),
                "namespace": _yes(c.include_namespace),
                "kind": c.resource_kind,
            }
        )

    if not rows:
        console.info("No XRDs or CRDs found")
        return
    console.table(rows, COLUMNS, title="Resource classification")
