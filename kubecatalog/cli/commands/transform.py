"""Transform command: discover resources, build entities, write them out."""

import os
import sys
from pathlib import Path
from typing import Annotated

import cyclopts
import logfire
from pydantic import ValidationError

from kubecatalog.application.di import create_container
from kubecatalog.cli.console import Console
from kubecatalog.config import Config, DiscoveryConfig, LabelSelector, configure_logging
from kubecatalog.domain.catalog.service.transform import TransformService
from kubecatalog.domain.shared.error import InfrastructureError
from kubecatalog.infrastructure.output import EntityWriter, OutputFormat
from kubecatalog.sdk.discovery import ResourceDiscovery

app = cyclopts.App(name="transform", help="Generate Templates and API entities")


def apply_overrides(
    config: Config,
    paths: list[Path],
    crds: list[str] | None = None,
    crd_label: LabelSelector | None = None,
) -> Config:
    """Layer command line options over the loaded configuration.

    Paths switch discovery to the file backend. ``--crd`` and
    ``--crd-label`` replace whatever CRD selection the config file had.
    """
    update: dict = {}
    if paths:
        update["discovery"] = DiscoveryConfig(
            backend="file",
            config={"paths": [str(p) for p in paths]},
        )
    if crds or crd_label is not None:
        update["generic_crd_templates"] = config.generic_crd_templates.model_copy(
            update={"crds": crds or None, "crd_label_selector": crd_label}
        )
    return config.model_copy(update=update) if update else config


@app.default
def transform(
    *paths: Path,
    output: Annotated[Path | None, cyclopts.Parameter(name=["--output", "-o"])] = None,
    fmt: Annotated[OutputFormat, cyclopts.Parameter(name="--format")] = OutputFormat.YAML,
    config: Path | None = None,
    crd: list[str] | None = None,
    crd_label: str | None = None,
    quiet: bool = False,
) -> None:
    """Transform XRDs and CRDs into catalog entities.

    Args:
        paths: Manifest files or directories. Without paths the discovery
            backend from the configuration is used.
        output: File or directory to write to. Defaults to stdout.
        fmt: Output format, yaml or json.
        config: YAML config file (same as KUBECATALOG_CONFIG_FILE).
        crd: CRD to generate a template for, as plural.group. Repeatable.
        crd_label: Select CRDs by label, as key=value.
        quiet: Only print warnings and errors.
    """
    console = Console(quiet=quiet)

    if config is not None:
        if not config.exists():
            console.error(f"Config file {config} not found")
            sys.exit(1)
        os.environ["KUBECATALOG_CONFIG_FILE"] = str(config)

    try:
        label = LabelSelector.parse(crd_label) if crd_label else None
        settings = apply_overrides(Config(), list(paths), list(crd) if crd else None, label)
    except (ValidationError, ValueError) as e:
        console.error(f"Invalid configuration: {e}")
        sys.exit(1)

    configure_logging(settings.logging)

    container = create_container(settings)
    try:
        with logfire.span("kubecatalog transform", backend=settings.discovery.backend):
            discovery = container.get(ResourceDiscovery)
            records = discovery.discover()
            console.info(f"Discovered {len(records)} resources")
            with container() as run:
                result = run.get(TransformService).transform(records)
            written = EntityWriter(fmt).write(result.entities, output)
    except InfrastructureError as e:
        console.error(e.message)
        sys.exit(1)
    finally:
        container.close()

    console.warnings(result.warnings)
    summary = f"Generated {len(result.templates)} templates and {len(result.apis)} APIs"
    if output is not None:
        summary += f" ({len(written)} files written to {output})"
    console.success(summary)
