"""Config management commands."""

import json
import sys
from pathlib import Path

import cyclopts

app = cyclopts.App(name="config", help="Manage kubecatalog configuration")

TEMPLATE = """\
# kubecatalog configuration
# Point KUBECATALOG_CONFIG_FILE at this file or pass --config.

annotation_prefix: terasky.backstage.io
# entity_name_prefix: ""          # Prepended to every generated entity name
# allowed_cluster_names: [prod]   # Only keep resources seen on these clusters

discovery:
  backend: file
  config:
    clusters:
      kubetopus: ./manifests      # Directory of XRD, CRD and Composition manifests
    # paths: [./extra-manifests]

crossplane:
  enabled: true
  xrds:
    enabled: true
    ingest_all_xrds: true         # false requires the add-to-catalog annotation
    convert_default_values_to_placeholders: false
    publish_phase:
      target: github              # github, gitlab, bitbucket, bitbucketcloud or yaml
      allow_repo_selection: false
      git:
        repo_url: github.com?owner=acme&repo=gitops
        target_branch: main

generic_crd_templates:
  crds: []                        # e.g. [certificates.cert-manager.io]
  # crd_label_selector:
  #   key: catalog
  #   value: "true"
  publish_phase:
    target: github
    allow_repo_selection: true

# logging:
#   level: INFO
"""


DEFAULT_CONFIG_NAME = "kubecatalog.yaml"


@app.command
def init(path: Path = Path(DEFAULT_CONFIG_NAME)) -> None:
    """Create a new config file from template.

    Args:
        path: Path for the config file. Defaults to ./kubecatalog.yaml
    """
    if path.is_dir():
        print(f"Error: {path} is a directory, not a file path", file=sys.stderr)
        sys.exit(1)

    if path.exists():
        print(f"Error: {path} already exists (refusing to overwrite)", file=sys.stderr)
        sys.exit(1)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(TEMPLATE)
    print(f"Created config at {path}")
    print("Edit the file to point at your manifests, then run:")
    print(f"  kubecatalog transform --config {path}")


@app.command
def validate(path: Path = Path(DEFAULT_CONFIG_NAME)) -> None:
    """Validate a config file.

    Args:
        path: Path to the config file. Defaults to ./kubecatalog.yaml
    """
    import yaml
    from pydantic import ValidationError

    from kubecatalog.config import Config

    if not path.exists():
        print(f"Error: {path} not found", file=sys.stderr)
        sys.exit(1)

    try:
        data = yaml.safe_load(path.read_text()) or {}
        Config.model_validate(data)
        print(f"✓ {path} is valid")
    except (yaml.YAMLError, ValidationError) as e:
        print(f"✗ {path} is invalid: {e}", file=sys.stderr)
        sys.exit(1)


@app.command
def show() -> None:
    """Show current effective config."""
    from kubecatalog.config import Config

    config = Config()
    print(json.dumps(config.model_dump(mode="json"), indent=2, default=str))
