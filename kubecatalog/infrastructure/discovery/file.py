"""File discovery backend - reads XRD, CRD and Composition manifests from disk.

Each configured cluster maps to a file or directory of manifests; plain
``paths`` belong to no cluster and fall back to the default cluster name.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from kubecatalog.domain.resource.model import ResourceType
from kubecatalog.domain.resource.model.value import XRD_API_GROUP
from kubecatalog.domain.resource.service.parser import composite_type, detect_resource_type
from kubecatalog.domain.shared.error import DiscoveryError
from kubecatalog.sdk.discovery.config import DiscoveryBackendConfig
from kubecatalog.sdk.discovery.record import ClusterRef, DiscoveredResource

logger = logging.getLogger(__name__)

MANIFEST_SUFFIXES = (".yaml", ".yml", ".json")
COMPOSITION_KIND = "Composition"


class FileDiscoveryConfig(DiscoveryBackendConfig):
    """Configuration for the file discovery backend."""

    paths: list[Path] = []  # Files or directories not tied to a cluster
    clusters: dict[str, Path] = {}  # Cluster name -> file or directory
    cluster_urls: dict[str, str] = {}  # Cluster name -> API server URL (defaults to the name)


class _Entry:
    """A resource seen on one or more clusters while scanning."""

    def __init__(self, manifest: dict[str, Any]) -> None:
        self.manifest = manifest
        self.clusters: list[ClusterRef] = []
        self.compositions: list[str] = []

    def add_cluster(self, cluster: ClusterRef | None) -> None:
        if cluster is not None and cluster not in self.clusters:
            self.clusters.append(cluster)


class FileDiscovery:
    """Discovers XRDs and CRDs from manifest files.

    Multi-document YAML, JSON and ``List`` kinds are supported. Resources
    found on several clusters are merged into a single record.
    """

    name = "file"
    config_class = FileDiscoveryConfig

    def __init__(self, config: FileDiscoveryConfig) -> None:
        self._config = config

    def discover(self) -> list[DiscoveredResource]:
        xrds: dict[str, _Entry] = {}
        crds: dict[str, _Entry] = {}
        compositions: list[tuple[ClusterRef | None, dict[str, Any]]] = []

        for cluster, path in self._sources():
            for manifest in self._read_path(path):
                resource_type = detect_resource_type(manifest)
                if resource_type == ResourceType.XRD:
                    self._merge(xrds, _xrd_key(manifest), manifest, cluster)
                elif resource_type == ResourceType.CRD:
                    self._merge(crds, _crd_key(manifest), manifest, cluster)
                elif _is_composition(manifest):
                    compositions.append((cluster, manifest))
                else:
                    logger.debug(
                        "Ignoring %s %s in %s",
                        manifest.get("kind"),
                        _name(manifest),
                        path,
                    )

        self._attach_compositions(xrds, compositions)
        crds_by_name = {
            _name(entry.manifest): entry.manifest
            for entry in crds.values()
        }

        records = [
            DiscoveredResource(
                manifest=entry.manifest,
                clusters=entry.clusters,
                compositions=entry.compositions,
                generated_crd=crds_by_name.get(key),
            )
            for key, entry in xrds.items()
        ]
        records.extend(
            DiscoveredResource(manifest=entry.manifest, clusters=entry.clusters)
            for entry in crds.values()
        )
        logger.info(
            "Discovered %d XRDs, %d CRDs and %d compositions",
            len(xrds),
            len(crds),
            len(compositions),
        )
        return records

    def _sources(self) -> list[tuple[ClusterRef | None, Path]]:
        sources: list[tuple[ClusterRef | None, Path]] = [(None, p) for p in self._config.paths]
        for name, path in self._config.clusters.items():
            cluster = ClusterRef(name=name, url=self._config.cluster_urls.get(name, name))
            sources.append((cluster, path))
        if not sources:
            raise DiscoveryError("File discovery has no paths or clusters configured")
        return sources

    def _merge(
        self,
        entries: dict[str, _Entry],
        key: str,
        manifest: dict[str, Any],
        cluster: ClusterRef | None,
    ) -> None:
        entry = entries.get(key)
        if entry is None:
            entry = entries[key] = _Entry(manifest)
        entry.add_cluster(cluster)

    def _attach_compositions(
        self,
        xrds: dict[str, _Entry],
        compositions: list[tuple[ClusterRef | None, dict[str, Any]]],
    ) -> None:
        for entry in xrds.values():
            target = composite_type(entry.manifest)
            if target is None:
                continue
            for cluster, composition in compositions:
                if cluster is not None and entry.clusters and cluster not in entry.clusters:
                    continue
                ref = _mapping(_mapping(composition.get("spec")).get("compositeTypeRef"))
                name = _name(composition)
                if (
                    name
                    and ref.get("apiVersion") == target.api_version
                    and ref.get("kind") == target.kind
                    and name not in entry.compositions
                ):
                    entry.compositions.append(str(name))

    def _read_path(self, path: Path) -> list[dict[str, Any]]:
        path = Path(path).expanduser()
        if not path.exists():
            raise DiscoveryError(f"Manifest path does not exist: {path}")
        if path.is_dir():
            files = sorted(
                p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in MANIFEST_SUFFIXES
            )
        else:
            files = [path]

        manifests: list[dict[str, Any]] = []
        for file in files:
            manifests.extend(self._read_file(file))
        return manifests

    def _read_file(self, file: Path) -> list[dict[str, Any]]:
        try:
            text = file.read_text(encoding="utf-8")
            if file.suffix.lower() == ".json":
                documents = [json.loads(text)]
            else:
                documents = list(yaml.safe_load_all(text))
        except (OSError, UnicodeDecodeError) as e:
            raise DiscoveryError(f"Cannot read {file}: {e}") from e
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise DiscoveryError(f"Cannot parse {file}: {e}") from e

        manifests: list[dict[str, Any]] = []
        for document in documents:
            manifests.extend(_expand(document))
        return manifests


def _expand(document: Any) -> list[dict[str, Any]]:
    """Flatten ``List`` kinds; drop empty documents and non-mappings."""
    if not isinstance(document, dict):
        return []
    kind = str(document.get("kind", ""))
    if kind.endswith("List") and isinstance(document.get("items"), list):
        return [item for item in document["items"] if isinstance(item, dict)]
    return [document]


def _is_composition(manifest: dict[str, Any]) -> bool:
    api_version = str(manifest.get("apiVersion", ""))
    return manifest.get("kind") == COMPOSITION_KIND and api_version.startswith(f"{XRD_API_GROUP}/")


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _name(manifest: dict[str, Any]) -> str:
    return str(_mapping(manifest.get("metadata")).get("name") or "")


def _xrd_key(manifest: dict[str, Any]) -> str:
    return _name(manifest)


def _crd_key(manifest: dict[str, Any]) -> str:
    spec = _mapping(manifest.get("spec"))
    names = _mapping(spec.get("names"))
    if not spec.get("group") or not names.get("plural"):
        return _name(manifest)
    return f"{spec['group']}/{names['plural']}"
