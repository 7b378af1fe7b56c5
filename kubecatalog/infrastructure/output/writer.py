"""Serialization of generated entities to stdout, a file or a directory."""

import json
import logging
import sys
from enum import StrEnum
from pathlib import Path
from typing import TextIO

from kubecatalog.domain.catalog.model import Entity
from kubecatalog.domain.shared.error import InfrastructureError
from kubecatalog.util.serialize import dump_yaml, dump_yaml_all

logger = logging.getLogger(__name__)


class OutputFormat(StrEnum):
    YAML = "yaml"
    JSON = "json"


class EntityWriter:
    """Writes entities in catalog-ingestible form.

    - ``output`` unset: one stream on stdout.
    - ``output`` an existing directory, or a path without a file suffix: one
      file per entity named ``<kind>-<name>.<ext>``.
    - otherwise: one stream written to that file.
    """

    def __init__(self, fmt: OutputFormat = OutputFormat.YAML, stream: TextIO | None = None) -> None:
        self.fmt = OutputFormat(fmt)
        self._stream = stream

    @property
    def extension(self) -> str:
        return "json" if self.fmt == OutputFormat.JSON else "yaml"

    def render(self, entities: list[Entity]) -> str:
        """Render entities as one YAML stream or a JSON array."""
        documents = [e.to_dict() for e in entities]
        if self.fmt == OutputFormat.JSON:
            return json.dumps(documents, indent=2) + "\n"
        if not documents:
            return ""
        return dump_yaml_all(documents)

    def render_one(self, entity: Entity) -> str:
        if self.fmt == OutputFormat.JSON:
            return json.dumps(entity.to_dict(), indent=2) + "\n"
        return dump_yaml(entity.to_dict())

    def write(self, entities: list[Entity], output: Path | None = None) -> list[Path]:
        """Write entities and return the files written (empty for stdout)."""
        if output is None:
            stream = self._stream or sys.stdout
            stream.write(self.render(entities))
            stream.flush()
            return []

        output = Path(output).expanduser()
        try:
            if output.is_dir() or not output.suffix:
                return self._write_directory(entities, output)
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(self.render(entities), encoding="utf-8")
        except OSError as e:
            raise InfrastructureError(f"Cannot write entities to {output}: {e}") from e
        logger.info("Wrote %d entities to %s", len(entities), output)
        return [output]

    def _write_directory(self, entities: list[Entity], directory: Path) -> list[Path]:
        directory.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for entity in entities:
            path = directory / f"{entity.kind.lower()}-{entity.name}.{self.extension}"
            path.write_text(self.render_one(entity), encoding="utf-8")
            written.append(path)
        logger.info("Wrote %d entity files to %s", len(written), directory)
        return written
