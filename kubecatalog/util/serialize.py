"""YAML rendering shared by entity definitions and the writers."""

from typing import Any

import yaml


class _BlockDumper(yaml.SafeDumper):
    """SafeDumper that never emits anchors/aliases and indents sequences."""

    def ignore_aliases(self, data: Any) -> bool:
        return True

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        return super().increase_indent(flow, False)


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_BlockDumper.add_representer(str, _represent_str)


def dump_yaml(data: Any) -> str:
    """Dump ``data`` as block YAML, keeping insertion order."""
    return yaml.dump(data, Dumper=_BlockDumper, sort_keys=False, allow_unicode=True, width=4096)


def dump_yaml_all(documents: list[Any]) -> str:
    """Dump several documents as one ``---`` separated stream."""
    return yaml.dump_all(
        documents,
        Dumper=_BlockDumper,
        sort_keys=False,
        allow_unicode=True,
        width=4096,
        explicit_start=True,
    )
