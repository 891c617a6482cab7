"""Read, merge and write `build.yaml`.

Only `targets.$default.builders.<builder>.generate_for` is touched; the rest
of the document is carried through as-is. PyYAML does not keep comments.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from core.domain.annotations import get_patterns
from core.domain.models import ScanResult, YamlSyncResult
from core.errors import BuildYamlError, BuildYamlNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TARGET = "$default"


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BuildYamlError(f"Cannot read {path}: {exc}") from exc


def write_text(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise BuildYamlError(f"Cannot write {path}: {exc}") from exc


def read_build_yaml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise BuildYamlNotFoundError(path)
    text = read_text(path)
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise BuildYamlError(f"{path} is not valid YAML: {exc}") from exc
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise BuildYamlError(f"{path} must contain a mapping at the top level")
    return document


def _builders_node(document: dict[str, Any]) -> dict[str, Any] | None:
    node: Any = document
    for key in ("targets", DEFAULT_TARGET, "builders"):
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node if isinstance(node, dict) else None


def merge_generate_for(document: dict[str, Any], scan: ScanResult, *, path: Path) -> YamlSyncResult:
    """Replace `generate_for` of each known builder with the scanned files.

    Mutates `document` in place. Builders that are not configured are left
    alone and reported.
    """

    result = YamlSyncResult(path=path)
    builders = _builders_node(document)

    for pattern in get_patterns():
        key = pattern.builder_key
        files = scan.generate_for(key)
        builder = builders.get(key) if builders is not None else None
        if not isinstance(builder, dict):
            result.missing_builders.append(key)
            if files:
                logger.warning(
                    "%d file(s) use %s but builder '%s' is not configured in %s",
                    len(files),
                    pattern.display,
                    key,
                    path.name,
                )
            continue
        if builder.get("generate_for") != files:
            result.changed = True
        builder["generate_for"] = files
        result.updated_builders.append(key)
        logger.debug("%s.generate_for = %s", key, files)

    return result


def render_build_yaml(document: dict[str, Any]) -> str:
    return yaml.safe_dump(
        document,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=4096,
    )


def write_build_yaml(path: Path, document: dict[str, Any]) -> bool:
    """Write `document` when it differs from what is on disk."""

    rendered = render_build_yaml(document)
    if path.is_file() and read_text(path) == rendered:
        logger.info("%s is already up to date", path.name)
        return False
    write_text(path, rendered)
    logger.info("Wrote %s", path)
    return True


def default_build_yaml() -> dict[str, Any]:
    """Skeleton document configuring every known builder."""

    return {
        "targets": {
            DEFAULT_TARGET: {
                "builders": {
                    p.builder_key: {"generate_for": []} for p in get_patterns()
                }
            }
        }
    }
