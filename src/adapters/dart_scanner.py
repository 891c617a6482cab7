"""Annotation scanning over Dart sources.

Plain regular-expression matching per file: no Dart parsing. A file that is
`part of` another library is attributed to its parent, since that is the
file build_runner generates for.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from core.domain.annotations import AnnotationPattern, get_patterns
from core.domain.models import AnnotatedFile, ScanResult

logger = logging.getLogger(__name__)

GENERATED_SUFFIXES: tuple[str, ...] = (
    ".g.dart",
    ".freezed.dart",
    ".gr.dart",
    ".config.dart",
)

_PART_OF_URI_RE = re.compile(r"""(?m)^\s*part\s+of\s+(['"])(?P<uri>[^'"]+)\1\s*;""")


def is_generated(path: Path) -> bool:
    return path.name.endswith(GENERATED_SUFFIXES)


def iter_dart_files(project_dir: Path, exclude_dirs: Iterable[str] = ()) -> Iterator[Path]:
    """Yield hand-written `.dart` files below `project_dir` in sorted order.

    `exclude_dirs` names top-level directories only (platform folders,
    `build`); hidden directories are skipped at every depth.
    """

    excluded = set(exclude_dirs)
    top = Path(project_dir)
    for root, dirs, files in os.walk(project_dir):
        at_top = Path(root) == top
        dirs[:] = sorted(
            d for d in dirs
            if not d.startswith(".") and not (at_top and d in excluded)
        )
        for name in sorted(files):
            if not name.endswith(".dart"):
                continue
            path = Path(root) / name
            if is_generated(path):
                continue
            yield path


def resolve_part_of(path: Path, content: str) -> Path:
    """Return the library file `path` belongs to, or `path` itself.

    Only URI-style directives (`part of 'user.dart';`) name a file; the
    legacy `part of my.library;` form cannot be mapped to a path.
    """

    match = _PART_OF_URI_RE.search(content)
    if not match:
        if "part of " in content:
            logger.debug("%s uses a library-name `part of`; keeping the file itself", path)
        return path
    parent = path.parent / match.group("uri").strip()
    return Path(os.path.normpath(parent))


def scan_file(path: Path, patterns: Sequence[AnnotationPattern]) -> list[AnnotatedFile]:
    """Match one file against every pattern. Raises OSError/UnicodeDecodeError."""

    content = path.read_text(encoding="utf-8")
    hits = [p for p in patterns if p.compile().search(content)]
    if not hits:
        return []
    target = resolve_part_of(path, content)
    return [
        AnnotatedFile(source=path, target=target, annotation=p.annotation_type)
        for p in hits
    ]


def scan_project(
    project_dir: Path,
    *,
    patterns: Sequence[AnnotationPattern] | None = None,
    exclude_dirs: Iterable[str] = (),
) -> ScanResult:
    """Walk `project_dir` and group annotated files by builder key."""

    project_dir = project_dir.resolve()
    patterns = list(patterns) if patterns is not None else get_patterns()
    by_type = {p.annotation_type: p.builder_key for p in patterns}

    result = ScanResult(
        project_dir=project_dir,
        matches={p.builder_key: [] for p in patterns},
    )

    for path in iter_dart_files(project_dir, exclude_dirs):
        result.files_scanned += 1
        try:
            found = scan_file(path, patterns)
        except (OSError, UnicodeDecodeError) as exc:
            message = f"Error processing file {path}: {exc}"
            logger.warning(message)
            result.warnings.append(message)
            continue
        for annotated in found:
            result.matches[by_type[annotated.annotation]].append(annotated)
            logger.debug("%s -> %s (%s)", annotated.source, annotated.target, annotated.annotation.label())

    logger.info(
        "Scanned %d Dart files in %s, %d annotated",
        result.files_scanned,
        project_dir,
        result.total_matches,
    )
    return result
