"""Code-generation annotations recognised in Dart sources.

The registry is the single source of truth that links an annotation
(`@JsonSerializable(...)`) to the build_runner builder key configured for it
in `build.yaml`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from core.errors import UnsupportedAnnotationError


class AnnotationType(str, Enum):
    """Supported annotation categories."""

    COPY_WITH = "copy_with"
    JSON_SERIALIZABLE = "json_serializable"
    HIVE = "hive"

    def label(self) -> str:
        """Human readable annotation as written in Dart."""

        return _PATTERNS[self].display


@dataclass(frozen=True)
class AnnotationPattern:
    annotation_type: AnnotationType
    pattern: str
    builder_key: str
    display: str

    def compile(self) -> re.Pattern[str]:
        return _compile(self.pattern)


@lru_cache(maxsize=None)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


_PATTERNS: dict[AnnotationType, AnnotationPattern] = {
    AnnotationType.COPY_WITH: AnnotationPattern(
        annotation_type=AnnotationType.COPY_WITH,
        pattern=r"@CopyWith\s*\(",
        builder_key="copy_with_extension_gen",
        display="@CopyWith",
    ),
    AnnotationType.JSON_SERIALIZABLE: AnnotationPattern(
        annotation_type=AnnotationType.JSON_SERIALIZABLE,
        pattern=r"@JsonSerializable\s*\(",
        builder_key="json_serializable",
        display="@JsonSerializable",
    ),
    AnnotationType.HIVE: AnnotationPattern(
        annotation_type=AnnotationType.HIVE,
        pattern=r"@HiveType\s*\(",
        builder_key="hive_generator",
        display="@HiveType",
    ),
}


def get_patterns() -> list[AnnotationPattern]:
    """Return every registered pattern in a stable order."""

    return list(_PATTERNS.values())


def get_pattern(annotation_type: AnnotationType | str) -> AnnotationPattern:
    try:
        return _PATTERNS[AnnotationType(annotation_type)]
    except (KeyError, ValueError) as exc:
        raise UnsupportedAnnotationError(
            f"Unsupported annotation type: {annotation_type!r}"
        ) from exc
