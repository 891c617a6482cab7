import pytest

from core.domain.annotations import (
    AnnotationType,
    get_pattern,
    get_patterns,
)
from core.errors import UnsupportedAnnotationError


def test_registry_maps_annotations_to_builders():
    mapping = {p.annotation_type: p.builder_key for p in get_patterns()}
    assert mapping == {
        AnnotationType.COPY_WITH: "copy_with_extension_gen",
        AnnotationType.JSON_SERIALIZABLE: "json_serializable",
        AnnotationType.HIVE: "hive_generator",
    }


@pytest.mark.parametrize(
    "text,expected",
    [
        ("@JsonSerializable()", True),
        ("@JsonSerializable  (explicitToJson: true)", True),
        ("@JsonSerializable", False),
        ("// JsonSerializable()", False),
    ],
)
def test_json_serializable_pattern(text, expected):
    regex = get_pattern(AnnotationType.JSON_SERIALIZABLE).compile()
    assert bool(regex.search(text)) is expected


def test_get_pattern_accepts_value_string():
    assert get_pattern("hive").builder_key == "hive_generator"
    assert AnnotationType.HIVE.label() == "@HiveType"


def test_get_pattern_rejects_unknown_type():
    with pytest.raises(UnsupportedAnnotationError):
        get_pattern("freezed")


def test_compiled_patterns_are_cached():
    pattern = get_pattern(AnnotationType.COPY_WITH)
    assert pattern.compile() is pattern.compile()
