from pathlib import Path

from adapters.dart_scanner import (
    is_generated,
    iter_dart_files,
    resolve_part_of,
    scan_project,
)
from core.config import DEFAULT_EXCLUDE_DIRS


def test_iter_dart_files_skips_generated_and_excluded(flutter_project):
    names = [p.relative_to(flutter_project).as_posix() for p in iter_dart_files(flutter_project, DEFAULT_EXCLUDE_DIRS)]
    assert names == [
        "lib/box.dart",
        "lib/plain.dart",
        "lib/models/address.dart",
        "lib/models/user.dart",
    ]


def test_iter_dart_files_skips_hidden_dirs(tmp_path):
    hidden = tmp_path / ".pub-cache"
    hidden.mkdir()
    (hidden / "dep.dart").write_text("@HiveType()", encoding="utf-8")
    (tmp_path / "main.dart").write_text("void main() {}", encoding="utf-8")
    assert [p.name for p in iter_dart_files(tmp_path)] == ["main.dart"]


def test_is_generated():
    assert is_generated(Path("user.g.dart"))
    assert is_generated(Path("user.freezed.dart"))
    assert not is_generated(Path("user.dart"))


def test_resolve_part_of_with_uri():
    path = Path("/proj/lib/models/address.dart")
    assert resolve_part_of(path, "part of 'user.dart';\n") == Path("/proj/lib/models/user.dart")
    assert resolve_part_of(path, 'part of "../app.dart";') == Path("/proj/lib/app.dart")


def test_resolve_part_of_library_name_keeps_file():
    path = Path("/proj/lib/models/address.dart")
    assert resolve_part_of(path, "part of my.models;\n") == path
    assert resolve_part_of(path, "class A {}") == path


def test_scan_project_groups_by_builder(flutter_project):
    result = scan_project(flutter_project, exclude_dirs=DEFAULT_EXCLUDE_DIRS)

    assert result.files_scanned == 4
    assert result.generate_for("json_serializable") == ["lib/models/user.dart"]
    assert result.generate_for("copy_with_extension_gen") == ["lib/models/user.dart"]
    assert result.generate_for("hive_generator") == ["lib/box.dart"]
    assert result.warnings == []

    sources = sorted(m.source.name for m in result.matches["json_serializable"])
    assert sources == ["address.dart", "user.dart"]


def test_scan_project_warns_on_undecodable_file(flutter_project):
    (flutter_project / "lib" / "broken.dart").write_bytes(b"\xff\xfe@HiveType(\x00\x81")

    result = scan_project(flutter_project, exclude_dirs=DEFAULT_EXCLUDE_DIRS)

    assert result.files_scanned == 5
    assert len(result.warnings) == 1
    assert "broken.dart" in result.warnings[0]
    assert result.generate_for("hive_generator") == ["lib/box.dart"]


def test_exclude_dirs_only_apply_at_project_top(flutter_project):
    nested = flutter_project / "lib" / "data" / "web"
    nested.mkdir(parents=True)
    (nested / "api_dto.dart").write_text("@JsonSerializable()\nclass ApiDto {}\n", encoding="utf-8")
    hidden = flutter_project / "lib" / ".cache"
    hidden.mkdir()
    (hidden / "tmp.dart").write_text("@HiveType(typeId: 9)\n", encoding="utf-8")

    result = scan_project(flutter_project, exclude_dirs=DEFAULT_EXCLUDE_DIRS)

    assert result.generate_for("json_serializable") == [
        "lib/data/web/api_dto.dart",
        "lib/models/user.dart",
    ]
    assert result.generate_for("hive_generator") == ["lib/box.dart"]
