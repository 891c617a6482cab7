# ==============================================
# Shared fixtures
# ==============================================
#
# - flutter_project: a throw-away Flutter project layout under tmp_path
# - fake_runner:     CommandRunner double that records the steps it ran
# ==============================================

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import AppSettings
from core.domain.models import CommandResult, CommandSpec

BUILD_YAML = """\
targets:
  $default:
    builders:
      json_serializable:
        options:
          explicit_to_json: true
        generate_for:
        - lib/stale.dart
      copy_with_extension_gen:
        generate_for: []
      hive_generator:
        enabled: true
"""

USER_DART = """\
import 'package:json_annotation/json_annotation.dart';

part 'user.g.dart';

@JsonSerializable()
@CopyWith ()
class User {
  final String name;
  User(this.name);
}
"""

ADDRESS_PART_DART = """\
part of 'user.dart';

@JsonSerializable(explicitToJson: true)
class Address {}
"""

BOX_DART = """\
import 'package:hive/hive.dart';

@HiveType(typeId: 1)
class Box {}
"""

PLAIN_DART = """\
// Mentions JsonSerializable without using it.
class Plain {}
"""


class FakeRunner:
    """Records every step; fails the step whose name is in `fail_on`."""

    def __init__(self, fail_on: dict[str, int] | None = None) -> None:
        self.fail_on = fail_on or {}
        self.calls: list[CommandSpec] = []

    def run(self, spec: CommandSpec) -> CommandResult:
        self.calls.append(spec)
        return CommandResult(
            spec=spec,
            argv=["flutter", *spec.args],
            returncode=self.fail_on.get(spec.name, 0),
            elapsed_seconds=0.01,
        )


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    monkeypatch.setitem(AppSettings.model_config, "env_file", None)
    for var in (
        "FLUTTER_BUILDGEN_FLUTTER_EXECUTABLE",
        "FLUTTER_BUILDGEN_BUILD_YAML_NAME",
        "FLUTTER_BUILDGEN_EXCLUDE_DIRS",
        "FLUTTER_BUILDGEN_LOG_LEVEL",
        "FLUTTER_BUILDGEN_DART_EXECUTABLE",
        "FLUTTER_BUILDGEN_COMMAND_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def flutter_project(tmp_path: Path) -> Path:
    root = tmp_path / "app"
    models = root / "lib" / "models"
    models.mkdir(parents=True)
    (root / "pubspec.yaml").write_text(
        "name: app\ndev_dependencies:\n  build_runner: ^2.4.0\n", encoding="utf-8"
    )
    (root / "build.yaml").write_text(BUILD_YAML, encoding="utf-8")
    (models / "user.dart").write_text(USER_DART, encoding="utf-8")
    (models / "address.dart").write_text(ADDRESS_PART_DART, encoding="utf-8")
    (models / "user.g.dart").write_text("// GENERATED\n@JsonSerializable()\n", encoding="utf-8")
    (root / "lib" / "box.dart").write_text(BOX_DART, encoding="utf-8")
    (root / "lib" / "plain.dart").write_text(PLAIN_DART, encoding="utf-8")
    build_dir = root / "build" / "gen"
    build_dir.mkdir(parents=True)
    (build_dir / "ignored.dart").write_text("@HiveType(typeId: 2)\n", encoding="utf-8")
    return root


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()
