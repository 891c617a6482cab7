import json

from adapters.json_exporter import export_report_json
from core.domain.models import BuildReport, CommandResult, CommandSpec


def test_export_report_json(tmp_path):
    spec = CommandSpec(name="pub get", args=["pub", "get"])
    report = BuildReport(
        project_dir=tmp_path,
        commands=[CommandResult(spec=spec, argv=["flutter", "pub", "get"], returncode=65, elapsed_seconds=1.5)],
        failed_step="pub get",
    )

    path = export_report_json(report=report, output_path=tmp_path / "reports" / "build.json")

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["ok"] is False
    assert payload["exit_code"] == 65
    assert payload["failed_step"] == "pub get"
    assert payload["project_dir"] == str(tmp_path)
    assert payload["commands"][0]["elapsed_seconds"] == 1.5


def test_exit_code_for_signal_killed_step(tmp_path):
    spec = CommandSpec(name="clean", args=["clean"])
    report = BuildReport(
        project_dir=tmp_path,
        commands=[CommandResult(spec=spec, argv=["flutter", "clean"], returncode=-9, elapsed_seconds=0.1)],
        failed_step="clean",
    )
    assert report.exit_code == 1
