"""Tests for the kitn-registry command line."""

import json
import tempfile
from pathlib import Path

from click.testing import CliRunner

from kitn_registry.cli import main


def _write_component(root: Path, type_dir: str, name: str, type_: str, files: dict[str, str], **fields):
    component_dir = root / "components" / type_dir / name
    component_dir.mkdir(parents=True)
    manifest = {"name": name, "type": type_, "description": f"The {name} component", "files": list(files), **fields}
    (component_dir / "manifest.json").write_text(json.dumps(manifest, indent=2) + "\n")
    for file_name, content in files.items():
        (component_dir / file_name).write_text(content)


def _write_echo_and_greeter(root: Path):
    _write_component(root, "tools", "echo", "kitn:tool", {"echo.ts": "export const echo = (m: string) => m;\n"})
    _write_component(
        root,
        "agents",
        "greeter",
        "kitn:agent",
        {"greeter.ts": 'import { echo } from "@kitn/tools/echo.js";\n\nexport const greet = () => echo("hi");\n'},
    )


def test_build_then_validate_end_to_end():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_echo_and_greeter(root)

        build = runner.invoke(main, ["--root", tmpdir, "build"])
        assert build.exit_code == 0, build.output
        assert "Registry index: 2 components" in build.output

        index = json.loads((root / "r" / "registry.json").read_text())
        assert len(index["items"]) == 2

        validate = runner.invoke(main, ["--root", tmpdir, "validate"])
        assert validate.exit_code == 0, validate.output
        assert "Validated 2 files, 1 imports, 2 components" in validate.output
        assert "All imports resolve correctly" in validate.output


def test_validate_reports_cross_type_import():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_component(root, "agents", "y", "kitn:agent", {"y.ts": "export const y = 1;"})
        _write_component(root, "tools", "x", "kitn:tool", {"x.ts": 'import { y } from "../agents/y.js";'})

        result = runner.invoke(main, ["--root", tmpdir, "validate"])

        assert result.exit_code == 1
        assert "relative cross-type import" in result.output
        assert "1 error(s) found" in result.output


def test_build_fails_on_missing_file_but_writes_index():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_echo_and_greeter(root)
        (root / "components" / "tools" / "echo" / "echo.ts").unlink()

        result = runner.invoke(main, ["--root", tmpdir, "build"])

        assert result.exit_code == 1
        index = json.loads((root / "r" / "registry.json").read_text())
        assert [i["name"] for i in index["items"]] == ["greeter"]


def test_missing_components_dir_is_fatal():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmpdir:
        result = runner.invoke(main, ["--root", tmpdir, "validate"])
        assert result.exit_code == 2


def test_root_from_environment():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_echo_and_greeter(Path(tmpdir))
        result = runner.invoke(main, ["validate"], env={"KITN_REGISTRY_ROOT": tmpdir})
        assert result.exit_code == 0, result.output


def test_stage_command():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_echo_and_greeter(Path(tmpdir))
        result = runner.invoke(main, ["--root", tmpdir, "stage"])
        assert result.exit_code == 0, result.output
        assert "Staged 2 files" in result.output


def test_list_command():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_echo_and_greeter(Path(tmpdir))
        result = runner.invoke(main, ["--root", tmpdir, "list"])
        assert result.exit_code == 0, result.output
        assert "echo" in result.output
        assert "greeter" in result.output


def test_bump_with_options_and_rebuild():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_echo_and_greeter(root)

        result = runner.invoke(
            main,
            ["--root", tmpdir, "bump", "echo", "--bump", "major", "--change-type", "breaking", "-m", "New API", "--rebuild"],
        )

        assert result.exit_code == 0, result.output
        manifest = json.loads((root / "components" / "tools" / "echo" / "manifest.json").read_text())
        assert manifest["version"] == "2.0.0"
        assert manifest["changelog"][0]["type"] == "breaking"
        assert (root / "r" / "tools" / "echo@2.0.0.json").exists()


def test_bump_interactive():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_echo_and_greeter(root)

        result = runner.invoke(main, ["--root", tmpdir, "bump", "echo"], input="minor\n\nAdds shouting\nn\n")

        assert result.exit_code == 0, result.output
        manifest = json.loads((root / "components" / "tools" / "echo" / "manifest.json").read_text())
        assert manifest["version"] == "1.1.0"
        assert manifest["changelog"][0] == {
            "version": "1.1.0",
            "date": manifest["changelog"][0]["date"],
            "type": "feature",
            "note": "Adds shouting",
        }
        assert not (root / "r").exists()


def test_bump_unknown_component():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_echo_and_greeter(Path(tmpdir))
        result = runner.invoke(main, ["--root", tmpdir, "bump", "nope", "--no-rebuild"])
        assert result.exit_code == 1
        assert "Available: echo, greeter" in result.output


def test_schema_command():
    runner = CliRunner()
    result = runner.invoke(main, ["schema", "lock"])
    assert result.exit_code == 0
    assert json.loads(result.output)["title"] == "Installed Components Lock"
