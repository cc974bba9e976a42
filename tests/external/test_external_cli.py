from __future__ import annotations

import os
from pathlib import Path
import shutil
import subprocess
import sys
import textwrap

import pytest


def _tool_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _run(
    args: list[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    launcher: tuple[str, ...] = ("dtsgen.py",),
) -> subprocess.CompletedProcess[str]:
    run_cwd = _tool_root() if cwd is None else cwd
    return subprocess.run(
        [sys.executable, *launcher, *args],
        cwd=run_cwd,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )


def _install_echo_backend(site: Path, entry_point: str) -> dict[str, str]:
    (site / "echo_backend.py").write_text(
        textwrap.dedent(
            """\
            from pathlib import Path

            import dtsgen


            class EchoGenerator(dtsgen.TypeDefinitionsGenerator):
                def generate(
                    self,
                    assembly_path,
                    reference_paths,
                    reference_directories,
                    typedefs_path,
                    module_format,
                    is_system_assembly,
                    suppress_warnings,
                ):
                    print(f"BACKEND CALLED {assembly_path}")
                    Path(typedefs_path).write_text("// generated\\n")


            @dtsgen.register_generator
            def make_generator():
                return EchoGenerator()
            """
        ),
        encoding="utf-8",
    )
    dist_info = site / "echo_backend-0.1.dist-info"
    dist_info.mkdir()
    (dist_info / "METADATA").write_text(
        "Metadata-Version: 2.1\nName: echo-backend\nVersion: 0.1\n", encoding="utf-8"
    )
    (dist_info / "entry_points.txt").write_text(
        f"[dtsgen.generators]\necho = {entry_point}\n", encoding="utf-8"
    )

    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        part for part in (str(site), env.get("PYTHONPATH", "")) if part
    )
    return env


def test_t_01_unknown_flag_prints_usage_and_exits_1() -> None:
    result = _run(["--not-a-flag"])

    assert result.returncode == 1
    assert "Unrecognized argument: --not-a-flag" in result.stderr
    assert "usage: dtsgen" in result.stdout
    assert "Traceback" not in result.stderr


def test_t_02_value_flag_as_last_token_prints_usage_and_exits_1() -> None:
    result = _run(["-a", "lib.dll", "-t"])

    assert result.returncode == 1
    assert "-t/--typedef/--typedefs" in result.stderr
    assert "--typedefs" in result.stdout


def test_t_03_invalid_module_format_prints_usage() -> None:
    result = _run(["-a", "lib.dll", "-t", "lib.d.ts", "-m", "amd"])

    assert result.returncode == 1
    assert "unsupported module format 'amd'" in result.stderr
    assert "usage: dtsgen" in result.stdout


def test_t_04_count_mismatch_prints_message_without_usage() -> None:
    result = _run(["-a", "a.dll;b.dll", "-t", "a.d.ts"])

    assert result.returncode == 1
    assert "Config error [TYPEDEFS_COUNT_MISMATCH]" in result.stdout
    assert "Specify a type definitions file path for every assembly." in result.stdout
    assert "usage:" not in result.stdout


def test_t_05_bad_typedefs_extension_names_the_file() -> None:
    result = _run(["-a", "lib.dll", "-t", "out/lib.ts"])

    assert result.returncode == 1
    assert "Incorrect typedef file extension: lib.ts" in result.stdout


def test_t_06_without_generator_backend_fails_after_resolution(tmp_path: Path) -> None:
    isolated = tmp_path / "dtsgen.py"
    shutil.copy2(_tool_root() / "dtsgen.py", isolated)

    result = _run(["-a", "lib.dll", "-t", "lib.d.ts", "-f", "net472"], cwd=tmp_path)

    assert result.returncode == 1
    assert "Generation failed: No type definitions generator is installed" in (
        result.stderr
    )
    assert "Traceback" not in result.stderr
    assert not (tmp_path / "lib.d.ts").exists()


@pytest.mark.parametrize(
    "launcher", [("dtsgen.py",), ("-m", "dtsgen")], ids=["script", "module"]
)
@pytest.mark.parametrize(
    "entry_point", ["echo_backend", "echo_backend:make_generator"], ids=["module", "factory"]
)
def test_t_07_entry_point_backend_runs_without_framework(
    tmp_path: Path, launcher: tuple[str, ...], entry_point: str
) -> None:
    site = tmp_path / "site"
    site.mkdir()
    env = _install_echo_backend(site, entry_point)
    typedefs = tmp_path / "lib.d.ts"

    result = _run(["-a", "lib.dll", "-t", str(typedefs)], env=env, launcher=launcher)

    assert result.returncode == 0, result.stderr
    assert "BACKEND CALLED lib.dll" in result.stdout
    assert "Traceback" not in result.stderr
    assert typedefs.read_text(encoding="utf-8") == "// generated\n"
