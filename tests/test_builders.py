"""Tests for playerbuild.builders module."""

import shlex
import sys
from pathlib import Path

import pytest

from playerbuild.builders import (
    BuildOptions,
    CallableBackend,
    CommandBackend,
    DryRunBackend,
    get_backend,
    get_backend_for_config,
    list_backends,
)
from playerbuild.config import BackendConfig
from playerbuild.targets import Target

PY = shlex.quote(sys.executable)


# ---------------------------------------------------------------------------
# BuildOptions
# ---------------------------------------------------------------------------

def test_build_options_names() -> None:
    options = BuildOptions.DEVELOPMENT | BuildOptions.SYMLINK_LIBRARIES
    assert options.names() == ["development", "symlink_libraries"]
    assert BuildOptions.NONE.names() == []


def test_build_options_from_names() -> None:
    options = BuildOptions.from_names(["Development", "accept-external-modifications"])
    assert options == BuildOptions.DEVELOPMENT | BuildOptions.ACCEPT_EXTERNAL_MODIFICATIONS
    assert BuildOptions.from_names([]) == BuildOptions.NONE


def test_build_options_from_names_unknown() -> None:
    with pytest.raises(ValueError):
        BuildOptions.from_names(["turbo"])


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def test_get_backend_dry_run() -> None:
    b = get_backend("dry-run")
    assert isinstance(b, DryRunBackend)
    assert b.name == "dry-run"


def test_get_backend_command() -> None:
    b = get_backend("command", command="editor -quit")
    assert isinstance(b, CommandBackend)
    assert b.name == "command"


def test_get_backend_unknown() -> None:
    with pytest.raises(ValueError):
        get_backend("gradle")


def test_list_backends() -> None:
    assert list_backends() == ["callable", "command", "dry-run"]


def test_get_backend_for_config(tmp_path: Path) -> None:
    cfg = BackendConfig(type="command", command="editor {target}", timeout=30, default_options=["development"])
    b = get_backend_for_config(cfg, base_path=tmp_path)
    assert isinstance(b, CommandBackend)
    assert b.timeout == 30
    assert b.cwd == tmp_path
    assert b.default_options == BuildOptions.DEVELOPMENT


# ---------------------------------------------------------------------------
# CallableBackend / DryRunBackend
# ---------------------------------------------------------------------------

def test_callable_backend_none_means_success() -> None:
    b = CallableBackend(lambda inputs, output, target, options: None)
    assert b.build_player([], "out", Target.ANDROID, BuildOptions.NONE) == ""


def test_callable_backend_passes_error_text() -> None:
    b = CallableBackend(lambda inputs, output, target, options: "disk full")
    assert b.build_player([], "out", Target.ANDROID, BuildOptions.NONE) == "disk full"


def test_dry_run_records_calls() -> None:
    b = DryRunBackend()
    assert b.build_player(["a"], "out", Target.IOS, BuildOptions.SYMLINK_LIBRARIES) == ""
    assert len(b.calls) == 1
    assert b.calls[0].target is Target.IOS
    assert b.calls[0].options == BuildOptions.SYMLINK_LIBRARIES


# ---------------------------------------------------------------------------
# CommandBackend
# ---------------------------------------------------------------------------

def test_command_backend_requires_command() -> None:
    with pytest.raises(ValueError):
        CommandBackend("  ")


def test_command_backend_render() -> None:
    b = CommandBackend("editor -buildTarget {target} -out {output} {inputs} -opts={options} -dev {development}")
    argv = b.render(
        ["Scenes/A.unity", "Scenes/B.unity"],
        "build/My Game.exe",
        Target.WINDOWS_DESKTOP,
        BuildOptions.DEVELOPMENT,
    )
    assert argv == [
        "editor", "-buildTarget", "WindowsDesktop", "-out", "build/My Game.exe",
        "Scenes/A.unity", "Scenes/B.unity", "-opts=development", "-dev", "1",
    ]


def test_command_backend_success(tmp_path: Path) -> None:
    lines: list[str] = []
    b = CommandBackend(f"{PY} -c \"import sys; print(' '.join(sys.argv[1:]))\" {{target}} {{output}}",
                       cwd=tmp_path, on_log=lines.append)
    assert b.build_player([], "out.apk", Target.ANDROID, BuildOptions.NONE) == ""
    assert lines == ["Android out.apk"]


def test_command_backend_failure_returns_output_tail(tmp_path: Path) -> None:
    b = CommandBackend(f"{PY} -c \"import sys; print('disk full'); sys.exit(3)\"", cwd=tmp_path)
    assert b.build_player([], "out.apk", Target.ANDROID, BuildOptions.NONE) == "disk full"


def test_command_backend_failure_without_output(tmp_path: Path) -> None:
    b = CommandBackend(f"{PY} -c \"import sys; sys.exit(2)\"", cwd=tmp_path)
    assert b.build_player([], "out", Target.ANDROID, BuildOptions.NONE) == "Build command exited with status 2"


def test_command_backend_missing_executable(tmp_path: Path) -> None:
    b = CommandBackend("definitely-not-a-real-editor-binary -quit", cwd=tmp_path)
    error = b.build_player([], "out", Target.ANDROID, BuildOptions.NONE)
    assert "definitely-not-a-real-editor-binary" in error


def test_command_backend_timeout(tmp_path: Path) -> None:
    b = CommandBackend(f"{PY} -c \"import time; time.sleep(5)\"", cwd=tmp_path, timeout=1)
    error = b.build_player([], "out", Target.ANDROID, BuildOptions.NONE)
    assert "timed out" in error


def test_command_backend_env(tmp_path: Path) -> None:
    lines: list[str] = []
    b = CommandBackend(f"{PY} -c \"import os; print(os.environ['EDITOR_LICENSE'])\"",
                       cwd=tmp_path, env={"EDITOR_LICENSE": "abc"}, on_log=lines.append)
    assert b.build_player([], "out", Target.ANDROID, BuildOptions.NONE) == ""
    assert lines == ["abc"]


def test_command_backend_failing_log_callback_keeps_draining(tmp_path: Path) -> None:
    def broken(line: str) -> None:
        raise RuntimeError("log sink unavailable")

    script = "import sys; [print('x' * 99) for _ in range(4000)]"
    b = CommandBackend(f"{PY} -c {shlex.quote(script)}", cwd=tmp_path, timeout=30, on_log=broken)
    assert b.build_player([], "out", Target.ANDROID, BuildOptions.NONE) == ""


def test_command_backend_failure_keeps_only_output_tail(tmp_path: Path) -> None:
    script = "import sys; [print(f'line {i}') for i in range(100)]; sys.exit(1)"
    b = CommandBackend(f"{PY} -c {shlex.quote(script)}", cwd=tmp_path)
    error = b.build_player([], "out", Target.ANDROID, BuildOptions.NONE)
    assert error.splitlines() == [f"line {i}" for i in range(85, 100)]


@pytest.mark.parametrize("template", [
    f"{PY} -c \"print({{}})\" {{target}}",
    "editor -buildTarget {platform}",
    "editor -out {0}",
    "editor -out {output",
])
def test_command_backend_rejects_bad_placeholders(template: str) -> None:
    with pytest.raises(ValueError):
        CommandBackend(template)


def test_command_backend_escaped_braces() -> None:
    b = CommandBackend("editor -json '{{\"target\":\"{target}\"}}'")
    argv = b.render([], "out", Target.IOS, BuildOptions.NONE)
    assert argv == ["editor", "-json", '{"target":"iOS"}']
