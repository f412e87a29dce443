"""Backend that drives an external build command (editor in batch mode, etc.)."""

from __future__ import annotations

import logging
import os
import re
import shlex
import string
import subprocess
import threading
import time
from collections import deque
from pathlib import Path
from typing import Callable, Optional

from ..targets import Target
from .base import Backend, BuildOptions

_logger = logging.getLogger("playerbuild.builders.command")

# Lines of output kept as the error text when the command fails.
_ERROR_TAIL_LINES = 15

TEMPLATE_FIELDS = ("target", "output", "options", "development", "inputs")


def validate_template(command: str) -> list[str]:
    """Split *command* and check every placeholder is a known field.

    Raises ValueError naming the offending argument; literal braces must be
    doubled (``{{`` and ``}}``).
    """
    if not command or not command.strip():
        raise ValueError("Build command template must not be empty")
    argv = shlex.split(command)
    formatter = string.Formatter()
    for arg in argv:
        try:
            fields = [f for _, f, _, _ in formatter.parse(arg) if f is not None]
        except ValueError as e:
            raise ValueError(f"Invalid build command argument {arg!r}: {e}") from None
        for name in fields:
            root = re.split(r"[.\[]", name, maxsplit=1)[0]
            if root not in TEMPLATE_FIELDS:
                raise ValueError(
                    f"Unknown placeholder {{{name}}} in build command argument {arg!r} "
                    f"(expected one of: {', '.join(TEMPLATE_FIELDS)})"
                )
    return argv


class CommandBackend(Backend):
    """Runs a command template and maps its exit status to the backend contract.

    The template is split with :func:`shlex.split` and each argument is
    formatted with ``{target}``, ``{output}``, ``{options}`` and
    ``{development}``. An argument that is exactly ``{inputs}`` expands to one
    argument per input path; inside a larger argument it becomes a
    comma-separated list.
    """

    def __init__(
        self,
        command: str,
        *,
        cwd: Optional[Path] = None,
        env: Optional[dict[str, str]] = None,
        timeout: int = 3600,
        default_options: BuildOptions = BuildOptions.NONE,
        on_log: Optional[Callable[[str], None]] = None,
    ):
        self._argv = validate_template(command)
        self.command = command
        self.cwd = cwd
        self.env = env or {}
        self.timeout = timeout
        self.default_options = default_options
        self.on_log = on_log

    @property
    def name(self) -> str:
        return "command"

    def render(
        self,
        inputs: list[str],
        output_path: str,
        target: Target,
        options: BuildOptions,
    ) -> list[str]:
        """Expand the template into an argv list."""
        values = {
            "target": target.value,
            "output": output_path,
            "options": ",".join(options.names()),
            "development": "1" if BuildOptions.DEVELOPMENT in options else "0",
            "inputs": ",".join(inputs),
        }
        argv: list[str] = []
        for arg in self._argv:
            if arg == "{inputs}":
                argv.extend(inputs)
                continue
            argv.append(arg.format(**values))
        return argv

    def build_player(
        self,
        inputs: list[str],
        output_path: str,
        target: Target,
        options: BuildOptions,
    ) -> str:
        argv = self.render(inputs, output_path, target, options)
        rc, output, error = self._run(argv)
        if error:
            return error
        if rc != 0:
            return output or f"Build command exited with status {rc}"
        return ""

    def _run(self, argv: list[str]) -> tuple[int, str, str]:
        """Run *argv*, stream output to the log, return (rc, output tail, error)."""
        run_env = os.environ.copy()
        run_env.update(self.env)
        cwd = str(self.cwd) if self.cwd else None

        _logger.debug("[command] Running: %s (cwd=%s, timeout=%ds)", shlex.join(argv), cwd, self.timeout)
        t0 = time.monotonic()

        try:
            proc = subprocess.Popen(
                argv,
                cwd=cwd,
                env=run_env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                bufsize=1,
            )
        except OSError as e:
            _logger.error("[command] Could not start %s: %s", argv[0], e)
            return -1, "", f"Could not start build command '{argv[0]}': {e}"

        _logger.debug("[command] Process started pid=%d", proc.pid)
        tail_lines: deque[str] = deque(maxlen=_ERROR_TAIL_LINES)

        def _pump() -> None:
            if proc.stdout:
                for line in proc.stdout:
                    s = line.rstrip("\n")
                    tail_lines.append(s)
                    self._log(self.on_log, s)

        reader = threading.Thread(target=_pump, name="playerbuild-command-output", daemon=True)
        reader.start()

        try:
            try:
                rc = proc.wait(timeout=self.timeout)
            except subprocess.TimeoutExpired:
                elapsed = time.monotonic() - t0
                _logger.error("[command] Timed out after %.1fs (limit=%ds), killing pid=%d", elapsed, self.timeout, proc.pid)
                proc.kill()
                proc.wait(timeout=10)
                reader.join(timeout=10)
                return -9, "\n".join(tail_lines), f"Build command timed out after {elapsed:.0f}s"
            reader.join()
        finally:
            if proc.stdout:
                proc.stdout.close()

        elapsed = time.monotonic() - t0
        tail = "\n".join(tail_lines)
        if rc != 0:
            _logger.warning("[command] Failed (exit=%d) in %.1fs\nOutput tail:\n%s", rc, elapsed, tail or "(no output)")
        else:
            _logger.info("[command] Succeeded in %.1fs", elapsed)

        return rc, tail, ""
