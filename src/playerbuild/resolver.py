"""Argument resolver: raw command tokens -> BuildConfiguration.

Flags are matched case-insensitively; their values are taken verbatim from the
next token. Tokens that are not flags (including whatever the host runtime
prepends to the command line) are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .builders.base import BuildError
from .targets import Target, lookup_target

TARGET_FLAG = "-target"
OUTPUT_FLAG = "-output"
DEBUG_FLAG = "-debug"
APPEND_FLAG = "-append"


class ResolutionError(BuildError):
    """Raised when the command line does not describe a valid build."""

    def __init__(self, message: str, tokens: Sequence[str] = ()):
        self.tokens = list(tokens)
        super().__init__(f"{message}\nInvalid command line arguments: {self.tokens!r}")
        self.reason = message


@dataclass(frozen=True)
class BuildConfiguration:
    """Validated intent of one build invocation. Never mutated after creation."""

    target: Target
    output_path: str
    debug: bool = False
    append_existing: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.target, Target):
            raise ResolutionError(f"Invalid build target: {self.target!r}")
        if not self.output_path:
            raise ResolutionError("Output path must not be empty")


def _flag_value(tokens: Sequence[str], flag: str) -> Optional[str]:
    """Value following the first occurrence of *flag*; None if absent or last."""
    for i, token in enumerate(tokens):
        if token.casefold() == flag and i < len(tokens) - 1:
            return tokens[i + 1]
    return None


def has_flag(tokens: Sequence[str], flag: str) -> bool:
    """True if the presence-only *flag* appears anywhere in *tokens*."""
    flag = flag.casefold()
    return any(token.casefold() == flag for token in tokens)


def parse_target(tokens: Sequence[str]) -> Optional[Target]:
    """Return the requested target, None if ``-target`` is missing.

    An unknown target name raises :class:`ResolutionError` rather than falling
    back to a default, so malformed automation input stops the pipeline.
    """
    value = _flag_value(tokens, TARGET_FLAG)
    if value is None:
        return None
    target = lookup_target(value)
    if target is None:
        raise ResolutionError(f"Unknown build target: {value!r}", tokens)
    return target


def parse_output_path(tokens: Sequence[str]) -> str:
    """Return the ``-output`` value verbatim, or an empty string."""
    return _flag_value(tokens, OUTPUT_FLAG) or ""


def resolve_arguments(tokens: Sequence[str]) -> BuildConfiguration:
    """Resolve raw tokens into a :class:`BuildConfiguration`.

    Raises :class:`ResolutionError` (carrying the full token list) when the
    target or output is missing, the output is empty, or the target is unknown.
    """
    tokens = [str(t) for t in tokens]
    target = parse_target(tokens)
    output_path = parse_output_path(tokens)

    if target is None:
        raise ResolutionError(f"Missing {TARGET_FLAG} <platform>", tokens)
    if not output_path:
        raise ResolutionError(f"Missing {OUTPUT_FLAG} <path>", tokens)

    return BuildConfiguration(
        target=target,
        output_path=output_path,
        debug=has_flag(tokens, DEBUG_FLAG),
        append_existing=has_flag(tokens, APPEND_FLAG),
    )
