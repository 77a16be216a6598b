"""Downlevel the combined script for older browsers.

The work is delegated to the esbuild CLI in transform mode. Only legal
comments (``/*!``, ``@license``, ``@preserve``) survive, no source map is
produced, and no ``--format`` is passed so the result stays a plain script.
"""

from __future__ import annotations

import asyncio
import shutil
from typing import Iterable, List, Optional, Protocol, Sequence

from bpmn_inline.errors import TransformError


class Downleveler(Protocol):
    async def transform(self, code: str) -> str:
        ...


class NullDownleveler:
    """Returns the script untouched (``--no-transpile``)."""

    async def transform(self, code: str) -> str:
        return code


def default_command() -> List[str]:
    esbuild = shutil.which("esbuild")
    if esbuild:
        return [esbuild]
    npx = shutil.which("npx")
    if npx:
        return [npx, "--yes", "esbuild"]
    raise TransformError("esbuild not found on PATH (install it with 'npm install -g esbuild')")


class EsbuildDownleveler:
    def __init__(self, targets: Iterable[str], command: Optional[Sequence[str]] = None) -> None:
        self.targets = tuple(targets)
        if not self.targets:
            raise ValueError("at least one target is required")
        self.command = list(command) if command else None

    def arguments(self) -> List[str]:
        return [
            "--loader=js",
            f"--target={','.join(self.targets)}",
            "--legal-comments=inline",
            "--charset=utf8",
            "--log-level=error",
        ]

    async def transform(self, code: str) -> str:
        command = self.command or default_command()
        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                *self.arguments(),
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise TransformError(f"could not start {command[0]}: {exc}") from exc
        stdout, stderr = await proc.communicate(code.encode("utf-8"))
        if proc.returncode != 0:
            raise TransformError(
                f"{command[0]} exited with status {proc.returncode}",
                stderr.decode("utf-8", errors="replace"),
            )
        return stdout.decode("utf-8")
