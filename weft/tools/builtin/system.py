"""System tools — read, write, bash, glob, grep."""

from __future__ import annotations

import asyncio
import fnmatch
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from ...errors import HookError
from ...hooks import HookData, HookPoint
from ...infra.logging import get_logger
from ...types import ToolResult
from ..base import BaseTool
from ..executor import DENIED_TEMPLATE

if TYPE_CHECKING:
    from ...agent.context import RunScope

logger = get_logger(__name__)

MAX_FILES_PER_READ = 8
DEFAULT_BASH_TIMEOUT_MS = 120_000
KILL_GRACE_SECONDS = 2.0


# -- read --


class FileReadRequest(BaseModel):
    file_path: str
    from_: int | None = Field(default=None, alias="from", ge=1)
    to: int | None = Field(default=None, ge=1)


class ReadParams(BaseModel):
    files: list[FileReadRequest]


class ReadTool(BaseTool):
    name = "read"
    description = (
        f"Read contents of one or more files (max {MAX_FILES_PER_READ} files per call).\n\n"
        "Supports reading entire files or specific line ranges.\n\n"
        "Examples:\n"
        '- Read entire file: {"files": [{"file_path": "config.yaml"}]}\n'
        '- Read lines 10-20: {"files": [{"file_path": "main.py", "from": 10, "to": 20}]}\n'
        '- Read multiple files: {"files": [{"file_path": "a.txt"}, {"file_path": "b.txt"}]}'
    )
    args_schema = ReadParams

    def parameters(self) -> dict:
        schema = ReadParams.model_json_schema(by_alias=True)
        schema.pop("title", None)
        return schema

    def best_practices(self) -> str:
        return (
            "**Read Tool Best Practices**:\n\n"
            "1. **Use line ranges for large files** - specify 'from' and 'to' to read only "
            "the relevant section\n"
            "2. **Read related files together** - batch up to "
            f"{MAX_FILES_PER_READ} files in one call\n"
            "3. **Read files before modifying** - always read a file before writing it"
        )

    async def run(self, scope: RunScope, params: ReadParams) -> ToolResult:
        files = params.files
        if not files:
            return ToolResult.fail("at least one file must be specified")
        if len(files) > MAX_FILES_PER_READ:
            return ToolResult.fail(
                f"too many files requested (max {MAX_FILES_PER_READ}, got {len(files)})"
            )
        for i, req in enumerate(files, 1):
            if not req.file_path.strip():
                return ToolResult.fail(f"file #{i}: file_path cannot be empty")
            if req.from_ and req.to and req.from_ > req.to:
                return ToolResult.fail(
                    f"file #{i} ({req.file_path}): invalid line range: "
                    f"from ({req.from_}) > to ({req.to})"
                )

        parts: list[str] = []
        total_lines = 0
        for i, req in enumerate(files, 1):
            try:
                content, lines = await asyncio.to_thread(_read_range, req)
            except (OSError, ValueError) as e:
                return ToolResult.fail(f"file #{i} ({req.file_path}): {e}")
            total_lines += lines

            ranged = req.from_ is not None or req.to is not None
            span = f"{req.from_ or 1}-{req.to or 'end'}, returned {lines} lines"
            if len(files) > 1:
                header = f"=== File {i}/{len(files)}: {req.file_path}"
                parts.append(header + (f" (lines {span}) ===" if ranged else " ==="))
            elif ranged:
                parts.append(f"File: {req.file_path} (lines {span})")
            parts.append(content)
            if i < len(files):
                parts.append("")

        return ToolResult.ok("\n".join(parts), file_count=len(files), total_lines=total_lines)


def _read_range(req: FileReadRequest) -> tuple[str, int]:
    text = Path(req.file_path).read_text(encoding="utf-8", errors="replace")
    if req.from_ is None and req.to is None:
        return text, len(text.splitlines())

    lines = text.splitlines()
    start = (req.from_ or 1) - 1
    end = req.to if req.to is not None else len(lines)
    picked = lines[start:end]
    if not picked:
        raise ValueError(f"no lines in specified range (file has {len(lines)} lines)")
    return "\n".join(picked), len(picked)


# -- write --


class WriteParams(BaseModel):
    file_path: str
    content: str


class WriteTool(BaseTool):
    name = "write"
    description = "Write content to a file (creates or overwrites)"
    args_schema = WriteParams

    async def run(self, scope: RunScope, params: WriteParams) -> ToolResult:
        path = Path(params.file_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return ToolResult.fail(f"failed to create directory: {e}")
        try:
            await asyncio.to_thread(path.write_text, params.content, encoding="utf-8")
        except OSError as e:
            return ToolResult.fail(f"failed to write file: {e}")
        size = len(params.content.encode())
        return ToolResult.ok(f"Successfully wrote {size} bytes to {params.file_path}")


# -- bash --


class BashParams(BaseModel):
    command: str
    timeout: int | None = Field(default=None, description="Timeout in milliseconds (default: 120000)")


class BashTool(BaseTool):
    """Runs ``bash -c``; consults the bash hook points around the command."""

    name = "bash"
    description = "Execute a bash command"
    args_schema = BashParams

    def __init__(self, grace_period: float = KILL_GRACE_SECONDS) -> None:
        self.grace_period = grace_period

    async def run(self, scope: RunScope, params: BashParams) -> ToolResult:
        command = params.command
        if scope.hooks is not None:
            data = HookData(HookPoint.BEFORE_BASH_COMMAND, self.name, {"command": command})
            try:
                feedback = await scope.hooks.trigger(data)
            except HookError as e:
                return ToolResult.fail(f"hook error: {e}")
            if not feedback.allow:
                denied = DENIED_TEMPLATE.format(reason=feedback.message)
                return ToolResult(success=False, output=denied, error=denied)
            if isinstance(feedback.modified, str):
                command = feedback.modified

        timeout = (params.timeout or DEFAULT_BASH_TIMEOUT_MS) / 1000
        proc = await asyncio.create_subprocess_exec(
            "bash", "-c", command,
            stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.STDOUT,
        )
        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            await self._shutdown(proc)
            return ToolResult.fail(f"command timed out after {timeout:g}s")
        except asyncio.CancelledError:
            await self._shutdown(proc)
            raise

        output = stdout.decode(errors="replace")
        if proc.returncode == 0:
            result = ToolResult.ok(output, exit_code=0)
        else:
            result = ToolResult(
                success=False, output=output,
                error=f"exit status {proc.returncode}", data={"exit_code": proc.returncode},
            )

        if scope.hooks is not None:
            data = HookData(
                HookPoint.AFTER_BASH_COMMAND, self.name,
                {"command": command, "exit_code": proc.returncode, "output": output},
            )
            try:
                await scope.hooks.trigger(data)
            except HookError as e:
                logger.warning("after_bash_hook_failed", error=str(e))
        return result

    async def _shutdown(self, proc: asyncio.subprocess.Process) -> None:
        if proc.returncode is not None:
            return
        proc.terminate()
        try:
            await asyncio.wait_for(proc.wait(), timeout=self.grace_period)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()


# -- glob --


class GlobParams(BaseModel):
    pattern: str = Field(description="Glob pattern (e.g., '*.py', 'src/**/*.ts')")
    path: str = Field(default=".", description="Base path to search (default: current directory)")


class GlobTool(BaseTool):
    name = "glob"
    description = "Find files matching a glob pattern"
    args_schema = GlobParams

    def best_practices(self) -> str:
        return (
            "**Glob Tool Best Practices**:\n\n"
            '1. **Use specific patterns** - prefer {"pattern": "**/*.py"} over {"pattern": "**"}\n'
            '2. **Scope with path** - {"pattern": "**/*.ts", "path": "src"} searches only src/\n'
            '3. **Check the count** - no match returns "No files found" with count = 0'
        )

    async def run(self, scope: RunScope, params: GlobParams) -> ToolResult:
        try:
            matches = await asyncio.to_thread(_glob, params.path or ".", params.pattern)
        except ValueError as e:
            return ToolResult.fail(f"glob failed: {e}")
        if not matches:
            return ToolResult.ok("No files found", count=0, files=[])
        return ToolResult.ok("\n".join(matches), count=len(matches), files=matches)


def _glob(base: str, pattern: str) -> list[str]:
    if "**" not in pattern:
        return sorted(str(p) for p in Path(base).glob(pattern))

    parts = pattern.split("**")
    if len(parts) != 2:
        raise ValueError(f"invalid ** pattern: {pattern} (only one ** supported)")
    prefix, suffix = parts[0].strip("/"), parts[1].strip("/")
    root = os.path.join(base, prefix) if prefix else base

    matches: list[str] = []
    for dirpath, _, filenames in os.walk(root):
        for filename in filenames:
            path = os.path.join(dirpath, filename)
            rel = os.path.relpath(path, root)
            if not suffix or fnmatch.fnmatch(filename, suffix) or fnmatch.fnmatch(rel, suffix):
                matches.append(path)
    return sorted(matches)


# -- grep --


class GrepParams(BaseModel):
    pattern: str = Field(description="Regular expression pattern to search for")
    path: str = Field(description="File or directory to search in")
    case_insensitive: bool = False
    file_pattern: str = Field(default="", description="Filter files by pattern (e.g., '*.py')")


class GrepTool(BaseTool):
    name = "grep"
    description = "Search for content in files using regex patterns"
    args_schema = GrepParams

    async def run(self, scope: RunScope, params: GrepParams) -> ToolResult:
        try:
            regex = re.compile(params.pattern, re.IGNORECASE if params.case_insensitive else 0)
        except re.error as e:
            return ToolResult.fail(f"invalid regex pattern: {e}")
        if not os.path.exists(params.path):
            return ToolResult.fail(f"path not found: {params.path}")

        results = await asyncio.to_thread(_grep, params.path, regex, params.file_pattern)
        if not results:
            return ToolResult.ok("No matches found")
        return ToolResult.ok("\n".join(results), count=len(results))


def _grep(path: str, regex: re.Pattern[str], file_pattern: str) -> list[str]:
    if os.path.isfile(path):
        return _search_file(path, regex)

    results: list[str] = []
    for dirpath, dirnames, filenames in os.walk(path):
        dirnames.sort()
        for filename in sorted(filenames):
            if file_pattern and not fnmatch.fnmatch(filename, file_pattern):
                continue
            results.extend(_search_file(os.path.join(dirpath, filename), regex))
    return results


def _search_file(path: str, regex: re.Pattern[str]) -> list[str]:
    try:
        with open(path, "rb") as fh:
            if b"\0" in fh.read(512):
                return []
        with open(path, encoding="utf-8", errors="replace") as fh:
            lines = fh.read().splitlines()
    except OSError:
        return []
    return [f"{path}:{n}:{line}" for n, line in enumerate(lines, 1) if regex.search(line)]
