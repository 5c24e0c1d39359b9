"""Tests for the filesystem and shell tools."""

import asyncio
import json
import os
import time

import pytest

from weft.agent import RunScope
from weft.hooks import Feedback, HookManager, HookPoint
from weft.tools.builtin import BashTool, GlobTool, GrepTool, ReadTool, WriteTool


def args(**kwargs):
    return json.dumps(kwargs)


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.go").write_text("package main\nfunc main() {}\n")
    (tmp_path / "src" / "util.go").write_text("package main\nfunc helper() {}\n")
    (tmp_path / "README.md").write_text("line 1\nline 2\nline 3\nline 4\n")
    (tmp_path / "blob.bin").write_bytes(b"func\0\0binary")
    return tmp_path


class TestReadTool:
    async def test_whole_file(self, scope, workspace):
        path = str(workspace / "README.md")
        result = await ReadTool().execute(scope, args(files=[{"file_path": path}]))

        assert result.success
        assert result.output == "line 1\nline 2\nline 3\nline 4\n"
        assert result.data == {"file_count": 1, "total_lines": 4}

    async def test_line_range(self, scope, workspace):
        path = str(workspace / "README.md")
        result = await ReadTool().execute(
            scope, args(files=[{"file_path": path, "from": 2, "to": 3}])
        )

        assert result.output == f"File: {path} (lines 2-3, returned 2 lines)\nline 2\nline 3"

    async def test_multiple_files_get_headers(self, scope, workspace):
        a, b = str(workspace / "src" / "main.go"), str(workspace / "src" / "util.go")
        result = await ReadTool().execute(scope, args(files=[{"file_path": a}, {"file_path": b}]))

        assert f"=== File 1/2: {a} ===" in result.output
        assert f"=== File 2/2: {b} ===" in result.output
        assert result.data["file_count"] == 2

    async def test_inverted_range(self, scope, workspace):
        path = str(workspace / "README.md")
        result = await ReadTool().execute(
            scope, args(files=[{"file_path": path, "from": 3, "to": 1}])
        )
        assert "invalid line range" in result.error

    async def test_too_many_files(self, scope):
        files = [{"file_path": f"f{i}"} for i in range(9)]
        result = await ReadTool().execute(scope, args(files=files))
        assert result.error == "too many files requested (max 8, got 9)"

    async def test_missing_file(self, scope, workspace):
        result = await ReadTool().execute(
            scope, args(files=[{"file_path": str(workspace / "nope.txt")}])
        )
        assert not result.success
        assert result.error.startswith("file #1")

    def test_schema_uses_from_alias(self):
        schema = ReadTool().parameters()
        request = schema["$defs"]["FileReadRequest"]["properties"]
        assert "from" in request
        assert "from_" not in request


class TestWriteTool:
    async def test_creates_parents(self, scope, tmp_path):
        target = tmp_path / "deep" / "dir" / "out.txt"
        result = await WriteTool().execute(scope, args(file_path=str(target), content="héllo"))

        assert result.success
        assert target.read_text(encoding="utf-8") == "héllo"
        assert result.output == f"Successfully wrote 6 bytes to {target}"


class TestGlobTool:
    async def test_simple_pattern(self, scope, workspace):
        result = await GlobTool().execute(scope, args(pattern="*.md", path=str(workspace)))
        assert result.output == str(workspace / "README.md")
        assert result.data["count"] == 1

    async def test_recursive_pattern(self, scope, workspace):
        result = await GlobTool().execute(scope, args(pattern="**/*.go", path=str(workspace)))
        assert result.data["files"] == [
            str(workspace / "src" / "main.go"),
            str(workspace / "src" / "util.go"),
        ]

    async def test_no_match(self, scope, workspace):
        result = await GlobTool().execute(scope, args(pattern="*.rs", path=str(workspace)))
        assert result.success
        assert result.output == "No files found"
        assert result.data == {"count": 0, "files": []}

    async def test_double_recursive_rejected(self, scope, workspace):
        result = await GlobTool().execute(scope, args(pattern="**/a/**/*.go", path=str(workspace)))
        assert result.error.startswith("glob failed")


class TestGrepTool:
    async def test_matches_with_line_numbers(self, scope, workspace):
        result = await GrepTool().execute(
            scope, args(pattern=r"func \w+", path=str(workspace), file_pattern="*.go")
        )
        assert result.output.splitlines() == [
            f"{workspace / 'src' / 'main.go'}:2:func main() {{}}",
            f"{workspace / 'src' / 'util.go'}:2:func helper() {{}}",
        ]

    async def test_binary_files_skipped(self, scope, workspace):
        result = await GrepTool().execute(scope, args(pattern="binary", path=str(workspace)))
        assert result.output == "No matches found"

    async def test_case_insensitive(self, scope, workspace):
        result = await GrepTool().execute(
            scope,
            args(pattern="LINE 3", path=str(workspace / "README.md"), case_insensitive=True),
        )
        assert result.output.endswith(":3:line 3")

    async def test_invalid_regex(self, scope, workspace):
        result = await GrepTool().execute(scope, args(pattern="(", path=str(workspace)))
        assert result.error.startswith("invalid regex pattern:")

    async def test_missing_path(self, scope, workspace):
        missing = str(workspace / "gone")
        result = await GrepTool().execute(scope, args(pattern="x", path=missing))
        assert result.error == f"path not found: {missing}"


class CommandHook:
    def __init__(self, feedback):
        self.feedback = feedback

    def name(self):
        return "command_hook"

    def points(self):
        return [HookPoint.BEFORE_BASH_COMMAND]

    def priority(self):
        return 100

    def handle(self, data):
        return self.feedback


def scope_with(bus, feedback):
    hooks = HookManager()
    hooks.register(CommandHook(feedback))
    return RunScope(events=bus, hooks=hooks)


class TestBashTool:
    async def test_captures_output(self, scope):
        result = await BashTool().execute(scope, args(command="echo hello; echo oops >&2"))
        assert result.success
        assert result.output == "hello\noops\n"
        assert result.data["exit_code"] == 0

    async def test_nonzero_exit(self, scope):
        result = await BashTool().execute(scope, args(command="echo partial; exit 3"))
        assert not result.success
        assert result.output == "partial\n"
        assert result.error == "exit status 3"

    async def test_timeout(self, scope):
        result = await BashTool(grace_period=0.5).execute(
            scope, args(command="sleep 5", timeout=100)
        )
        assert result.error == "command timed out after 0.1s"

    async def test_denied_by_hook(self, bus):
        result = await BashTool().execute(
            scope_with(bus, Feedback.denied("not today")), args(command="echo hi")
        )
        assert not result.success
        assert "Reason: not today" in result.output

    async def test_command_rewritten_by_hook(self, bus):
        result = await BashTool().execute(
            scope_with(bus, Feedback.allowed(modified="echo safer")), args(command="echo risky")
        )
        assert result.output == "safer\n"


async def wait_for_pid(pidfile):
    for _ in range(200):
        if pidfile.exists() and pidfile.read_text().strip():
            return int(pidfile.read_text())
        await asyncio.sleep(0.01)
    raise AssertionError("command never started")


def assert_gone(pid):
    with pytest.raises(ProcessLookupError):
        os.kill(pid, 0)


class TestBashCancellation:
    async def test_cancel_terminates_process(self, scope, tmp_path):
        pidfile = tmp_path / "pid"
        task = asyncio.create_task(
            BashTool(grace_period=0.5).execute(
                scope, args(command=f"echo $$ > {pidfile}; exec sleep 30")
            )
        )
        pid = await wait_for_pid(pidfile)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert_gone(pid)

    async def test_cancel_kills_process_ignoring_sigterm(self, scope, tmp_path):
        pidfile = tmp_path / "pid"
        command = f"trap '' TERM; echo $$ > {pidfile}; while true; do sleep 0.1; done"
        task = asyncio.create_task(
            BashTool(grace_period=0.2).execute(scope, args(command=command))
        )
        pid = await wait_for_pid(pidfile)

        started = time.monotonic()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert time.monotonic() - started >= 0.2
        assert_gone(pid)
