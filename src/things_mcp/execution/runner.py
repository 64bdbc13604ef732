"""Runs ScriptPrograms through osascript."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Protocol

from things_mcp.config import Settings
from things_mcp.execution.result_types import ExecutionResult
from things_mcp.scripting.builder import ScriptProgram

logger = logging.getLogger(__name__)


class ScriptRunner(Protocol):
    """Anything that can execute a ScriptProgram against Things3."""

    async def run(self, program: ScriptProgram) -> ExecutionResult: ...


class OsascriptRunner:
    """Executes programs with the system AppleScript interpreter.

    The program is written to the interpreter's stdin rather than passed on
    the command line, and no shell is involved, so quoting in the program
    text has no meaning to anything but AppleScript itself.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    async def run(self, program: ScriptProgram) -> ExecutionResult:
        """Run ``program`` and wait for it within the configured timeout.

        Args:
            program: The script to execute.

        Returns:
            Success with trimmed stdout, failure with the interpreter's
            diagnostic text, or a timeout result.
        """
        timeout = self.settings.timeout_seconds
        logger.debug("Running %s script:\n%s", program.operation, program.source)
        start_time = time.monotonic()

        try:
            process = await asyncio.create_subprocess_exec(
                self.settings.osascript_path,
                "-",
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.warning(
                "Could not start %s for %s: %s",
                self.settings.osascript_path,
                program.operation,
                e,
            )
            return ExecutionResult.failure(
                f"Could not start {self.settings.osascript_path}: {e}"
            )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(program.source.encode("utf-8")),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            await self._terminate(process)
            duration_ms = self._elapsed_ms(start_time)
            logger.warning(
                "%s script timed out after %s seconds", program.operation, timeout
            )
            return ExecutionResult.timeout(timeout, duration_ms=duration_ms)
        except asyncio.CancelledError:
            await self._terminate(process)
            raise

        duration_ms = self._elapsed_ms(start_time)
        output = stdout.decode("utf-8", errors="replace").strip()
        error_text = stderr.decode("utf-8", errors="replace").strip()

        if process.returncode == 0:
            logger.debug("%s finished in %d ms", program.operation, duration_ms)
            return ExecutionResult.success(output, duration_ms=duration_ms)

        message = (
            error_text or output or f"osascript exited with status {process.returncode}"
        )
        logger.warning(
            "%s failed with exit code %s: %s",
            program.operation,
            process.returncode,
            message,
        )
        return ExecutionResult.failure(
            message, returncode=process.returncode, duration_ms=duration_ms
        )

    @staticmethod
    async def _terminate(process: asyncio.subprocess.Process) -> None:
        """Kill a still-running interpreter and reap it."""
        if process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.monotonic() - start_time) * 1000)
