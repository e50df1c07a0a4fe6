"""
winget adapter — run the winget executable and capture its output.

The binary is looked up on PATH (or taken from ``WINGETKIT_WINGET`` /
settings). A missing binary or a non-zero exit produces a failed
receipt; stdout of a failed run is kept in metadata only.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time

from wingetkit.adapters.base import Adapter, ExecutionContext
from wingetkit.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

# Environment variable that overrides the configured binary location
WINGET_ENV_VAR = "WINGETKIT_WINGET"

# APPINSTALLER_CLI_ERROR_NO_APPLICATIONS_FOUND. winget exits with it when
# a filter matches nothing; stdout then holds the no-results message.
NO_APPLICATIONS_FOUND = 0x8A150014


def _is_no_applications_found(return_code: int) -> bool:
    # Windows reports it unsigned, some shells sign-extend it
    return (return_code & 0xFFFFFFFF) == NO_APPLICATIONS_FOUND


class WingetAdapter(Adapter):
    """Execute winget and capture stdout.

    Args:
        executable: Binary name or path. The ``WINGETKIT_WINGET``
            environment variable wins over it; ``winget`` is the default.
        timeout: Seconds to wait for the process, None to wait forever.
    """

    def __init__(self, executable: str | None = None, timeout: int | None = None):
        self._executable = os.environ.get(WINGET_ENV_VAR) or executable or "winget"
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "winget"

    @property
    def executable(self) -> str:
        return self._executable

    def resolve_executable(self) -> str | None:
        """Full path of the binary, or None if it cannot be found."""
        return shutil.which(self._executable)

    def is_available(self) -> bool:
        return self.resolve_executable() is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if not context.args:
            return False, "Missing winget sub-command"
        if not self.is_available():
            return False, f"winget executable not found: {self._executable}"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        valid, error = self.validate(context)
        if not valid:
            return Receipt.failure(
                adapter=self.name,
                command=context.command,
                error=error,
                metadata={"args": context.args},
            )

        argv = [self.resolve_executable() or self._executable, *context.args]
        logger.debug("Executing: %s", " ".join(argv))
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                command=context.command,
                error=f"winget timed out after {self._timeout}s",
                metadata={"args": context.args},
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                command=context.command,
                error=f"Cannot run {self._executable}: {e}",
                metadata={"args": context.args},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = result.stdout or ""
        stderr = (result.stderr or "").strip()

        if result.returncode == 0 or _is_no_applications_found(result.returncode):
            return Receipt.success(
                adapter=self.name,
                command=context.command,
                output=stdout,
                return_code=result.returncode,
                duration_ms=elapsed_ms,
                metadata={"args": context.args, "stderr": stderr},
            )

        logger.debug("winget %s exited with %d", context.command, result.returncode)
        return Receipt.failure(
            adapter=self.name,
            command=context.command,
            error=stderr or f"winget {context.command} exited with code {result.returncode}",
            return_code=result.returncode,
            duration_ms=elapsed_ms,
            metadata={"args": context.args, "stdout": stdout},
        )
