"""
Mock adapter — stands in for winget in tests.

Responses are keyed by sub-command (``search``, ``list``, ``install``,
...). Every context the mock receives is logged so tests can assert
which commands ran and with which arguments.
"""

from __future__ import annotations

from wingetkit.adapters.base import Adapter, ExecutionContext
from wingetkit.core.models.receipt import Receipt


class MockAdapter(Adapter):
    """Universal mock adapter for testing.

    By default, returns an empty successful output for everything.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_output: str = "",
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    @property
    def commands(self) -> list[str]:
        """Sub-commands received, in call order."""
        return [ctx.command for ctx in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def set_output(self, command: str, output: str, return_code: int = 0) -> None:
        """Make ``command`` succeed with the given stdout."""
        self._responses[command] = Receipt.success(
            adapter=self._name,
            command=command,
            output=output,
            return_code=return_code,
        )

    def set_failure(
        self,
        command: str,
        error: str = "Mock failure",
        return_code: int = 1,
    ) -> None:
        """Configure ``command`` to fail."""
        self._responses[command] = Receipt.failure(
            adapter=self._name,
            command=command,
            error=error,
            return_code=return_code,
        )

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._call_log.append(context)

        if not self._available:
            return Receipt.failure(
                adapter=self._name,
                command=context.command,
                error="winget executable not found: mock",
            )

        if context.command in self._responses:
            return self._responses[context.command]

        return Receipt.success(
            adapter=self._name,
            command=context.command,
            output=self._default_output,
            return_code=0,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear all configured responses and call history."""
        self._responses.clear()
        self._call_log.clear()
