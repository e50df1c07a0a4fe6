"""
Adapter base — the protocol contract between services and the tool.

Services only talk to winget through this protocol, never by calling
subprocess directly. That keeps the parser and the orchestrators
testable against captured output with a mock adapter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from wingetkit.core.models.receipt import Receipt


class ExecutionContext(BaseModel):
    """Everything an adapter needs to run one invocation.

    ``structured`` marks calls whose output is JSON rather than a
    human-formatted table.
    """

    args: list[str] = Field(default_factory=list)
    structured: bool = False

    @property
    def command(self) -> str:
        """The sub-command (first positional argument), e.g. ``search``."""
        return self.args[0] if self.args else ""


class Adapter(ABC):
    """Abstract base class for tool adapters.

    Adapters perform external side effects and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'winget', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying tool can be found.

        Should be fast and never raise.
        """

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Validate that the invocation can be executed.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Run the tool and return a receipt.

        MUST never raise exceptions. All failures are captured
        in the Receipt with status='failed'.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
