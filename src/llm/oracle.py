"""
Oracle interface used by the orchestrator, independent of any SDK.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


@dataclass(frozen=True)
class ToolInvocation:
    """One tool call requested by the oracle."""

    name: str
    arguments: Dict[str, Any]
    call_id: str


@dataclass
class OracleReply:
    """Decision-phase reply: free text, tool invocations, or both empty."""

    content: Optional[str] = None
    invocations: List[ToolInvocation] = field(default_factory=list)

    @property
    def first_invocation(self) -> Optional[ToolInvocation]:
        return self.invocations[0] if self.invocations else None


class Oracle(Protocol):
    """Two-call contract: decide which tool (if any), then synthesize the answer."""

    def decide(
        self,
        system_prompt: str,
        query: str,
        tools: List[Dict[str, Any]],
    ) -> OracleReply:
        ...

    def synthesize(
        self,
        system_prompt: str,
        query: str,
        invocation: ToolInvocation,
        result: Dict[str, Any],
    ) -> Optional[str]:
        ...
