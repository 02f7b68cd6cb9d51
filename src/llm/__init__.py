"""
Reasoning oracle: the function-calling chat model behind the assistant.
"""

from .client import OpenAIOracle, create_oracle
from .oracle import Oracle, OracleReply, ToolInvocation

__all__ = ["OpenAIOracle", "Oracle", "OracleReply", "ToolInvocation", "create_oracle"]
