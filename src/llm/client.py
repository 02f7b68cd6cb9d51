"""
Oracle backed by an OpenAI-compatible chat completions API with tool calling.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from openai import OpenAI, OpenAIError

from src.config import AppConfig
from src.errors import ConfigurationError, OracleError

from .oracle import OracleReply, ToolInvocation

logger = logging.getLogger(__name__)


def _decode_arguments(raw: Optional[str], name: str) -> Dict[str, Any]:
    try:
        args = json.loads(raw or "{}")
    except json.JSONDecodeError as e:
        raise OracleError(f"Invalid arguments for tool '{name}': {e}") from e
    if not isinstance(args, dict):
        raise OracleError(f"Invalid arguments for tool '{name}': expected a JSON object")
    return args


class OpenAIOracle:
    """Chat client that exposes the decide/synthesize oracle contract."""

    def __init__(
        self,
        api_key: str,
        model_name: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        timeout: Optional[float] = None,
        client: Optional[OpenAI] = None,
    ):
        if client is None and not api_key:
            raise ConfigurationError(
                "OpenAI API key is not configured. Please set OPENAI_API_KEY environment variable."
            )
        self.model_name = model_name
        self.temperature = temperature
        self.client = client or OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    def _complete(self, **kwargs: Any):
        try:
            completion = self.client.chat.completions.create(
                model=self.model_name,
                temperature=self.temperature,
                **kwargs,
            )
        except OpenAIError as e:
            raise OracleError(f"OpenAI API error: {e}") from e
        if not completion.choices:
            raise OracleError("No response from OpenAI")
        return completion.choices[0].message

    def decide(
        self,
        system_prompt: str,
        query: str,
        tools: List[Dict[str, Any]],
    ) -> OracleReply:
        """Initial call: the model answers directly or requests a tool."""
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": query},
        ]
        message = self._complete(messages=messages, tools=tools, tool_choice="auto")
        invocations: List[ToolInvocation] = []
        for call in message.tool_calls or []:
            if getattr(call, "type", "function") != "function":
                continue
            try:
                arguments = _decode_arguments(call.function.arguments, call.function.name)
            except OracleError as e:
                # Only the first call is executed; a bad later one is dropped.
                if not invocations:
                    raise
                logger.warning("Ignoring extra tool call %s: %s", call.id, e)
                continue
            invocations.append(
                ToolInvocation(name=call.function.name, arguments=arguments, call_id=call.id)
            )
        return OracleReply(content=message.content, invocations=invocations)

    def synthesize(
        self,
        system_prompt: str,
        query: str,
        invocation: ToolInvocation,
        result: Dict[str, Any],
    ) -> Optional[str]:
        """Follow-up call carrying the tool result, tagged with the same call id."""
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": query},
            {
                "role": "assistant",
                "content": None,
                "tool_calls": [
                    {
                        "id": invocation.call_id,
                        "type": "function",
                        "function": {
                            "name": invocation.name,
                            "arguments": json.dumps(invocation.arguments),
                        },
                    }
                ],
            },
            {
                "role": "tool",
                "tool_call_id": invocation.call_id,
                "content": json.dumps(result),
            },
        ]
        message = self._complete(messages=messages)
        return message.content


def create_oracle(config: AppConfig) -> OpenAIOracle:
    """Create the OpenAI-backed oracle from app configuration."""
    return OpenAIOracle(
        api_key=config.openai_api_key,
        model_name=config.openai_model,
        base_url=config.openai_base_url,
        temperature=config.openai_temperature,
        timeout=config.http_timeout_s,
    )
