"""
Tests for the orchestrator: tool registry, dispatch, and the decide/synthesize flow.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from src.catalog import CatalogEntry, ProductIndex
from src.currency import CurrencyConverter, ExchangeRateSnapshot, RateCache
from src.errors import (
    EmptyOracleResponseError,
    InvalidAmountError,
    OracleError,
    QueryProcessingError,
    UnknownCurrencyError,
    UnknownToolError,
    ValidationError,
)
from src.llm import OracleReply, ToolInvocation
from src.orchestrator import (
    CONVERT_CURRENCIES,
    SEARCH_PRODUCTS,
    CurrencyConversionResult,
    ProductSearchResult,
    ShoppingAgent,
    ToolRegistry,
)
from src.orchestrator.prompts import FALLBACK_ANSWER


class ScriptedOracle:
    """Oracle stand-in that replays a fixed decision and synthesis."""

    def __init__(self, reply: OracleReply, final: str | None = "Here you go!"):
        self.reply = reply
        self.final = final
        self.decide_calls: list[tuple] = []
        self.synthesize_calls: list[tuple] = []

    def decide(self, system_prompt, query, tools):
        self.decide_calls.append((system_prompt, query, tools))
        return self.reply

    def synthesize(self, system_prompt, query, invocation, result):
        self.synthesize_calls.append((system_prompt, query, invocation, result))
        return self.final


class _StubProvider:
    def __init__(self):
        self.calls = 0

    def fetch(self) -> ExchangeRateSnapshot:
        self.calls += 1
        return ExchangeRateSnapshot(rates={"USD": 1.0, "EUR": 0.90, "CAD": 1.36})


@pytest.fixture
def product_index() -> ProductIndex:
    return ProductIndex(
        [
            CatalogEntry(
                title="iPhone 14",
                search_text="Apple smartphone with dual camera",
                url="https://store.test/iphone-14",
                image_url="https://store.test/iphone-14.jpg",
                category="Technology",
                price="799.0 USD",
                variants="128GB, 256GB",
            ),
            CatalogEntry(title="Garden Hose", search_text="Hose for watering plants", category="Garden"),
        ]
    )


@pytest.fixture
def provider() -> _StubProvider:
    return _StubProvider()


@pytest.fixture
def converter(provider) -> CurrencyConverter:
    return CurrencyConverter(RateCache(provider))


def _invocation(name: str, **arguments) -> ToolInvocation:
    return ToolInvocation(name=name, arguments=arguments, call_id="call_1")


# --- Tool registry ---


def test_registry_declares_both_tools():
    registry = ToolRegistry()
    decls = registry.declarations()
    assert [d["function"]["name"] for d in decls] == [SEARCH_PRODUCTS, CONVERT_CURRENCIES]
    assert all(d["type"] == "function" for d in decls)
    convert = decls[1]["function"]["parameters"]
    assert convert["required"] == ["amount", "fromCurrency", "toCurrency"]
    assert convert["properties"]["amount"]["type"] == "number"
    assert SEARCH_PRODUCTS in registry
    assert "deleteEverything" not in registry


def test_registry_returns_copies():
    registry = ToolRegistry()
    registry.declarations()[0]["function"]["name"] = "mutated"
    assert registry.declarations()[0]["function"]["name"] == SEARCH_PRODUCTS


# --- Direct answers ---


def test_direct_content_returned_unchanged(product_index, converter, provider):
    """No tool call: content comes back verbatim with no search or conversion."""
    oracle = ScriptedOracle(OracleReply(content="Hello! How can I help?"))
    index = MagicMock(wraps=product_index)
    agent = ShoppingAgent(oracle=oracle, product_index=index, converter=converter)
    assert agent.answer("hi") == "Hello! How can I help?"
    index.search.assert_not_called()
    assert provider.calls == 0
    assert oracle.synthesize_calls == []


def test_direct_empty_content_uses_fallback(product_index, converter):
    oracle = ScriptedOracle(OracleReply(content=""))
    agent = ShoppingAgent(oracle=oracle, product_index=product_index, converter=converter)
    assert agent.answer("hi") == FALLBACK_ANSWER


def test_decide_receives_query_and_tools(product_index, converter):
    oracle = ScriptedOracle(OracleReply(content="ok"))
    agent = ShoppingAgent(oracle=oracle, product_index=product_index, converter=converter)
    agent.answer("Do you sell phones?")
    _, query, tools = oracle.decide_calls[0]
    assert query == "Do you sell phones?"
    assert len(tools) == 2


# --- Product search ---


def test_search_tool_flow(product_index, converter):
    """searchProducts result is serialized to the synthesis call with the same call id."""
    invocation = _invocation(SEARCH_PRODUCTS, query="phone")
    oracle = ScriptedOracle(OracleReply(invocations=[invocation]), final="I found the iPhone 14.")
    agent = ShoppingAgent(oracle=oracle, product_index=product_index, converter=converter)

    assert agent.answer("I am looking for a phone") == "I found the iPhone 14."

    _, query, passed_invocation, result = oracle.synthesize_calls[0]
    assert query == "I am looking for a phone"
    assert passed_invocation.call_id == "call_1"
    assert result["count"] == 1
    assert result["products"][0] == {
        "title": "iPhone 14",
        "price": "799.0 USD",
        "url": "https://store.test/iphone-14",
        "imageUrl": "https://store.test/iphone-14.jpg",
        "category": "Technology",
        "variants": "128GB, 256GB",
    }
    assert "Garden Hose" not in json.dumps(result)


def test_search_falls_back_to_user_query(product_index, converter):
    oracle = ScriptedOracle(OracleReply(invocations=[_invocation(SEARCH_PRODUCTS)]))
    agent = ShoppingAgent(oracle=oracle, product_index=product_index, converter=converter)
    result = agent.dispatch(_invocation(SEARCH_PRODUCTS), "iphone")
    assert isinstance(result, ProductSearchResult)
    assert [p.title for p in result.products] == ["iPhone 14"]


def test_search_no_matches_still_synthesizes(product_index, converter):
    oracle = ScriptedOracle(OracleReply(invocations=[_invocation(SEARCH_PRODUCTS, query="zzz")]))
    agent = ShoppingAgent(oracle=oracle, product_index=product_index, converter=converter)
    assert agent.answer("zzz") == "Here you go!"
    assert oracle.synthesize_calls[0][3] == {"products": [], "count": 0}


# --- Currency conversion ---


def test_convert_tool_flow(product_index, converter):
    invocation = _invocation(CONVERT_CURRENCIES, amount=100, fromCurrency="eur", toCurrency="USD")
    oracle = ScriptedOracle(OracleReply(invocations=[invocation]), final="100 EUR is 111.11 USD.")
    agent = ShoppingAgent(oracle=oracle, product_index=product_index, converter=converter)

    assert agent.answer("How much is 100 euros in dollars?") == "100 EUR is 111.11 USD."
    assert oracle.synthesize_calls[0][3] == {
        "originalAmount": 100,
        "fromCurrency": "EUR",
        "toCurrency": "USD",
        "convertedAmount": 111.11,
    }


def test_convert_numeric_string_amount(product_index, converter):
    agent = ShoppingAgent(oracle=ScriptedOracle(OracleReply()), product_index=product_index, converter=converter)
    result = agent.dispatch(
        _invocation(CONVERT_CURRENCIES, amount="50", fromCurrency="USD", toCurrency="CAD"), "q"
    )
    assert isinstance(result, CurrencyConversionResult)
    assert result.converted_amount == 68.0


def test_convert_negative_amount_fails_before_rate_lookup(product_index, converter, provider):
    invocation = _invocation(CONVERT_CURRENCIES, amount=-5, fromCurrency="EUR", toCurrency="USD")
    oracle = ScriptedOracle(OracleReply(invocations=[invocation]))
    agent = ShoppingAgent(oracle=oracle, product_index=product_index, converter=converter)
    with pytest.raises(QueryProcessingError) as exc_info:
        agent.answer("convert -5 euros")
    assert isinstance(exc_info.value.cause, InvalidAmountError)
    assert provider.calls == 0
    assert oracle.synthesize_calls == []


@pytest.mark.parametrize(
    "arguments",
    [
        {"fromCurrency": "EUR", "toCurrency": "USD"},
        {"amount": "lots", "fromCurrency": "EUR", "toCurrency": "USD"},
        {"amount": True, "fromCurrency": "EUR", "toCurrency": "USD"},
        {"amount": 10, "toCurrency": "USD"},
        {"amount": 10, "fromCurrency": "EUR", "toCurrency": ""},
    ],
)
def test_convert_malformed_arguments(product_index, converter, arguments):
    agent = ShoppingAgent(oracle=ScriptedOracle(OracleReply()), product_index=product_index, converter=converter)
    with pytest.raises(ValidationError):
        agent.dispatch(ToolInvocation(name=CONVERT_CURRENCIES, arguments=arguments, call_id="c"), "q")


def test_convert_unknown_currency_wrapped(product_index, converter):
    invocation = _invocation(CONVERT_CURRENCIES, amount=1, fromCurrency="XYZ", toCurrency="USD")
    agent = ShoppingAgent(
        oracle=ScriptedOracle(OracleReply(invocations=[invocation])),
        product_index=product_index,
        converter=converter,
    )
    with pytest.raises(QueryProcessingError, match="XYZ") as exc_info:
        agent.answer("convert 1 XYZ")
    assert isinstance(exc_info.value.cause, UnknownCurrencyError)


# --- Failures ---


def test_unknown_tool_wrapped(product_index, converter):
    oracle = ScriptedOracle(OracleReply(invocations=[_invocation("orderPizza")]))
    agent = ShoppingAgent(oracle=oracle, product_index=product_index, converter=converter)
    with pytest.raises(QueryProcessingError, match="Unknown function: orderPizza") as exc_info:
        agent.answer("pizza please")
    assert isinstance(exc_info.value.cause, UnknownToolError)
    assert str(exc_info.value).startswith("Failed to process query: ")


def test_empty_synthesis_raises(product_index, converter):
    oracle = ScriptedOracle(OracleReply(invocations=[_invocation(SEARCH_PRODUCTS, query="phone")]), final="")
    agent = ShoppingAgent(oracle=oracle, product_index=product_index, converter=converter)
    with pytest.raises(QueryProcessingError) as exc_info:
        agent.answer("phone")
    assert isinstance(exc_info.value.cause, EmptyOracleResponseError)


def test_oracle_error_wrapped(product_index, converter):
    oracle = MagicMock()
    oracle.decide.side_effect = OracleError("OpenAI API error: rate limited")
    agent = ShoppingAgent(oracle=oracle, product_index=product_index, converter=converter)
    with pytest.raises(QueryProcessingError, match="rate limited"):
        agent.answer("phone")
    oracle.synthesize.assert_not_called()


@pytest.mark.parametrize("query", ["", "   ", "\n\t"])
def test_empty_query_fails_fast(product_index, converter, query):
    oracle = MagicMock()
    agent = ShoppingAgent(oracle=oracle, product_index=product_index, converter=converter)
    with pytest.raises(ValidationError):
        agent.process_query(query)
    oracle.decide.assert_not_called()


def test_only_first_invocation_is_executed(product_index, converter, provider):
    """Extra tool calls in one reply are ignored; only the first runs."""
    reply = OracleReply(
        invocations=[
            _invocation(SEARCH_PRODUCTS, query="phone"),
            ToolInvocation(
                name=CONVERT_CURRENCIES,
                arguments={"amount": 1, "fromCurrency": "EUR", "toCurrency": "USD"},
                call_id="call_2",
            ),
        ]
    )
    oracle = ScriptedOracle(reply)
    agent = ShoppingAgent(oracle=oracle, product_index=product_index, converter=converter)
    agent.answer("phone and euros")
    assert len(oracle.synthesize_calls) == 1
    assert oracle.synthesize_calls[0][2].name == SEARCH_PRODUCTS
    assert provider.calls == 0
