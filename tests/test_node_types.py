"""Tests for the node kind and LLM provider catalogs."""

import pytest

from tritan.workflow.node_types import (
    DEFAULT_LLM_MODEL,
    DEFAULT_LLM_PROVIDER,
    LLM_PROVIDERS,
    NODE_TYPES,
    NodeKind,
    get_node_type,
    is_known_model,
    models_for_provider,
)


def test_catalog_covers_every_kind():
    assert set(NODE_TYPES) == set(NodeKind)
    assert [k.value for k in NodeKind] == [
        "trigger", "action", "condition", "loop", "llm", "http", "code", "transform",
    ]


def test_condition_exposes_true_and_false_ports():
    spec = get_node_type("condition")
    assert [p.id for p in spec.output_ports] == ["true", "false"]
    assert spec.has_named_outputs
    assert not get_node_type(NodeKind.ACTION).has_named_outputs


def test_unknown_kind():
    with pytest.raises(ValueError):
        get_node_type("cron")


def test_default_model_belongs_to_default_provider():
    assert is_known_model(DEFAULT_LLM_PROVIDER, DEFAULT_LLM_MODEL)
    assert set(LLM_PROVIDERS) == {"groq", "openrouter", "cerebras", "gemini"}


def test_model_lookup_is_advisory():
    assert models_for_provider("nope") == []
    assert models_for_provider(None) == []
    assert not is_known_model("gemini", "llama3.1-8b")
