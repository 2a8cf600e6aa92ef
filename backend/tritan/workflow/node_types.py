"""
Node Type Catalog — the closed set of node kinds and LLM providers.

Each kind carries the palette defaults (label, icon, color) that
``GraphStore.add_node`` stamps onto a freshly placed node, plus the
output ports a node of that kind exposes to edges.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class NodeKind(str, Enum):
    """Closed category of a workflow node."""
    TRIGGER = "trigger"
    ACTION = "action"
    CONDITION = "condition"
    LOOP = "loop"
    LLM = "llm"
    HTTP = "http"
    CODE = "code"
    TRANSFORM = "transform"


@dataclass(frozen=True)
class OutputPort:
    """A named output handle on a node."""
    id: str
    label: str = ""


DEFAULT_PORT = OutputPort(id="default", label="Output")


@dataclass(frozen=True)
class NodeTypeSpec:
    """Palette defaults and port layout for one node kind."""
    kind: NodeKind
    label: str
    color: str
    icon: str
    description: str
    output_ports: Tuple[OutputPort, ...] = (DEFAULT_PORT,)

    @property
    def has_named_outputs(self) -> bool:
        return any(p.id != DEFAULT_PORT.id for p in self.output_ports)


NODE_TYPES: Dict[NodeKind, NodeTypeSpec] = {
    NodeKind.TRIGGER: NodeTypeSpec(
        NodeKind.TRIGGER, "Trigger", "#22c55e", "⚡", "Start your workflow",
    ),
    NodeKind.ACTION: NodeTypeSpec(
        NodeKind.ACTION, "Action", "#6366f1", "▶️", "Perform an action",
    ),
    NodeKind.CONDITION: NodeTypeSpec(
        NodeKind.CONDITION, "Condition", "#f59e0b", "🔀", "Branch based on condition",
        output_ports=(OutputPort("true", "True"), OutputPort("false", "False")),
    ),
    NodeKind.LOOP: NodeTypeSpec(
        NodeKind.LOOP, "Loop", "#8b5cf6", "🔄", "Iterate over items",
    ),
    NodeKind.LLM: NodeTypeSpec(
        NodeKind.LLM, "LLM", "#ec4899", "🤖", "AI/LLM processing",
    ),
    NodeKind.HTTP: NodeTypeSpec(
        NodeKind.HTTP, "HTTP", "#3b82f6", "🌐", "Make HTTP requests",
    ),
    NodeKind.CODE: NodeTypeSpec(
        NodeKind.CODE, "Code", "#14b8a6", "💻", "Run custom code",
    ),
    NodeKind.TRANSFORM: NodeTypeSpec(
        NodeKind.TRANSFORM, "Transform", "#f97316", "🔧", "Transform data",
    ),
}


def get_node_type(kind: NodeKind | str) -> NodeTypeSpec:
    """Look up a kind's spec. Raises ``ValueError`` for unknown kinds."""
    return NODE_TYPES[NodeKind(kind)]


# ============================================================================
# LLM providers
# ============================================================================


@dataclass(frozen=True)
class LLMProvider:
    name: str
    models: List[str] = field(default_factory=list)


LLM_PROVIDERS: Dict[str, LLMProvider] = {
    "groq": LLMProvider(
        "Groq",
        ["llama-3.3-70b-versatile", "llama-3.1-8b-instant", "mixtral-8x7b-32768"],
    ),
    "openrouter": LLMProvider(
        "OpenRouter",
        ["anthropic/claude-3.5-sonnet", "openai/gpt-4o", "google/gemini-2.0-flash-exp:free"],
    ),
    "cerebras": LLMProvider("Cerebras", ["llama3.1-8b", "llama3.1-70b"]),
    "gemini": LLMProvider("Gemini", ["gemini-2.0-flash-exp", "gemini-1.5-pro"]),
}

DEFAULT_LLM_PROVIDER = "groq"
DEFAULT_LLM_MODEL = "llama-3.3-70b-versatile"
DEFAULT_TEMPERATURE = 0.7


def models_for_provider(provider: Optional[str]) -> List[str]:
    """Models offered by a provider (empty for unknown providers)."""
    spec = LLM_PROVIDERS.get(provider or "")
    return list(spec.models) if spec else []


def is_known_model(provider: Optional[str], model: Optional[str]) -> bool:
    """Whether ``model`` belongs to ``provider``'s list.

    Advisory only: stores accept any combination and leave the
    verdict to validation.
    """
    return model in models_for_provider(provider)
