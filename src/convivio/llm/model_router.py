"""
Convivio - Model Router.

Selects the model for a provider and tier, plus per-task token ceilings.

Tiers:
- capable: full menus, single dish / wine regeneration, backend proposals,
  dinner notes
- cheap: short free text (invite messages)
"""

from typing import Literal, TypedDict

Tier = Literal["capable", "cheap"]
Task = Literal["menu", "dish", "wine", "invite", "proposal", "notes"]


class ModelConfig(TypedDict, total=False):
    """Configuration for model calls."""

    model: str
    temperature: float


MODEL_CONFIGS: dict[str, dict[str, ModelConfig]] = {
    "openai": {
        "capable": {"model": "gpt-4o", "temperature": 0.7},
        "cheap": {"model": "gpt-4o-mini", "temperature": 0.7},
    },
    "anthropic": {
        "capable": {"model": "claude-sonnet-4-20250514", "temperature": 0.7},
        "cheap": {"model": "claude-3-5-haiku-latest", "temperature": 0.7},
    },
}

# Output token ceilings by task
TASK_MAX_TOKENS: dict[str, int] = {
    "menu": 16000,
    "dish": 4000,
    "wine": 2000,
    "invite": 600,
    "proposal": 4096,
    "notes": 8000,
}

DEFAULT_MAX_TOKENS = 4000


def get_model_config(provider: str, tier: Tier | str = "capable") -> ModelConfig:
    """
    Get model configuration for a provider and tier.

    Unknown tiers fall back to the capable tier of the provider.
    """
    configs = MODEL_CONFIGS.get(provider)
    if configs is None:
        raise ValueError(f"Unknown completion provider: {provider!r}")
    return configs.get(tier, configs["capable"]).copy()


def get_max_tokens(task: Task | str) -> int:
    return TASK_MAX_TOKENS.get(task, DEFAULT_MAX_TOKENS)
