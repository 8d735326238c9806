"""Pricing table lookup and USD cost calculation."""


# Per 1M tokens
MODEL_COSTS: dict[str, dict[str, float]] = {
    "claude-opus-4":   {"input": 15.00, "output": 75.00, "cache_read": 1.50, "cache_create": 18.75},
    "claude-sonnet-4": {"input": 3.00,  "output": 15.00, "cache_read": 0.30, "cache_create": 3.75},
    "claude-haiku-4":  {"input": 0.80,  "output": 4.00,  "cache_read": 0.08, "cache_create": 1.00},
}

# Rate applied to all session logs
DEFAULT_PRICING_MODEL = "claude-sonnet-4"


def _match_model(model: str) -> dict[str, float] | None:
    """Match a model string to its cost entry by prefix."""
    if not model:
        return None
    for prefix, costs in MODEL_COSTS.items():
        if model.startswith(prefix):
            return costs
    # Family fallback, e.g. "claude-sonnet-3-7" against "claude-sonnet-4"
    for prefix, costs in MODEL_COSTS.items():
        base = prefix.rsplit("-", 1)[0]
        if model.startswith(base):
            return costs
    return None


def calculate_cost(
    input_tokens: int,
    output_tokens: int,
    cache_read_tokens: int,
    cache_creation_tokens: int,
    model: str = DEFAULT_PRICING_MODEL,
) -> float:
    """Calculate cost in USD for the given token counts and model."""
    costs = _match_model(model)
    if not costs:
        return 0.0
    return (
        input_tokens * costs["input"]
        + output_tokens * costs["output"]
        + cache_read_tokens * costs["cache_read"]
        + cache_creation_tokens * costs["cache_create"]
    ) / 1_000_000
