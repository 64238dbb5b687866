"""
Shared LLM utilities.

Provides:
- LLM initialization (OpenRouter, OpenAI or Anthropic) with request timeouts
- Single-attempt invocation with token and cost tracking
- JSON parsing of model output
"""
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from studyvault.core.config import get_settings

logger = logging.getLogger(__name__)


# Cost per 1M tokens
COST_PER_1M_TOKENS = {
    "mistralai/mistral-small-latest": {"input": 0.10, "output": 0.30},
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
    "claude-3-haiku-20240307": {"input": 0.25, "output": 1.25},
}


@dataclass
class LLMMetrics:
    """Metrics from LLM invocation."""
    model_name: str = ""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    estimated_cost_usd: float = 0.0
    execution_time_seconds: float = 0.0
    error_message: Optional[str] = None


@dataclass
class LLMResponse:
    """Response from LLM invocation with metrics."""
    content: Optional[str] = None
    metrics: LLMMetrics = field(default_factory=LLMMetrics)
    success: bool = False


def get_llm_with_tracking():
    """
    Get the appropriate LLM based on available API keys.

    Every client is built with the configured request timeout and without
    client-side retries: a failed call is reported once and not repeated.

    Returns:
        Tuple of (llm_instance, model_name) or (None, None) if no keys available
    """
    settings = get_settings()

    if settings.openrouter_api_key:
        from langchain_openai import ChatOpenAI
        return ChatOpenAI(
            model=settings.ai_model,
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            temperature=settings.ai_temperature,
            max_tokens=settings.ai_max_tokens,
            timeout=settings.ai_timeout_seconds,
            max_retries=0,
        ), settings.ai_model
    elif settings.openai_api_key:
        from langchain_openai import ChatOpenAI
        return ChatOpenAI(
            model="gpt-4o-mini",
            api_key=settings.openai_api_key,
            temperature=settings.ai_temperature,
            max_tokens=settings.ai_max_tokens,
            timeout=settings.ai_timeout_seconds,
            max_retries=0,
        ), "gpt-4o-mini"
    elif settings.anthropic_api_key:
        from langchain_anthropic import ChatAnthropic
        return ChatAnthropic(
            model="claude-3-haiku-20240307",
            api_key=settings.anthropic_api_key,
            temperature=settings.ai_temperature,
            max_tokens=settings.ai_max_tokens,
            timeout=settings.ai_timeout_seconds,
            max_retries=0,
        ), "claude-3-haiku-20240307"
    else:
        return None, None


def calculate_cost(model_name: str, prompt_tokens: int, completion_tokens: int) -> float:
    """Calculate estimated cost in USD for token usage."""
    if model_name not in COST_PER_1M_TOKENS:
        model_name = "gpt-4o-mini"

    costs = COST_PER_1M_TOKENS[model_name]
    input_cost = (prompt_tokens / 1_000_000) * costs["input"]
    output_cost = (completion_tokens / 1_000_000) * costs["output"]
    return round(input_cost + output_cost, 6)


def estimate_tokens(text: str) -> int:
    """
    Estimate token count for text.
    Rough estimate: ~4 characters per token for English text.
    """
    if not text:
        return 0
    return len(text) // 4


def invoke_llm_with_metrics(llm, prompt: str, model_name: str) -> LLMResponse:
    """
    Invoke LLM once and return response with metrics.

    Provider errors (HTTP failures, timeouts) are caught and reported through
    ``LLMResponse.success`` rather than raised.
    """
    metrics = LLMMetrics(model_name=model_name)
    start_time = time.time()

    try:
        response = llm.invoke(prompt)
        metrics.execution_time_seconds = round(time.time() - start_time, 3)
        content = getattr(response, "content", None)

        # Extract token usage if available
        metadata = getattr(response, "response_metadata", None) or {}
        # OpenAI format
        if "token_usage" in metadata:
            usage = metadata["token_usage"] or {}
            metrics.prompt_tokens = usage.get("prompt_tokens", 0)
            metrics.completion_tokens = usage.get("completion_tokens", 0)
            metrics.total_tokens = usage.get("total_tokens", 0)
        # Anthropic format
        elif "usage" in metadata:
            usage = metadata["usage"] or {}
            metrics.prompt_tokens = usage.get("input_tokens", 0)
            metrics.completion_tokens = usage.get("output_tokens", 0)
            metrics.total_tokens = metrics.prompt_tokens + metrics.completion_tokens

        # If no token info from API, estimate
        if metrics.total_tokens == 0:
            metrics.prompt_tokens = estimate_tokens(prompt)
            metrics.completion_tokens = estimate_tokens(content) if isinstance(content, str) else 0
            metrics.total_tokens = metrics.prompt_tokens + metrics.completion_tokens

        metrics.estimated_cost_usd = calculate_cost(
            model_name, metrics.prompt_tokens, metrics.completion_tokens
        )

        return LLMResponse(
            content=content,
            metrics=metrics,
            success=True
        )

    except Exception as e:
        metrics.execution_time_seconds = round(time.time() - start_time, 3)
        metrics.error_message = str(e)
        logger.exception(f"LLM invocation failed: {e}")
        return LLMResponse(
            content=None,
            metrics=metrics,
            success=False
        )


def parse_json_response(response: str) -> Optional[Dict[str, Any]]:
    """Parse JSON from LLM response, handling markdown code blocks."""
    if not response:
        return None

    text = response.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    text = text.strip()

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON: {e}\nResponse: {text[:500]}")
        return None

    if not isinstance(parsed, dict):
        logger.error(f"Expected a JSON object, got {type(parsed).__name__}")
        return None
    return parsed
