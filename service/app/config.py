"""Application settings loaded from environment variables.

Uses Pydantic BaseSettings so values can come from env vars, .env files,
or defaults. All settings are validated at startup, so we fail fast if
something critical is missing.
"""

from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Chat service configuration."""

    model_config = {"env_prefix": "DSOLAR_"}

    # LLM provider: "groq", "openrouter" or "vertex_ai"
    llm_provider: Literal["groq", "openrouter", "vertex_ai"] = "groq"

    # Groq (OpenAI-compatible API)
    groq_api_key: str = ""
    groq_model: str = "deepseek-r1-distill-llama-70b"

    # OpenRouter (OpenAI-compatible API)
    openrouter_api_key: str = ""
    openrouter_model: str = "anthropic/claude-sonnet-4-20250514"

    # Vertex AI (Gemini)
    gcp_project: str = ""
    gcp_region: str = "us-east1"
    vertex_model: str = "gemini-2.0-flash"

    # Every provider call is bounded by this timeout
    provider_timeout_seconds: float = 20.0

    # Empty string means the bundled seed knowledge base
    knowledge_base_path: str = ""

    # FAQ scoring
    best_match_threshold: int = 30
    relevant_faq_threshold: int = 15
    relevant_faq_limit: int = 5
    local_answer_min_score: int = 100
    faq_confidence_threshold: float = 0.7

    # Routing behaviour
    faq_confidence_enabled: bool = True
    escalate_ambiguous_intent: bool = True
    emoji_enabled: bool = True

    # Input validation
    max_message_length: int = 1000
    max_history_turns: int = 10

    # Observability: empty string means chat logging is disabled
    chat_log_table: str = ""

    @model_validator(mode="after")
    def _validate_routing(self) -> "Settings":
        """Reject provider and threshold combinations that cannot work."""
        if self.llm_provider == "vertex_ai" and not self.gcp_project:
            raise ValueError(
                "gcp_project must be set when llm_provider is 'vertex_ai'."
            )

        if self.provider_timeout_seconds <= 0:
            raise ValueError("provider_timeout_seconds must be greater than 0.")

        for name in ("best_match_threshold", "relevant_faq_threshold", "relevant_faq_limit"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be greater than 0.")

        if not 0.0 <= self.faq_confidence_threshold <= 1.0:
            raise ValueError("faq_confidence_threshold must be between 0 and 1.")

        if self.max_history_turns < 0:
            raise ValueError("max_history_turns must not be negative.")
        return self
