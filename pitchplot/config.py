"""
System Configuration: Single Source of Truth
============================================

1. THE MISSION
--------------
One immutable place for runtime configuration. Secrets come from `.env`,
tunables from the environment with sane defaults, and the chat model used
for table extraction comes from the `get_llm` factory.

2. THE MECHANISM
----------------
- **Secret Management:** Loads environment variables via `dotenv`.
- **LLM Factory:** `get_llm` hides the switch between OpenAI, Azure OpenAI
  and Anthropic behind one LangChain chat-model interface.

3. THE CONTRACT
---------------
- **Validation:** API keys are checked when the LLM is built; a missing key
  raises `ValueError` immediately.
- **Consistency:** The extraction client MUST obtain its model through
  `SystemConfig.get_llm()` so temperature/timeouts stay uniform.
- **Usage Policy:** The two usage-threshold defaults live here. The filter
  itself never hardcodes a threshold.
"""

import logging
import os
import warnings
from typing import Optional

from dotenv import load_dotenv
from langchain_openai import AzureChatOpenAI, ChatOpenAI

# Pydantic v2 protected-namespace noise from LangChain's "model_" fields.
warnings.filterwarnings(
    "ignore",
    message=".*Field \"model_.*\" has conflict with protected namespace.*"
)

load_dotenv()

logger = logging.getLogger(__name__)


class SystemConfig:
    """
    Central configuration for the Pitch Plot engine.
    """
    DEPLOYMENT_MODE = os.getenv("DEPLOYMENT_MODE", "OPENAI_DEV")

    # --- Model Selection ---
    # Table reading VLM. Role-based: change the value, not the name.
    VISION_MODEL = os.getenv("VISION_MODEL_NAME", "gpt-4.1-mini")
    EXTRACTION_TEMPERATURE = 0.0
    EXTRACTION_MAX_TOKENS = int(os.getenv("EXTRACTION_MAX_TOKENS", "2000"))
    # Hard upper bound on a single model call (seconds)
    EXTRACTION_TIMEOUT_S = float(os.getenv("EXTRACTION_TIMEOUT_S", "60"))

    # --- Usage Policy ---
    DEFAULT_USAGE_THRESHOLD = float(os.getenv("DEFAULT_USAGE_THRESHOLD", "0.02"))
    # Applied when the caller asks to exclude low-usage pitches
    LOW_USAGE_THRESHOLD = float(os.getenv("LOW_USAGE_THRESHOLD", "0.05"))

    # --- Image Intake ---
    MAX_IMAGE_DIM = int(os.getenv("MAX_IMAGE_DIM", "2000"))
    MAX_IMAGE_BYTES = int(os.getenv("MAX_IMAGE_BYTES", str(10 * 1024 * 1024)))

    # --- API Server ---
    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "8000"))
    CORS_ORIGINS = os.getenv("PITCHPLOT_CORS_ORIGINS", "*").split(",")

    @classmethod
    def usage_threshold(cls, exclude_low_usage: bool = False) -> float:
        """Default threshold for the UI toggle."""
        return cls.LOW_USAGE_THRESHOLD if exclude_low_usage else cls.DEFAULT_USAGE_THRESHOLD

    @classmethod
    def get_llm(
        cls,
        model_name: str,
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None
    ):
        """
        Factory method to get the correct chat model for the deployment mode.
        """
        common_kwargs = {
            "temperature": temperature,
            "max_tokens": max_tokens,
            # No hidden retries: a failed request is reported once
            "max_retries": 0,
        }

        mode = cls.DEPLOYMENT_MODE.upper()
        if mode == "AZURE":
            return AzureChatOpenAI(
                azure_deployment=model_name,
                api_version=os.getenv("AZURE_OPENAI_API_VERSION", "2024-06-01"),
                azure_endpoint=os.getenv("AZURE_OPENAI_ENDPOINT"),
                api_key=os.getenv("AZURE_OPENAI_API_KEY"),
                request_timeout=timeout,
                **common_kwargs
            )

        if mode == "ANTHROPIC":
            from langchain_anthropic import ChatAnthropic

            api_key = os.getenv("ANTHROPIC_API_KEY")
            if not api_key:
                raise ValueError("❌ Missing ANTHROPIC_API_KEY in environment.")

            return ChatAnthropic(
                model=model_name,
                api_key=api_key,
                default_request_timeout=timeout,
                **common_kwargs
            )

        # Standard OpenAI (Simplest Path)
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("❌ Missing OPENAI_API_KEY in environment.")

        return ChatOpenAI(
            model_name=model_name,
            api_key=api_key,
            request_timeout=timeout,
            **common_kwargs
        )
