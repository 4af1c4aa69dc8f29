"""Chat model configuration — supports Gemini and OpenAI."""

import re
from typing import Optional

from langchain_core.language_models import BaseLanguageModel

from smartwatt.config import Settings, get_settings

DEFAULT_MODELS = {
    "gemini": "gemini-1.5-flash",
    "openai": "gpt-4o-mini",
}

# Names that used to work but are rejected by the provider today
MODEL_ALIASES = {
    "gemini-1.5-flash-8b": "gemini-1.5-flash",
}


def normalize_model_name(name: str, provider: str) -> str:
    name = re.sub(r"\s+", "-", (name or "").strip().lower())
    if not name:
        name = DEFAULT_MODELS.get(provider, DEFAULT_MODELS["gemini"])
    return MODEL_ALIASES.get(name, name)


def api_key_for(settings: Settings) -> str:
    key = settings.OPENAI_API_KEY if settings.AI_PROVIDER == "openai" else settings.GEMINI_API_KEY
    return (key or "").strip()


def get_llm(settings: Optional[Settings] = None) -> Optional[BaseLanguageModel]:
    """Get the configured chat model, or None when no API key is set."""
    settings = settings or get_settings()
    api_key = api_key_for(settings)
    if not api_key:
        return None

    model = normalize_model_name(settings.AI_MODEL_NAME, settings.AI_PROVIDER)
    if settings.AI_PROVIDER == "openai":
        from langchain_openai import ChatOpenAI
        return ChatOpenAI(
            api_key=api_key,
            model=model,
            temperature=settings.AI_TEMPERATURE,
            max_tokens=settings.AI_MAX_TOKENS,
            timeout=settings.AI_TIMEOUT_SECONDS,
            max_retries=1,
        )
    else:
        from langchain_google_genai import ChatGoogleGenerativeAI
        return ChatGoogleGenerativeAI(
            google_api_key=api_key,
            model=model,
            temperature=settings.AI_TEMPERATURE,
            max_output_tokens=settings.AI_MAX_TOKENS,
            timeout=settings.AI_TIMEOUT_SECONDS,
            max_retries=1,
        )
