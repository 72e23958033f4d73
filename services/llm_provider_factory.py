"""
LLM Provider Factory
Provides a unified interface for different LLM providers (Gemini, OpenAI, Mistral)
Allows easy swapping between providers via environment configuration
"""

import os
import logging
from typing import Dict, List, Optional, Any
from abc import ABC, abstractmethod
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()


class LLMProvider(ABC):
    """Abstract base class for LLM providers"""

    @abstractmethod
    def create_chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 500,
        timeout: float = 30.0,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Create a chat completion using the provider's API.

        Returns a normalized response dictionary with:
        - content: str (the response text)
        - model: str (model used)
        - usage: dict (token usage stats)
        - raw_response: original API response object
        """
        pass

    @abstractmethod
    def get_available_models(self) -> List[str]:
        """Return list of available models for this provider"""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return provider name ('gemini', 'openai', 'mistral')"""
        pass


class GeminiProvider(LLMProvider):
    """Google Gemini provider implementation"""

    AVAILABLE_MODELS = [
        "gemini-2.0-flash",
        "gemini-1.5-flash",
        "gemini-1.5-pro",
    ]

    def __init__(self, api_key: Optional[str] = None):
        """Initialize Gemini provider with API key"""
        import google.generativeai as genai

        self.api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY not found in environment variables")

        genai.configure(api_key=self.api_key)
        self.genai = genai
        logger.info("Initialized Gemini provider")

    def create_chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 500,
        timeout: float = 30.0,
        **kwargs
    ) -> Dict[str, Any]:
        """Create completion using Gemini generate_content"""

        # Gemini takes a single prompt here; system and user turns are joined in order
        prompt = "\n\n".join(message["content"] for message in messages)

        client = self.genai.GenerativeModel(model)
        response = client.generate_content(
            prompt,
            generation_config={
                "temperature": temperature,
                "max_output_tokens": max_tokens,
                **kwargs
            },
            request_options={"timeout": timeout},
        )

        usage_metadata = getattr(response, "usage_metadata", None)
        prompt_tokens = getattr(usage_metadata, "prompt_token_count", 0) or 0
        completion_tokens = getattr(usage_metadata, "candidates_token_count", 0) or 0

        # Normalize response
        return {
            "content": response.text,
            "model": model,
            "usage": {
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": prompt_tokens + completion_tokens,
            },
            "raw_response": response
        }

    def get_available_models(self) -> List[str]:
        """Return list of available Gemini models"""
        return self.AVAILABLE_MODELS

    def get_provider_name(self) -> str:
        return "gemini"


class OpenAIProvider(LLMProvider):
    """OpenAI API provider implementation"""

    AVAILABLE_MODELS = [
        "gpt-4o",
        "gpt-4o-mini",
        "gpt-4-turbo",
        "gpt-3.5-turbo",
    ]

    def __init__(self, api_key: Optional[str] = None):
        """Initialize OpenAI provider with API key"""
        from openai import OpenAI

        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not found in environment variables")

        self.client = OpenAI(api_key=self.api_key)
        logger.info("Initialized OpenAI provider")

    def create_chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 500,
        timeout: float = 30.0,
        **kwargs
    ) -> Dict[str, Any]:
        """Create chat completion using OpenAI API"""

        response = self.client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            **kwargs
        )

        # Normalize response
        return {
            "content": response.choices[0].message.content,
            "model": response.model,
            "usage": {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            },
            "raw_response": response
        }

    def get_available_models(self) -> List[str]:
        """Return list of available OpenAI models"""
        return self.AVAILABLE_MODELS

    def get_provider_name(self) -> str:
        return "openai"


class MistralProvider(LLMProvider):
    """Mistral AI provider implementation"""

    AVAILABLE_MODELS = [
        "mistral-large-latest",
        "mistral-small-latest",
        "mistral-medium-latest",
        "open-mistral-7b",
    ]

    def __init__(self, api_key: Optional[str] = None):
        """Initialize Mistral provider with API key"""
        from mistralai import Mistral

        self.api_key = api_key or os.getenv("MISTRAL_API_KEY")
        if not self.api_key:
            raise ValueError("MISTRAL_API_KEY not found in environment variables")

        self.client = Mistral(api_key=self.api_key)
        logger.info("Initialized Mistral provider")

    def create_chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 500,
        timeout: float = 30.0,
        **kwargs
    ) -> Dict[str, Any]:
        """Create chat completion using Mistral API (timeout is passed in milliseconds)"""

        response = self.client.chat.complete(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout_ms=int(timeout * 1000),
            **kwargs
        )

        # Normalize response
        return {
            "content": response.choices[0].message.content,
            "model": response.model,
            "usage": {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            },
            "raw_response": response
        }

    def get_available_models(self) -> List[str]:
        """Return list of available Mistral models"""
        return self.AVAILABLE_MODELS

    def get_provider_name(self) -> str:
        return "mistral"


class LLMProviderFactory:
    """Factory class for creating LLM provider instances"""

    # Default models per provider
    DEFAULT_MODELS = {
        "gemini": "gemini-2.0-flash",
        "openai": "gpt-4o-mini",
        "mistral": "mistral-small-latest",
    }

    PROVIDERS = {
        "gemini": GeminiProvider,
        "openai": OpenAIProvider,
        "mistral": MistralProvider,
    }

    @staticmethod
    def create_provider(provider_name: Optional[str] = None) -> LLMProvider:
        """
        Create an LLM provider instance based on configuration.

        Args:
            provider_name: Provider to use ("gemini", "openai", "mistral").
                         If None, reads from LLM_PROVIDER env var (default: "gemini")

        Returns:
            LLMProvider instance

        Raises:
            ValueError: If provider is not supported or API key is missing
        """
        if provider_name is None:
            provider_name = os.getenv("LLM_PROVIDER", "gemini")
        provider_name = provider_name.lower()

        logger.info(f"Creating LLM provider: {provider_name}")

        provider_class = LLMProviderFactory.PROVIDERS.get(provider_name)
        if provider_class is None:
            raise ValueError(
                f"Unsupported LLM provider: {provider_name}. "
                f"Supported providers: {', '.join(LLMProviderFactory.PROVIDERS)}"
            )
        return provider_class()

    @staticmethod
    def get_default_model(provider_name: Optional[str] = None) -> str:
        """
        Get the default model for a provider.

        Args:
            provider_name: Provider name. If None, uses LLM_PROVIDER env var

        Returns:
            Default model name
        """
        if provider_name is None:
            provider_name = os.getenv("LLM_PROVIDER", "gemini")

        return LLMProviderFactory.DEFAULT_MODELS.get(provider_name.lower(), "gemini-2.0-flash")


def get_llm_client(provider_name: Optional[str] = None) -> LLMProvider:
    """
    Get an LLM provider client instance.

    Thin wrapper around LLMProviderFactory.create_provider() for service modules.
    """
    return LLMProviderFactory.create_provider(provider_name)
