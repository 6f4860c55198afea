"""
Service Factory - Centralized service instance manager with caching

Provides singleton access to all major services:
- Model Fallback Client
- Prompt Template Engine
- Field Mapping Inference
- Enhancement Orchestrator
- Listing Content Generator

Features:
- Lazy initialization (Created only when needed)
- Thread-safe instance creation
- Fresh, uncached clients for custom API keys
- Clearable cache for testing
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from ..llm_gateway.api_client import ModelFallbackClient
from ..prompts.engine import PromptTemplateEngine

logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Centralized service instance manager with caching

    Provides singleton access to the shared services so that one HTTP client
    and one template catalog are reused across the process.

    Thread-safe; every consumer still accepts explicit instances.
    """

    _instances: Dict[str, Any] = {}
    _lock: threading.RLock = threading.RLock()

    @classmethod
    def _get_or_create(cls, cache_key: str, create: Callable[[], Any]) -> Any:
        if cache_key in cls._instances:
            logger.debug(f"[ServiceFactory] Returning cached {cache_key} instance")
            return cls._instances[cache_key]

        with cls._lock:
            if cache_key not in cls._instances:
                logger.info(f"[ServiceFactory] Creating new {cache_key} instance")
                cls._instances[cache_key] = create()

        return cls._instances[cache_key]

    @classmethod
    def get_llm_client(cls, api_key: Optional[str] = None) -> ModelFallbackClient:
        """
        Get or create ModelFallbackClient instance

        Args:
            api_key: Optional custom API key (creates fresh instance if provided)

        Returns:
            ModelFallbackClient instance (cached for default key, fresh for custom keys)

        Usage:
            client = ServiceFactory.get_llm_client()
            custom_client = ServiceFactory.get_llm_client(api_key='sk-or-custom')

        Notes:
        - Default API key: Returns cached singleton instance
        - Custom API key: Always creates fresh instance (not cached)
        - Security: Never caches custom API keys
        """
        if api_key is not None:
            logger.debug(
                "[ServiceFactory] Creating fresh LLM client with custom API key (not cached)"
            )
            return ModelFallbackClient(api_key=api_key)

        return cls._get_or_create("llm_client", ModelFallbackClient)

    @classmethod
    def get_template_engine(cls) -> PromptTemplateEngine:
        """Get the process-wide PromptTemplateEngine (singleton)"""
        return cls._get_or_create("template_engine", PromptTemplateEngine)

    @classmethod
    def get_field_mapper(cls):
        """Get FieldMappingInference wired to the cached client and engine"""
        from ..field_mapping.inference import FieldMappingInference

        return cls._get_or_create(
            "field_mapper",
            lambda: FieldMappingInference(cls.get_llm_client(), cls.get_template_engine()),
        )

    @classmethod
    def get_orchestrator(cls):
        """Get EnhancementOrchestrator wired to the cached client and engine"""
        from ..enhancement.batch_processor import EnhancementOrchestrator

        return cls._get_or_create(
            "orchestrator",
            lambda: EnhancementOrchestrator(cls.get_llm_client(), cls.get_template_engine()),
        )

    @classmethod
    def get_content_generator(cls):
        """Get ListingContentGenerator wired to the cached client and engine"""
        from ..enhancement.content_generator import ListingContentGenerator

        return cls._get_or_create(
            "content_generator",
            lambda: ListingContentGenerator(
                cls.get_llm_client(), cls.get_template_engine()
            ),
        )

    @classmethod
    def clear_cache(cls) -> None:
        """
        Clear all cached service instances

        Usage:
            ServiceFactory.clear_cache()

        Notes:
            - Useful for testing (clear between tests)
            - Useful for troubleshooting (force fresh start)
            - Thread-safe operation
        """
        with cls._lock:
            count = len(cls._instances)
            cls._instances.clear()
            logger.info(f"[ServiceFactory] Cleared {count} cached service instances")

    @classmethod
    def get_cache_stats(cls) -> Dict[str, Any]:
        """
        Get statistics about cached instances (for debugging)

        Returns:
            Dictionary with cache statistics
        """
        return {
            "total_instances": len(cls._instances),
            "instance_types": sorted(cls._instances.keys()),
            "has_llm_client": "llm_client" in cls._instances,
            "has_template_engine": "template_engine" in cls._instances,
        }
