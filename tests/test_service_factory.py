"""
Unit tests for ServiceFactory - Centralized service instance manager

Tests cover:
- LLM client caching (default vs custom API keys)
- Template engine singleton
- Wired services (field mapper, orchestrator, content generator)
- Cache management operations
- Thread safety
"""

import threading
import pytest
from unittest.mock import patch

from src.services.common.errors import ConfigurationError
from src.services.common.service_factory import ServiceFactory
from src.services.enhancement import (
    EnhancementOrchestrator,
    ListingContentGenerator,
    ListingEnhancementService,
)
from src.services.field_mapping import FieldMappingInference
from src.services.llm_gateway import ModelFallbackClient
from src.services.prompts import PromptTemplateEngine


class TestServiceFactoryClient:
    """Test LLM client caching"""

    def test_default_client_cached(self, mock_llm_mode):
        client1 = ServiceFactory.get_llm_client()
        client2 = ServiceFactory.get_llm_client()

        assert client1 is client2
        assert isinstance(client1, ModelFallbackClient)

    @patch("src.services.llm_gateway.api_client.OpenAI")
    def test_custom_key_not_cached(self, mock_openai_class):
        client1 = ServiceFactory.get_llm_client(api_key="sk-or-custom")
        client2 = ServiceFactory.get_llm_client(api_key="sk-or-custom")

        assert client1 is not client2
        assert "llm_client" not in ServiceFactory.get_cache_stats()["instance_types"]

    def test_missing_key_fails_fast(self):
        with patch("src.services.llm_gateway.api_client.LLM_API_KEY", None):
            with pytest.raises(ConfigurationError):
                ServiceFactory.get_llm_client()


class TestServiceFactoryServices:
    """Test wired service getters"""

    def test_template_engine_singleton(self):
        engine = ServiceFactory.get_template_engine()

        assert engine is ServiceFactory.get_template_engine()
        assert isinstance(engine, PromptTemplateEngine)

    def test_services_share_client_and_engine(self, mock_llm_mode):
        mapper = ServiceFactory.get_field_mapper()
        orchestrator = ServiceFactory.get_orchestrator()
        generator = ServiceFactory.get_content_generator()

        assert isinstance(mapper, FieldMappingInference)
        assert isinstance(orchestrator, EnhancementOrchestrator)
        assert isinstance(generator, ListingContentGenerator)
        assert mapper.llm_client is orchestrator.llm_client is generator.llm_client
        assert orchestrator.template_engine is ServiceFactory.get_template_engine()
        assert ServiceFactory.get_orchestrator() is orchestrator


class TestServiceFactoryCache:
    """Test cache management"""

    def test_clear_cache(self, mock_llm_mode):
        client = ServiceFactory.get_llm_client()
        ServiceFactory.clear_cache()

        assert ServiceFactory.get_cache_stats()["total_instances"] == 0
        assert ServiceFactory.get_llm_client() is not client

    def test_cache_stats(self, mock_llm_mode):
        ServiceFactory.get_orchestrator()

        stats = ServiceFactory.get_cache_stats()

        assert stats["has_llm_client"] is True
        assert stats["has_template_engine"] is True
        assert "orchestrator" in stats["instance_types"]

    def test_thread_safe_creation(self, mock_llm_mode):
        instances = []

        def worker():
            instances.append(ServiceFactory.get_llm_client())

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len({id(i) for i in instances}) == 1


class TestListingEnhancementService:
    """Test the service facade"""

    def test_facade_pipeline(self, mock_llm_mode, tmp_path):
        with patch("src.services.enhancement.service.LOG_DIR", tmp_path), patch(
            "src.services.enhancement.service.LOG_FILE", tmp_path / "test.log"
        ):
            service = ListingEnhancementService()

        rows = [{"sku": "SKU-1", "title": "Chair"}]
        mappings = service.infer_mappings(["sku", "title"], rows)
        records = service.normalize_rows(rows, mappings)
        batch = service.process_batch(records, marketplace="Amazon")

        assert len(batch.results) == 1
        assert batch.results[0].enhanced is True
        assert service.llm_client is ServiceFactory.get_llm_client()
