"""
Listing Enhancement Service - Main orchestration service
High-level API: field mapping, row normalization and batch enhancement
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence

from .models import BatchResult, EnhancementResult
from .batch_processor import EnhancementOrchestrator
from .content_generator import ListingContentGenerator
from .config import (
    DEFAULT_MARKETPLACE,
    DEFAULT_MODEL_PREFERENCE,
    LOG_DIR,
    LOG_FILE,
    LOG_FORMAT,
    LOG_DATE_FORMAT,
    LOG_LEVEL,
)
from ..field_mapping import FieldMapping, FieldMappingInference
from ..ingestion import (
    ListingValidationReport,
    ListingValidator,
    ProductRecord,
    apply_mappings,
)
from ..llm_gateway import CancellationToken

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Root logging: file under LOG_DIR plus console (no-op if already configured)"""
    if logging.getLogger().handlers:
        return

    LOG_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=[
            logging.FileHandler(LOG_FILE),
            logging.StreamHandler(),
        ],
    )


class ListingEnhancementService:
    """
    Main Listing Enhancement Service

    Wires the fallback client, template engine, field mapping inference and
    orchestrator together behind one object.
    """

    def __init__(self, api_key: Optional[str] = None, setup_logging: bool = True):
        """
        Initialize Listing Enhancement Service

        Args:
            api_key: Backend API key (uses environment variable if None)
            setup_logging: Configure root logging handlers
        """
        from ..common.service_factory import ServiceFactory

        if setup_logging:
            configure_logging()

        logger.info("Initializing Listing Enhancement Service...")

        try:
            self.llm_client = ServiceFactory.get_llm_client(api_key)
        except Exception as e:
            logger.error(f"Failed to initialize LLM client: {e}")
            raise

        self.template_engine = ServiceFactory.get_template_engine()
        self.field_mapper = FieldMappingInference(self.llm_client, self.template_engine)
        self.orchestrator = EnhancementOrchestrator(self.llm_client, self.template_engine)
        self.content_generator = ListingContentGenerator(
            self.llm_client, self.template_engine
        )
        self.validator = ListingValidator()

        logger.info("Listing Enhancement Service initialized successfully")

    def infer_mappings(
        self,
        headers: Sequence[str],
        sample_rows: Sequence[Mapping[str, Any]],
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[FieldMapping]:
        return self.field_mapper.infer_mappings(headers, sample_rows, cancel_token)

    def normalize_rows(
        self,
        rows: Sequence[Mapping[str, Any]],
        mappings: Sequence[FieldMapping],
        min_confidence: float = 0.0,
    ) -> List[ProductRecord]:
        return apply_mappings(rows, mappings, min_confidence)

    def process_batch(
        self,
        records: Sequence[ProductRecord],
        marketplace: str = DEFAULT_MARKETPLACE,
        model_preference: Optional[str] = DEFAULT_MODEL_PREFERENCE,
        cancel_token: Optional[CancellationToken] = None,
    ) -> BatchResult:
        """
        Enhance a batch of records

        Args:
            records: Normalized product records
            marketplace: Target marketplace name
            model_preference: Model alias ("gpt4o", "claude", ...), unknown -> default model
            cancel_token: Optional cancellation/deadline signal

        Returns:
            BatchResult with statistics and one result per record

        Example:
            >>> service = ListingEnhancementService()
            >>> result = service.process_batch(records, marketplace="Amazon")
            >>> print(f"Enhanced: {result.successful}/{result.total_processed}")
        """
        logger.info(f"Processing batch: {len(records)} records for {marketplace}")
        return self.orchestrator.process_batch(
            records, marketplace, model_preference, cancel_token
        )

    def enhance_batch(
        self,
        records: Sequence[ProductRecord],
        marketplace: str = DEFAULT_MARKETPLACE,
        model_preference: Optional[str] = DEFAULT_MODEL_PREFERENCE,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[EnhancementResult]:
        return self.process_batch(
            records, marketplace, model_preference, cancel_token
        ).results

    def validate_records(
        self, records: Sequence[ProductRecord], marketplace: str = DEFAULT_MARKETPLACE
    ) -> List[ListingValidationReport]:
        """Check records against marketplace listing requirements (no model calls)"""
        return self.validator.validate_batch(list(records), marketplace)
