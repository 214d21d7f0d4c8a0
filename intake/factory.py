"""Build a configured orchestrator from Settings."""

from intake.config import get_settings
from intake.config.settings import Settings
from intake.conversation.orchestrator import ConversationOrchestrator
from intake.conversation.replies import ReplyGenerator
from intake.conversation.session import Conversation
from intake.extraction.adapter import ExtractionOracleAdapter
from intake.extraction.base import Extractor
from intake.extraction.llm import LLMProfileExtractor
from intake.extraction.text import TextPatternExtractor
from intake.observability.logging import get_logger, setup_logging
from intake.providers.llm.base import LLMProvider
from intake.providers.llm.executor import create_extraction_executor, create_reply_executor

logger = get_logger(__name__)


def configure_logging(settings: Settings) -> None:
    """Apply the observability.logging section."""
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_pii=log_config.redact_pii,
        redact_keys=log_config.redact_keys,
    )


def create_extractor(settings: Settings, llm: LLMProvider | None = None) -> Extractor:
    """Pick the primary extractor.

    The LLM extractor is used when extraction is enabled and a model is
    configured; otherwise text patterns are the only option.
    """
    config = settings.extraction
    if not config.enabled or not config.model:
        logger.info("extraction_llm_unavailable", using="text")
        return TextPatternExtractor()

    return LLMProfileExtractor(
        llm=llm or create_extraction_executor(config),
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )


def create_orchestrator(
    settings: Settings | None = None,
    extraction_llm: LLMProvider | None = None,
    reply_llm: LLMProvider | None = None,
) -> ConversationOrchestrator:
    """Create a ConversationOrchestrator.

    Args:
        settings: Settings to use (loaded from config/ if None)
        extraction_llm: Provider override for extraction (tests)
        reply_llm: Provider override for reply generation (tests)
    """
    settings = settings or get_settings()
    extraction = settings.extraction
    window = settings.conversation.history_window

    extractor = create_extractor(settings, extraction_llm)
    adapter = ExtractionOracleAdapter(
        extractor,
        max_retries=extraction.max_retries,
        timeout=extraction.timeout,
        history_window=window,
    )

    fallback_adapter = None
    if extraction.fallback_on_failure and not isinstance(extractor, TextPatternExtractor):
        fallback_adapter = ExtractionOracleAdapter(
            TextPatternExtractor(),
            max_retries=0,
            timeout=extraction.timeout,
            history_window=window,
        )

    reply_generator = None
    reply_config = settings.conversation.reply_generation
    if reply_config.enabled:
        reply_generator = ReplyGenerator(
            llm=reply_llm or create_reply_executor(reply_config),
            history_window=window,
            temperature=reply_config.temperature,
            max_tokens=reply_config.max_tokens,
        )

    logger.info(
        "orchestrator_created",
        extractor=extractor.source.value,
        fallback=fallback_adapter is not None,
        reply_generation=reply_generator is not None,
    )

    return ConversationOrchestrator(
        adapter=adapter,
        fallback_adapter=fallback_adapter,
        reply_generator=reply_generator,
        history_window=window,
    )


def create_conversation(settings: Settings | None = None) -> Conversation:
    """Create a Conversation backed by a configured orchestrator."""
    return Conversation(create_orchestrator(settings))
