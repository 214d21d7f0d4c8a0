"""Profile extraction from user messages.

Two Extractor implementations share one interface:
- LLMProfileExtractor: prompts an LLM for a JSON object (primary)
- TextPatternExtractor: regex heuristics (fallback)

ExtractionOracleAdapter wraps either one with retries, timeouts and
confidence scoring.
"""

from intake.extraction.adapter import ExtractionOracleAdapter
from intake.extraction.base import ExtractionSource, Extractor, TurnExtraction
from intake.extraction.llm import LLMProfileExtractor
from intake.extraction.parsing import parse_profile_output
from intake.extraction.text import TextPatternExtractor, extract_from_text

__all__ = [
    "ExtractionOracleAdapter",
    "ExtractionSource",
    "Extractor",
    "LLMProfileExtractor",
    "TextPatternExtractor",
    "TurnExtraction",
    "extract_from_text",
    "parse_profile_output",
]
