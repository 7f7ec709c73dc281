# services/ai_assistant.py

"""
AI drafting and ticket analysis (Gemini through pydantic-ai).

Both calls degrade to fixed messages when the key is missing or the
provider fails; callers always get something displayable back.
"""

from typing import Any, Optional, Type

from pydantic_ai import Agent
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.providers.google import GoogleProvider

from core.config import settings
from core.logging_config import get_logger
from models.communication import CommunicationDraft
from models.enums import CommunicationTone


logger = get_logger("ai")

MISSING_KEY_ANALYSIS = "AI Configuration Missing: Please set GEMINI_API_KEY."
FAILED_ANALYSIS = "Failed to analyze ticket. Please check your network or API key."
EMPTY_ANALYSIS = "No analysis available."

MISSING_KEY_DRAFT = CommunicationDraft(title="Error", content="AI Configuration Missing.")
FAILED_DRAFT = CommunicationDraft(title="Drafting Failed", content="Could not generate draft.")

ANALYSIS_PROMPT = """You are an expert facility manager. Analyze this maintenance ticket.

Ticket Title: {title}
Description: {description}

Please provide a brief, structured analysis including:
1. Estimated Priority (Low/Medium/High/Emergency)
2. Recommended Professional (e.g., Electrician, Plumber)
3. A suggested polite response to the tenant.

Keep the output concise (under 150 words)."""

DRAFT_PROMPT = """Write a condominium announcement about: "{topic}".
Tone: {tone}.

Return a title and a content. The content should be clear, professional,
and ready to send."""


def ai_configured() -> bool:
    return bool(settings.GEMINI_API_KEY)


def _build_agent(output_type: Type[Any]) -> Agent:
    model = GoogleModel(
        settings.GEMINI_MODEL,
        provider=GoogleProvider(api_key=settings.GEMINI_API_KEY),
    )
    return Agent(model, output_type=output_type)


def _run_agent(prompt: str, output_type: Type[Any]) -> Any:
    """Single blocking request to the model; returns the typed output."""
    result = _build_agent(output_type).run_sync(prompt)
    return result.output


# -----------------------------------------------------
# Ticket analysis
# -----------------------------------------------------
def analyze_ticket(title: str, description: str) -> str:
    if not ai_configured():
        logger.warning("Gemini API key is missing, ticket analysis skipped")
        return MISSING_KEY_ANALYSIS

    try:
        text: Optional[str] = _run_agent(
            ANALYSIS_PROMPT.format(title=title, description=description),
            str,
        )
    except Exception as e:
        logger.error(f"Ticket analysis failed: {type(e).__name__}: {e}")
        return FAILED_ANALYSIS

    return text or EMPTY_ANALYSIS


# -----------------------------------------------------
# Communication drafting
# -----------------------------------------------------
def draft_communication(topic: str, tone: CommunicationTone) -> CommunicationDraft:
    if not ai_configured():
        logger.warning("Gemini API key is missing, drafting skipped")
        return MISSING_KEY_DRAFT

    try:
        draft = _run_agent(
            DRAFT_PROMPT.format(topic=topic, tone=tone.value),
            CommunicationDraft,
        )
    except Exception as e:
        logger.error(f"Communication drafting failed: {type(e).__name__}: {e}")
        return FAILED_DRAFT

    if not isinstance(draft, CommunicationDraft) or not draft.content:
        return FAILED_DRAFT
    return draft
