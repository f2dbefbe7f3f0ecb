"""AI summarization of free-text answers."""
from typing import Dict, List, Optional

import openai
from openai import OpenAI
from pydantic import ValidationError
from sqlalchemy.orm import Session
from zoneinfo import ZoneInfo

from classvote.core import messages
from classvote.core.config import settings
from classvote.core.constants import MAX_SUMMARY_THEMES
from classvote.core.errors import SummarizationError
from classvote.core.logging_config import get_logger
from classvote.core.utils import isoformat, utcnow
from classvote.schemas.results import SummaryResult
from classvote.services.results import free_text_answers
from classvote.services.submission import get_submissions
from classvote.services.utils import write_transaction
from classvote.services.vote import get_vote_or_404

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are an experienced class facilitator who is good at bringing "
    "students' opinions together."
)

PROMPT_TEMPLATE = """Analyze the vote results below and summarize them in {language}.

Vote title: {title}

Submitted opinions:
{submissions}

Your tasks:
1. Overall summary: write a neutral, fair summary that covers every opinion and shows how the different viewpoints are distributed.
2. Main themes: identify up to {max_themes} themes or keywords that recur in the opinions or seem important, and list them.

Follow the requested JSON format. Write all text in {language}."""

RESPONSE_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "summarize_results",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {
                "summary": {
                    "type": "string",
                    "description": "A neutral summary covering all submitted opinions.",
                },
                "themes": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": f"Main themes or topics found in the opinions (at most {MAX_SUMMARY_THEMES}).",
                },
            },
            "required": ["summary", "themes"],
            "additionalProperties": False,
        },
    },
}

def build_client() -> OpenAI:
    """OpenAI client configured from settings; built once at application startup."""
    return OpenAI(api_key=settings.OPENAI_API_KEY, timeout=settings.OPENAI_TIMEOUT)


def build_prompt(title: str, submissions: List[str]) -> str:
    return PROMPT_TEMPLATE.format(
        language=settings.SUMMARY_LANGUAGE,
        title=title,
        submissions="\n".join(f"- {text}" for text in submissions),
        max_themes=MAX_SUMMARY_THEMES,
    )


def summarize_results(title: str, submissions: List[str], client: OpenAI) -> SummaryResult:
    """
    Summarize free-text answers with one structured-output model call.

    With no answers the fixed empty result is returned and the model is not
    called. There is no retry.

    Raises:
        SummarizationError: API failure or output that does not match the schema
    """
    if not submissions:
        return SummaryResult(summary=messages.EMPTY_SUMMARY, themes=[])

    try:
        response = client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(title, submissions)},
            ],
            response_format=RESPONSE_FORMAT,
        )
        content = response.choices[0].message.content
        result = SummaryResult.model_validate_json(content or "")
    except openai.OpenAIError as e:
        logger.error("summarization_api_error", error=str(e), error_type=type(e).__name__)
        raise SummarizationError("The summarization service is unavailable") from e
    except ValidationError as e:
        logger.error("summarization_invalid_output", error=str(e))
        raise SummarizationError("The summarization service returned an invalid result") from e

    result.themes = result.themes[:MAX_SUMMARY_THEMES]
    logger.info("summarization_completed", submissions=len(submissions), themes=len(result.themes))
    return result


def cached_summary(vote, tz: ZoneInfo) -> Optional[Dict]:
    """The summary stored on the vote, if any."""
    if vote.ai_summary is None:
        return None
    return {
        "summary": vote.ai_summary,
        "themes": list(vote.ai_themes or []),
        "summarized_at": isoformat(vote.ai_summarized_at, tz),
        "cached": True,
    }


def summarize_vote(
    db: Session,
    vote_id: str,
    tz: ZoneInfo,
    client: OpenAI,
    force: bool = False,
) -> Dict:
    """
    Summarize a free-text vote, reusing the summary stored on the vote.

    Args:
        client: OpenAI client, only used when the model is actually called
        force: Ignore the stored summary and call the model again

    Returns:
        {"summary", "themes", "summarized_at", "cached"}
    """
    vote = get_vote_or_404(db, vote_id)
    if vote.vote_type != "free_text":
        raise ValueError("Only free-text votes can be summarized")

    if not force:
        stored = cached_summary(vote, tz)
        if stored:
            return stored

    answers = free_text_answers(vote, get_submissions(db, vote_id))
    result = summarize_results(vote.title, answers, client=client)

    with write_transaction(db, "store_summary"):
        vote.ai_summary = result.summary
        vote.ai_themes = list(result.themes)
        vote.ai_summarized_at = utcnow()

    return {
        "summary": result.summary,
        "themes": list(result.themes),
        "summarized_at": isoformat(vote.ai_summarized_at, tz),
        "cached": False,
    }
