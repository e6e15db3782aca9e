"""Gemini-backed helpers: free-text subscription parsing and spending commentary."""

import json
import logging
import re
from datetime import date

import google.generativeai as genai
from pydantic import ValidationError

from subsmart.config import settings
from subsmart.models.subscription import BillingCycle, Category
from subsmart.schemas.assistant import SubscriptionDraft
from subsmart.services.dates import today

logger = logging.getLogger(__name__)

NO_KEY_INSIGHT = "Set GEMINI_API_KEY to enable AI spending insights."
FALLBACK_INSIGHT = "Reviewing your subscriptions regularly is an easy way to save money."
EMPTY_REPLY_INSIGHT = "Keep tracking your spending!"

_CJK = re.compile(r"[一-鿿]")

_PARSE_PROMPT = """Extract subscription details from this text: "{text}".
Today's date is {today}.
Infer the category based on the service name.
If no currency is specified, assume TWD if the text is Chinese, or USD if it is English.
If no date is specified, use today's date.

Return only a JSON object with these keys:
- "name": name of the service (e.g. Netflix, Adobe)
- "price": cost of the subscription as a number
- "currency": currency code (e.g. USD, TWD)
- "billing_cycle": one of {cycles}
- "first_bill_date": ISO 8601 date (YYYY-MM-DD)
- "category": one of {categories}
- "description": short description
- "website_url": URL of the service if detectable
"""

_INSIGHT_PROMPT = """Here is a list of my subscriptions: {summary}.
Provide a very brief (max 2 sentences) financial tip or observation about my spending habits.
Be encouraging but realistic."""


class AIServiceError(Exception):
    """The AI service failed or returned something unusable."""


class AIUnavailableError(AIServiceError):
    """No API key is configured."""


async def _generate(prompt: str, json_mode: bool = False) -> str:
    genai.configure(api_key=settings.GEMINI_API_KEY)
    model = genai.GenerativeModel(settings.GEMINI_MODEL)
    config = genai.GenerationConfig(
        temperature=0.1,
        response_mime_type="application/json" if json_mode else "text/plain",
    )
    response = await model.generate_content_async(prompt, generation_config=config)
    return response.text


def _clean_response(raw: str) -> str:
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.split("\n", 1)[1] if "\n" in cleaned else cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def default_currency_for(text: str) -> str:
    return "TWD" if _CJK.search(text) else "USD"


async def parse_subscription_input(text: str, reference: date | None = None) -> SubscriptionDraft:
    """Turn a sentence like "Netflix 390 a month" into a subscription draft.

    Raises:
        AIUnavailableError: no Gemini API key is configured.
        AIServiceError: the call failed or the reply was not a usable draft.
    """
    if not settings.GEMINI_API_KEY:
        raise AIUnavailableError("GEMINI_API_KEY is not configured")

    reference = reference or today()
    prompt = _PARSE_PROMPT.format(
        text=text,
        today=reference.isoformat(),
        cycles=", ".join(c.value for c in BillingCycle),
        categories=", ".join(c.value for c in Category),
    )

    try:
        raw = await _generate(prompt, json_mode=True)
    except Exception as e:
        logger.error(f"Gemini API error: {e}")
        raise AIServiceError("AI request failed") from e

    if not raw:
        raise AIServiceError("No data returned from AI")

    try:
        data = json.loads(_clean_response(raw))
    except json.JSONDecodeError as e:
        logger.warning(f"Gemini returned non-JSON: {raw!r}")
        raise AIServiceError("AI reply was not valid JSON") from e
    if not isinstance(data, dict):
        raise AIServiceError("AI reply was not a JSON object")

    data = {k: v for k, v in data.items() if v not in (None, "")}
    data.setdefault("currency", default_currency_for(text))
    data.setdefault("first_bill_date", reference.isoformat())

    try:
        draft = SubscriptionDraft.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Gemini reply failed validation: {e}")
        raise AIServiceError("AI reply is missing required subscription fields") from e

    logger.info(f"Gemini parsed subscription: {draft.name}")
    return draft


async def get_spending_insights(subs) -> str:
    """Short spending commentary; never raises."""
    if not subs:
        return ""
    if not settings.GEMINI_API_KEY:
        return NO_KEY_INSIGHT

    summary = ", ".join(f"{s.name}: {s.currency} {s.price} / {s.billing_cycle.value}" for s in subs)
    try:
        reply = await _generate(_INSIGHT_PROMPT.format(summary=summary))
    except Exception as e:
        logger.error(f"Error getting insights: {e}")
        return FALLBACK_INSIGHT
    return reply.strip() if reply else EMPTY_REPLY_INSIGHT
