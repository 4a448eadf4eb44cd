"""Prompt building and defensive parsing for the LLM packing checklist."""

from __future__ import annotations

import json
import re
from typing import Any, Sequence

from tripcast.domain import Advice, DayAirIndex, DaySummary, Location, PackingChecklist
from tripcast.errors import MalformedLLMOutput
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="checklist")


SYSTEM_PROMPT = """You are a concise travel assistant. All weather and air-quality figures are precomputed.
Never recompute numbers or invent forecasts. Use the provided values.
Output pure JSON only, with keys {"checklist": string[], "notes": string}."""

_FENCE_RE = re.compile(r"```[a-zA-Z]*\s*")


def _strip_markdown_fences(text: str) -> str:
    """Remove Markdown code fences (with optional language tag) anywhere in text."""
    if not text:
        return text
    return _FENCE_RE.sub("", text).replace("```", "").strip()


def build_checklist_messages(
    location: Location,
    days: Sequence[DaySummary],
    advice: Advice,
    air: Sequence[DayAirIndex],
) -> list[dict]:
    """Prepare system+user messages describing the aggregated trip data."""
    weather = {
        "city": location.name,
        "country": location.country,
        "umbrella": advice.umbrella,
        "packing": advice.packing.value,
        "mean_temp_c": advice.mean_temp_c,
        "forecast": [d.model_dump() for d in days],
    }
    air_payload = {"forecast": [a.model_dump() for a in air]}

    user_msg = "\n".join([
        f"Given the next {len(days)} days of daily weather and air quality, produce a short packing "
        "checklist (6-10 items) and a short rationale. Keep it practical; don't include unnecessary items.",
        "Only if air quality is very poor (AQI > 3), include a precaution.",
        "",
        f"Weather: {json.dumps(weather)}",
        "",
        f"Air: {json.dumps(air_payload)}",
    ])
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_msg},
    ]


def extract_json_object(raw_text: str) -> dict:
    """Return the first well-formed JSON object in raw_text.

    Code fences are stripped first, then the whole text is tried, then every
    '{' is tried as the start of an object. Raises MalformedLLMOutput when
    nothing parses to a JSON object.
    """
    text = _strip_markdown_fences(raw_text or "")
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        return parsed

    decoder = json.JSONDecoder()
    for match in re.finditer(r"\{", text):
        try:
            candidate, _end = decoder.raw_decode(text, match.start())
        except ValueError:
            continue
        if isinstance(candidate, dict):
            return candidate
    raise MalformedLLMOutput("No JSON object found in text generation output")


def parse_checklist(raw_text: str) -> PackingChecklist:
    """Parse LLM output into a checklist, degrading to raw notes when it is not JSON."""
    try:
        parsed: dict[str, Any] = extract_json_object(raw_text)
    except MalformedLLMOutput:
        logger.warning("LLM output was not JSON; returning raw text as notes: %s", (raw_text or "")[:200])
        return PackingChecklist(checklist=[], notes=(raw_text or "").strip())

    items = parsed.get("checklist")
    notes = parsed.get("notes")
    return PackingChecklist(
        checklist=[str(i) for i in items] if isinstance(items, list) else [],
        notes=notes if isinstance(notes, str) else "",
    )
