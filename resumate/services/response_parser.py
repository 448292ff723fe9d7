"""
Response Parser - recover structured JSON from free-form model output.

Models are asked for "ONLY the JSON", but often wrap it in prose or
markdown code fences anyway. Everything coming back from a provider
goes through here before it is trusted.
"""

import json
import re
from typing import Any, List, Optional

from resumate.core.exceptions import MalformedResponse
from resumate.schemas.schemas import MatchMode, MatchResult, ScoreSource


# Greedy: first opening bracket to last closing bracket
_ARRAY_SPAN = re.compile(r"\[[\s\S]*\]")
_OBJECT_SPAN = re.compile(r"\{[\s\S]*\}")

FALLBACK_ID_KEYS = ("candidateId", "studentId", "jobId", "alumniId", "id")


def _first_present(item: dict, keys: tuple) -> Any:
    for key in keys:
        value = item.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def extract_json(text: str, expect: str = "array") -> Any:
    """
    Extract the first bracketed JSON span from text.

    Args:
        text: Raw model output
        expect: "array" to look for [...], "object" to look for {...}

    Returns:
        The deserialized JSON value

    Raises:
        MalformedResponse if there is no span or it does not deserialize
    """
    if not text or not text.strip():
        raise MalformedResponse("empty response", raw_text=text or "")

    pattern = _ARRAY_SPAN if expect == "array" else _OBJECT_SPAN
    match = pattern.search(text)
    if not match:
        raise MalformedResponse(f"no JSON {expect} found", raw_text=text)

    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"invalid JSON: {e.msg}", raw_text=text) from e


def as_string_list(value: Any) -> List[str]:
    """Coerce a declared list field; anything that is not a list becomes []."""
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None and str(item).strip()]


def _single_result(text: str, id_keys: tuple) -> Optional[dict]:
    """A lone result object that opens before any array, e.g. {"alumniId": ..., "reasons": [...]}."""
    brace, bracket = text.find("{"), text.find("[")
    if brace < 0 or 0 <= bracket < brace:
        return None
    try:
        payload = extract_json(text, expect="object")
    except MalformedResponse:
        return None
    if isinstance(payload, dict) and _first_present(payload, id_keys) is not None:
        return payload
    return None


def parse_match_response(text: str, mode: MatchMode, id_key: Optional[str] = None) -> List[MatchResult]:
    """
    Parse a matching response into MatchResults.

    Scores are clamped to the mode's range. Elements that are not objects
    or have no candidate id are skipped. Valid JSON of the wrong shape
    gives an empty list. A single result object counts as a list of one.

    Args:
        text: Raw model output
        mode: Fixes the score range and the reasons key
        id_key: Key tried first for the candidate id, defaults to the mode's

    Raises:
        MalformedResponse when no JSON can be recovered
    """
    id_keys = (id_key or mode.id_key,) + FALLBACK_ID_KEYS

    single = _single_result(text or "", id_keys)
    payload = [single] if single is not None else extract_json(text, expect="array")
    if not isinstance(payload, list):
        return []

    results = []
    for item in payload:
        if not isinstance(item, dict):
            continue

        candidate_id = _first_present(item, id_keys)
        if candidate_id is None:
            continue

        reasons = item.get(mode.reasons_key, item.get("reasons"))
        if mode is MatchMode.alumni_mentor:
            skill_overlap = item.get("skillOverlap")
        else:
            skill_overlap = item.get("skillMatches", item.get("skillOverlap"))

        results.append(MatchResult(
            candidate_id=candidate_id,
            score=mode.clamp(item.get("matchScore", item.get("score"))),
            reasons=as_string_list(reasons),
            skill_overlap=as_string_list(skill_overlap),
            domain_overlap=as_string_list(item.get("domainOverlap")),
            skill_gaps=as_string_list(item.get("skillGaps")),
            source=ScoreSource.ai,
        ))

    return results
