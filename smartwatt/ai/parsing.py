"""Best-effort parsing of model replies that should contain JSON."""

import json
import re
from typing import Any

CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


class AIResponseError(ValueError):
    """The model reply could not be turned into the expected structure."""


def strip_code_fences(text: str) -> str:
    match = CODE_FENCE.search(text or "")
    if match and match.group(1).strip():
        return match.group(1).strip()
    return (text or "").strip()


def parse_json_reply(text: str) -> Any:
    try:
        return json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise AIResponseError(f"Reply is not valid JSON: {e.msg}") from e


def parse_recommendations(text: str) -> dict:
    payload = parse_json_reply(text)
    if not isinstance(payload, dict) or not isinstance(payload.get("deviceRecommendations"), list):
        raise AIResponseError("Reply has no deviceRecommendations list")
    tips = payload.get("energySavingTips")
    return {
        "deviceRecommendations": [r for r in payload["deviceRecommendations"] if isinstance(r, dict)],
        "energySavingTips": tips if isinstance(tips, list) else [],
    }


def parse_tips(text: str) -> list:
    payload = parse_json_reply(text)
    if not isinstance(payload, list):
        raise AIResponseError("Reply is not a list of tips")
    return payload
