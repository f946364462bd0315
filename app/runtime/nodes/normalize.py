# app/runtime/nodes/normalize.py
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping
from pocketflow import AsyncNode
from app.services.ml_client import GENERIC_ERROR

DEFAULT_CATEGORY = "Animal Bite Category 2"
DEFAULT_CONFIDENCE = 0.9

_CATEGORY_I = (
    "Minor animal contact with intact skin. Low rabies risk. "
    "Clean wound thoroughly and monitor for signs of infection."
)
_CATEGORY_II = (
    "Nibbling or minor scratches with bleeding. Moderate rabies risk. "
    "Requires wound cleaning and rabies vaccination series."
)
_CATEGORY_III = (
    "Deep bite wounds or scratches. High rabies risk. "
    "Requires immediate wound cleaning, rabies vaccination, and immunoglobulin."
)

# Keys are matched exactly; the ML service emits both roman and numeric labels.
ANIMAL_BITE_EXPLANATIONS: Mapping[str, str] = MappingProxyType({
    "Animal Bite Category I": _CATEGORY_I,
    "Animal Bite Category II": _CATEGORY_II,
    "Animal Bite Category III": _CATEGORY_III,
    "Animal Bite Category 1": _CATEGORY_I,
    "Animal Bite Category 2": _CATEGORY_II,
    "Animal Bite Category 3": _CATEGORY_III,
})

FALLBACK_EXPLANATION = (
    "Animal bite exposure requiring medical evaluation. Please consult with a "
    "healthcare provider for proper assessment and treatment."
)


def animal_bite_explanation(category: Any) -> str:
    if isinstance(category, str) and category in ANIMAL_BITE_EXPLANATIONS:
        return ANIMAL_BITE_EXPLANATIONS[category]
    return FALLBACK_EXPLANATION


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def normalize(is_animal_bite: bool, raw: Any) -> Dict[str, Any]:
    """Reshape an ML response into the top3 envelope the UI reads.

    General responses keep their own top3 entries. Animal-bite responses carry
    a single category, which becomes the only top3 entry; treatment and
    urgency_level are copied only when the service sent them.
    """
    data: Dict[str, Any] = raw if isinstance(raw, dict) else {}

    if not is_animal_bite:
        top3 = data.get("top3")
        return {"top3": top3 if isinstance(top3, list) else []}

    category = data.get("category") or DEFAULT_CATEGORY
    confidence = data.get("category_confidence")
    if not _is_number(confidence):
        confidence = DEFAULT_CONFIDENCE

    out: Dict[str, Any] = {
        "top3": [
            {
                "diagnosis": category,
                "probability": confidence,
                "explanation": animal_bite_explanation(category),
            }
        ],
        "category": category,
        "category_confidence": confidence,
    }
    for key in ("treatment", "urgency_level"):
        if key in data:
            out[key] = data[key]
    return out


class ResponseNormalizeNode(AsyncNode):
    async def prep_async(self, shared: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "is_animal_bite": bool(shared.get("is_animal_bite")),
            "raw": shared.get("ml_response"),
        }

    async def exec_async(self, prep: Dict[str, Any]) -> Dict[str, Any]:
        return normalize(prep["is_animal_bite"], prep["raw"])

    async def post_async(self, shared: Dict[str, Any], prep: Dict[str, Any], exec_res: Dict[str, Any]) -> str:
        shared["status_code"] = 200
        shared["result"] = exec_res
        return "ok"


class ErrorResponseNode(AsyncNode):
    """Terminal node for the failed branch: shape the {"error": ...} body."""

    async def prep_async(self, shared: Dict[str, Any]) -> Dict[str, Any]:
        return {"status_code": shared.get("status_code", 500), "error": shared.get("error")}

    async def exec_async(self, prep: Dict[str, Any]) -> Dict[str, Any]:
        return {"status_code": prep["status_code"], "body": {"error": prep["error"] or GENERIC_ERROR}}

    async def post_async(self, shared: Dict[str, Any], prep: Dict[str, Any], exec_res: Dict[str, Any]) -> str:
        shared["status_code"] = exec_res["status_code"]
        shared["result"] = exec_res["body"]
        return "failed"
