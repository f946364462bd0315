# app/runtime/nodes/classify.py
from __future__ import annotations

from typing import Any, Dict
from pocketflow import AsyncNode

# Loose substring match: "lick" also hits "licked", "clicking", etc.
ANIMAL_BITE_KEYWORDS = (
    "animal bite",
    "dog bite",
    "cat bite",
    "monkey bite",
    "rat bite",
    "fox bite",
    "scratch",
    "lick",
    "rabies",
)


def is_animal_bite_complaint(text: Any) -> bool:
    if not text:
        return False
    t = str(text).lower()
    return any(k in t for k in ANIMAL_BITE_KEYWORDS)


class ComplaintClassifyNode(AsyncNode):
    """Decide between the animal-bite path and the general path.
    - prep_async: pick the complaint out of the request payload
    - exec_async: keyword match (pure)
    - post_async: record the flag and route ("animal_bite" | "general")
    """

    async def prep_async(self, shared: Dict[str, Any]) -> Any:
        return (shared.get("payload") or {}).get("complaint")

    async def exec_async(self, complaint: Any) -> bool:
        return is_animal_bite_complaint(complaint)

    async def post_async(self, shared: Dict[str, Any], prep: Any, is_animal_bite: bool) -> str:
        shared["is_animal_bite"] = is_animal_bite
        return "animal_bite" if is_animal_bite else "general"
