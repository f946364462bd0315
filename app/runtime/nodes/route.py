# app/runtime/nodes/route.py
from __future__ import annotations

import logging
from typing import Any, Dict
from pocketflow import AsyncNode

logger = logging.getLogger(__name__)

GENERAL_PATH = "/predict"
ANIMAL_BITE_PATH = "/predict-animal-bite"


def resolve_endpoint(base_url: str | None, is_animal_bite: bool) -> str:
    """Plain concatenation; an empty base yields a path-only URL that fails downstream."""
    return (base_url or "") + (ANIMAL_BITE_PATH if is_animal_bite else GENERAL_PATH)


class EndpointRouteNode(AsyncNode):
    """Resolve the ML endpoint for the classified complaint.

    The base URL is injected through shared["ml_api_url"]; it is never read
    from the environment here.
    """

    async def prep_async(self, shared: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "base_url": shared.get("ml_api_url") or "",
            "is_animal_bite": bool(shared.get("is_animal_bite")),
        }

    async def exec_async(self, prep: Dict[str, Any]) -> str:
        return resolve_endpoint(prep["base_url"], prep["is_animal_bite"])

    async def post_async(self, shared: Dict[str, Any], prep: Dict[str, Any], endpoint: str) -> str:
        shared["endpoint"] = endpoint
        logger.debug("complaint routed to %s", endpoint)
        return "ok"
