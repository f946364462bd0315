# app/runtime/nodes/predict.py
from __future__ import annotations

import logging
from typing import Any, Dict
from pocketflow import AsyncNode
from app.services.ml_client import GENERIC_ERROR, MLApiError, MLClient, MLTransportError

logger = logging.getLogger(__name__)


class MLPredictNode(AsyncNode):
    """Call the resolved ML endpoint exactly once.
    - prep_async: endpoint + forwarded body + client from shared
    - exec_async: one HTTP call, no retries
    - exec_fallback_async: collapse any failure into a {status_code, error} record
    - post_async: store the raw response or the failure, route "ok" | "failed"
    """

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("max_retries", 1)
        super().__init__(**kwargs)

    async def prep_async(self, shared: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "client": shared["ml_client"],
            "endpoint": shared["endpoint"],
            "body": dict(shared.get("payload") or {}),
        }

    async def exec_async(self, prep: Dict[str, Any]) -> Dict[str, Any]:
        client: MLClient = prep["client"]
        data = await client.predict(prep["endpoint"], prep["body"])
        return {"data": data}

    async def exec_fallback_async(self, prep: Dict[str, Any], exc: Exception) -> Dict[str, Any]:
        if isinstance(exc, MLTransportError):
            logger.error("ML API unreachable at %s: %s", prep["endpoint"], exc.detail, exc_info=exc)
            return {"status_code": 500, "error": GENERIC_ERROR}
        if isinstance(exc, MLApiError):
            logger.warning("ML API rejected request to %s: %s", prep["endpoint"], exc)
            return {"status_code": exc.status_code, "error": exc.message}
        logger.exception("ML API call to %s failed", prep["endpoint"], exc_info=exc)
        return {"status_code": 500, "error": GENERIC_ERROR}

    async def post_async(self, shared: Dict[str, Any], prep: Dict[str, Any], exec_res: Dict[str, Any]) -> str:
        if "error" in exec_res:
            shared["status_code"] = exec_res["status_code"]
            shared["error"] = exec_res["error"]
            return "failed"
        shared["ml_response"] = exec_res["data"]
        return "ok"
