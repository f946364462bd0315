# app/runtime/flow.py
from __future__ import annotations

from pocketflow import AsyncFlow
from app.runtime.nodes.classify import ComplaintClassifyNode
from app.runtime.nodes.route import EndpointRouteNode
from app.runtime.nodes.predict import MLPredictNode
from app.runtime.nodes.normalize import ErrorResponseNode, ResponseNormalizeNode


def make_diagnose_flow() -> AsyncFlow:
    """Diagnosis suggestion flow:
    classify → (animal_bite | general) → route → predict
            → (ok → normalize)
            → (failed → error_response)

    shared in:  payload, ml_api_url, ml_client
    shared out: is_animal_bite, endpoint, status_code, result
    """

    classify = ComplaintClassifyNode()
    route = EndpointRouteNode()
    predict = MLPredictNode()
    normalize = ResponseNormalizeNode()
    error_response = ErrorResponseNode()

    # Both classifications share the router; the flag in shared picks the path.
    classify.successors = {
        "animal_bite": route,
        "general": route,
    }
    route.successors = {"ok": predict}
    predict.successors = {
        "ok": normalize,
        "failed": error_response,
    }

    return AsyncFlow(start=classify)
