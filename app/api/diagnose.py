# app/api/diagnose.py
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.runtime.flow import make_diagnose_flow
from app.schemas.diagnosis import DiagnosisIn, DiagnosisOut, ErrorOut
from app.services.ml_client import MLClient

router = APIRouter(prefix="/api/diagnose", tags=["diagnose"])


def get_ml_client(request: Request) -> MLClient:
    return request.app.state.ml_client


async def read_payload(request: Request) -> Dict[str, Any]:
    """Clinical fields the caller actually sent; a missing or non-object body counts as {}."""
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}
    return DiagnosisIn.model_validate(body).model_dump(exclude_unset=True)


@router.post(
    "",
    response_model=None,
    responses={200: {"model": DiagnosisOut}, 500: {"model": ErrorOut}},
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": DiagnosisIn.model_json_schema()}},
            "required": False,
        }
    },
)
async def diagnose_endpoint(
    payload: Dict[str, Any] = Depends(read_payload),
    client: MLClient = Depends(get_ml_client),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """
    Suggest diagnoses for a complaint:
    1. Classify the complaint (animal bite or general)
    2. Forward the clinical fields to the matching ML endpoint
    3. Return the response reshaped into the top3 envelope
    """
    shared: Dict[str, Any] = {
        "payload": payload,
        "ml_api_url": settings.ml_api_url,
        "ml_client": client,
    }

    await make_diagnose_flow().run_async(shared)

    return JSONResponse(status_code=shared["status_code"], content=shared["result"])


@router.api_route(
    "",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def diagnose_method_not_allowed() -> JSONResponse:
    return JSONResponse(status_code=405, content={"error": "Method not allowed"})
