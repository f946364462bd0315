# test/test_api.py
import httpx
import pytest
import pytest_asyncio
from typing import Any, Dict, List

from app.api.diagnose import get_ml_client
from app.config import Settings, get_settings
from app.main import app
from app.services.ml_client import MLApiError, MLTransportError


class FakeMLClient:
    def __init__(self, reply: Any = None, exc: Exception | None = None) -> None:
        self.reply = reply
        self.exc = exc
        self.calls: List[Dict[str, Any]] = []

    async def predict(self, url: str, payload: Dict[str, Any]) -> Any:
        self.calls.append({"url": url, "payload": payload})
        if self.exc is not None:
            raise self.exc
        return self.reply


@pytest.fixture
def ml():
    return FakeMLClient(reply={"top3": []})


@pytest_asyncio.fixture
async def client(ml):
    app.dependency_overrides[get_ml_client] = lambda: ml
    app.dependency_overrides[get_settings] = lambda: Settings(ml_api_url="http://fake-ml")
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_bite_scenario(client, ml):
    ml.reply = {"category": "Animal Bite Category III", "category_confidence": 0.95}

    res = await client.post("/api/diagnose", json={"complaint": "licked by dog"})

    assert res.status_code == 200
    assert res.json() == {
        "top3": [
            {
                "diagnosis": "Animal Bite Category III",
                "probability": 0.95,
                "explanation": (
                    "Deep bite wounds or scratches. High rabies risk. Requires immediate "
                    "wound cleaning, rabies vaccination, and immunoglobulin."
                ),
            }
        ],
        "category": "Animal Bite Category III",
        "category_confidence": 0.95,
    }
    assert ml.calls == [{"url": "http://fake-ml/predict-animal-bite", "payload": {"complaint": "licked by dog"}}]


@pytest.mark.asyncio
async def test_general_scenario_passes_through(client, ml):
    ml.reply = {"top3": [{"diagnosis": "Influenza", "probability": 0.8}]}

    res = await client.post("/api/diagnose", json={"complaint": "fever for 3 days"})

    assert res.status_code == 200
    assert res.json() == {"top3": [{"diagnosis": "Influenza", "probability": 0.8}]}
    assert ml.calls[0]["url"] == "http://fake-ml/predict"


@pytest.mark.asyncio
async def test_bite_path_keeps_treatment_and_urgency(client, ml):
    ml.reply = {"category": "Animal Bite Category 1", "treatment": ["wash"], "urgency_level": "low"}

    res = await client.post("/api/diagnose", json={"complaint": "cat bite"})

    body = res.json()
    assert body["category_confidence"] == 0.9
    assert body["treatment"] == ["wash"]
    assert body["urgency_level"] == "low"
    assert len(body["top3"]) == 1


@pytest.mark.asyncio
async def test_upstream_status_and_message_surface(client, ml):
    ml.exc = MLApiError(503, "model unavailable")

    res = await client.post("/api/diagnose", json={"complaint": "cough"})

    assert res.status_code == 503
    assert res.json() == {"error": "model unavailable"}


@pytest.mark.asyncio
async def test_network_failure_is_generic_500(client, ml):
    ml.exc = MLTransportError("ConnectError: connection refused")

    res = await client.post("/api/diagnose", json={"complaint": "cough"})

    assert res.status_code == 500
    assert res.json() == {"error": "ML API failed"}


@pytest.mark.asyncio
async def test_only_supplied_fields_are_forwarded(client, ml):
    body = {
        "complaint": "headache",
        "age": 52,
        "systolic_bp": "150",
        "diastolic_bp": "95",
        "temperature_c": None,
        "unexpected": "dropped",
    }

    await client.post("/api/diagnose", json=body)

    assert ml.calls[0]["payload"] == {
        "complaint": "headache",
        "age": 52,
        "systolic_bp": "150",
        "diastolic_bp": "95",
        "temperature_c": None,
    }


@pytest.mark.asyncio
async def test_missing_body_is_treated_as_empty(client, ml):
    res = await client.post("/api/diagnose")

    assert res.status_code == 200
    assert res.json() == {"top3": []}
    assert ml.calls == [{"url": "http://fake-ml/predict", "payload": {}}]


@pytest.mark.asyncio
async def test_non_string_complaint_is_coerced_and_forwarded(client, ml):
    res = await client.post("/api/diagnose", json={"complaint": 123, "age": {"years": 3}})

    assert res.status_code == 200
    assert res.json() == {"top3": []}
    assert ml.calls == [
        {"url": "http://fake-ml/predict", "payload": {"complaint": 123, "age": {"years": 3}}}
    ]


@pytest.mark.asyncio
async def test_boolean_complaint_is_not_rejected(client, ml):
    res = await client.post("/api/diagnose", json={"complaint": True})

    assert res.status_code == 200
    assert ml.calls[0]["payload"] == {"complaint": True}


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["[]", "null", "\"dog bite\"", "{not json"])
async def test_non_object_body_is_treated_as_empty(client, ml, raw):
    res = await client.post(
        "/api/diagnose", content=raw, headers={"Content-Type": "application/json"}
    )

    assert res.status_code == 200
    assert res.json() == {"top3": []}
    assert ml.calls == [{"url": "http://fake-ml/predict", "payload": {}}]


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def test_other_methods_are_rejected(client, ml, method):
    res = await client.request(method, "/api/diagnose")

    assert res.status_code == 405
    assert res.json() == {"error": "Method not allowed"}
    assert ml.calls == []


@pytest.mark.asyncio
async def test_health_reports_configuration(client):
    res = await client.get("/health")

    assert res.status_code == 200
    assert res.json() == {"status": "ok", "ml_api_url": "http://fake-ml", "ml_api_configured": True}
