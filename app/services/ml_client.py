# app/services/ml_client.py
import logging
import httpx
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

GENERIC_ERROR = "ML API failed"


class MLApiError(RuntimeError):
    """The ML service answered with a non-success status."""

    def __init__(self, status_code: int, message: str = GENERIC_ERROR) -> None:
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class MLTransportError(MLApiError):
    """The ML service could not be reached or answered with an unreadable body."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(500, GENERIC_ERROR)
        self.detail = detail


def upstream_error_message(data: Any) -> str:
    if isinstance(data, dict):
        for key in ("error", "message"):
            msg = data.get(key)
            if msg:
                return str(msg)
    return GENERIC_ERROR


class MLClient:
    """Thin client for the external diagnosis ML service.

    Endpoints are passed as absolute URLs (the caller resolves them), so the
    client itself carries no base URL. One attempt per call, no retries.
    """

    def __init__(
        self,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        # Single AsyncClient shared across requests; lifecycle owned by the app.
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def predict(self, url: str, payload: Dict[str, Any]) -> Any:
        """
        POST the clinical payload to `url` and return the decoded JSON body.
        Raises MLApiError on a non-success status, MLTransportError when the
        service is unreachable or a success body is not a JSON object.
        """
        try:
            res = await self._client.post(url, json=payload)
            data = res.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            raise MLTransportError(f"{type(e).__name__}: {e}") from e

        if not res.is_success:
            raise MLApiError(res.status_code, upstream_error_message(data))
        if not isinstance(data, dict):
            raise MLTransportError(f"expected a JSON object, got {type(data).__name__}")
        return data
