"""
Builder.io Admin API client.

Fetches model schemas over the Admin GraphQL endpoint. Only the read
queries needed for type generation are implemented.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_URL = "https://cdn.builder.io/api/v2/admin"

MODEL_FIELDS = """
          id
          name
          kind
          fields
          hidden
          archived
          publicReadable
          lastUpdateBy
"""

GET_MODELS_QUERY = f"""
      query GetModels {{
        models {{{MODEL_FIELDS}        }}
      }}
"""

GET_MODEL_IDS_QUERY = """
      query GetModelIds {
        models {
          id
          name
        }
      }
"""

GET_MODEL_QUERY = f"""
      query GetModel($id: String!) {{
        model(id: $id) {{{MODEL_FIELDS}        }}
      }}
"""


class BuilderAPIError(Exception):
    """Raised when the Admin API returns an error or cannot be reached."""

    def __init__(self, message: str, status: int = 502):
        super().__init__(message)
        self.message = message
        self.status = status


class BuilderAdminClient:
    """Async GraphQL client for the Builder.io Admin API."""

    def __init__(
        self,
        private_key: str,
        admin_url: str = DEFAULT_ADMIN_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            private_key: Builder.io private API key (``bpk-...``)
            admin_url: Admin GraphQL endpoint
            timeout: Request timeout in seconds
            transport: Custom httpx transport, used by tests
        """
        self.private_key = private_key
        self.admin_url = admin_url
        self.timeout = timeout
        self._transport = transport

    async def _request(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        logger.debug(f"POST {self.admin_url}")
        headers = {
            "Authorization": f"Bearer {self.private_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.admin_url,
                    json={"query": query, "variables": variables or {}},
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logger.error(f"Admin API request failed: {e}")
            raise BuilderAPIError(f"Admin API request failed: {e}") from e

        if response.status_code >= 400:
            message = response.text or response.reason_phrase
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("message"):
                message = body["message"]
            logger.error(f"Admin API returned {response.status_code}: {message}")
            raise BuilderAPIError(message, status=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise BuilderAPIError("Admin API returned invalid JSON") from e
        if not isinstance(payload, dict):
            raise BuilderAPIError("Admin API returned an unexpected payload")

        errors = payload.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            message = (first.get("message") if isinstance(first, dict) else None) or "GraphQL error"
            logger.error(f"Admin API GraphQL error: {message}")
            raise BuilderAPIError(message, status=response.status_code)

        return payload.get("data") or {}

    async def list_models(self) -> List[Dict[str, Any]]:
        """All models with their field schemas."""
        data = await self._request(GET_MODELS_QUERY)
        return data.get("models") or []

    async def list_model_ids(self) -> List[Dict[str, str]]:
        """``{id, name}`` entries for every model, suitable for a model index."""
        data = await self._request(GET_MODEL_IDS_QUERY)
        return data.get("models") or []

    async def get_model(self, model_id: str) -> Optional[Dict[str, Any]]:
        data = await self._request(GET_MODEL_QUERY, {"id": model_id})
        return data.get("model")

    async def get_model_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        """Find a model by its name. Returns ``None`` when no model matches."""
        for model in await self.list_models():
            if model.get("name") == name:
                return model
        return None
