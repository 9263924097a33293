import asyncio
import logging
from dataclasses import dataclass
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from .config import Settings
from .models import DeploymentFile

logger = logging.getLogger("deploytree")

MAX_ATTEMPTS = 4
BACKOFF_S = 0.5


class EngineError(Exception):
    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


def _path_segment(value: str) -> str:
    # ids are single path segments; quote() leaves dot segments intact
    if value in (".", ".."):
        raise EngineError(404, f"Deployment not found: invalid id {value!r}")
    return quote(value, safe="")


@dataclass
class EngineClient:
    base_url: str
    token: str = ""
    timeout_s: float = 10

    @classmethod
    def from_env(cls):
        settings = Settings.from_env()
        if not settings.engine_url:
            raise EngineError(503, "Engine env not configured")
        return cls(settings.engine_url, settings.engine_token, settings.engine_timeout_s)

    def files_url(self, site_id: str, deployment_id: str) -> str:
        site, deployment = _path_segment(site_id), _path_segment(deployment_id)
        return f"{self.base_url.rstrip('/')}/site/{site}/deployments/{deployment}/files"

    async def _get(self, url: str) -> httpx.Response:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        # retry network errors with backoff; HTTP error statuses are final
        for attempt in range(MAX_ATTEMPTS):
            try:
                async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                    return await client.get(url, headers=headers)
            except httpx.RequestError as e:
                if attempt == MAX_ATTEMPTS - 1:
                    raise EngineError(504, f"Network error talking to engine: {e}") from e
                logger.warning("engine request failed (attempt %d): %s", attempt + 1, e)
                await asyncio.sleep(BACKOFF_S * (2 ** attempt))
        raise EngineError(502, "Engine unavailable after retries")

    async def list_deployment_files(self, site_id: str, deployment_id: str) -> list[DeploymentFile]:
        resp = await self._get(self.files_url(site_id, deployment_id))
        if resp.status_code == 404:
            raise EngineError(404, f"Deployment not found: {site_id}/{deployment_id}")
        if resp.status_code in (401, 403):
            raise EngineError(502, f"Engine rejected credentials ({resp.status_code})")
        if resp.status_code >= 400:
            raise EngineError(502, f"Engine returned {resp.status_code}: {resp.text[:200]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise EngineError(502, f"Engine returned invalid JSON: {e}") from e
        if not isinstance(data, list):
            raise EngineError(502, "Engine returned unexpected payload, expected a list of files")
        try:
            return [DeploymentFile.model_validate(item) for item in data]
        except ValidationError as e:
            raise EngineError(502, f"Engine returned malformed file entries: {e.error_count()} errors") from e
