"""Creatomate rendering API integration."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from ..core.config import settings
from ..core.structured_logging import log_external_call
from ..models.exceptions import RenderException, ServiceNotConfiguredException

logger = logging.getLogger(__name__)

PENDING_STATUSES = {"planned", "waiting", "transcribing", "rendering"}
MAX_RATE_LIMIT_RETRIES = 5


@dataclass(frozen=True)
class Render:
    id: str
    status: str
    url: Optional[str] = None
    snapshot_url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    template_id: Optional[str] = None
    template_name: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Render":
        return cls(
            id=str(data.get("id", "")),
            status=data.get("status", "unknown"),
            url=data.get("url"),
            snapshot_url=data.get("snapshot_url"),
            width=data.get("width"),
            height=data.get("height"),
            template_id=data.get("template_id"),
            template_name=data.get("template_name"),
            error_message=data.get("error_message"),
        )


class RenderClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        poll_interval: Optional[float] = None,
        poll_attempts: Optional[int] = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key if api_key is not None else settings.creatomate_api_key
        self.base_url = (base_url or settings.creatomate_base_url).rstrip("/")
        self.poll_interval = settings.render_poll_interval if poll_interval is None else poll_interval
        self.poll_attempts = poll_attempts or settings.render_poll_attempts
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise ServiceNotConfiguredException("Rendering service", "CREATOMATE_API_KEY")
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _request_with_retry(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Make request with exponential backoff on 429 errors."""
        headers = self._headers()
        response = None
        for attempt in range(MAX_RATE_LIMIT_RETRIES):
            try:
                response = await client.request(method, url, headers=headers, json=json)
            except httpx.HTTPError as e:
                raise RenderException(f"Rendering service request failed: {e}") from e

            if response.status_code == 429:
                if attempt == MAX_RATE_LIMIT_RETRIES - 1:
                    break
                wait_time = 2 ** attempt
                logger.warning(f"Rendering service rate limited, retrying in {wait_time}s")
                await asyncio.sleep(wait_time)
                continue

            if response.status_code >= 400:
                raise RenderException(
                    f"Rendering service error {response.status_code}: {response.text[:300]}",
                    status_code=response.status_code,
                )
            return response

        raise RenderException("Rendering service rate limit exceeded", status_code=429)

    async def _submit(self, body: Dict[str, Any]) -> List[Render]:
        log_external_call(logger, "creatomate", "render", **{k: v for k, v in body.items() if k != "modifications"})
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await self._request_with_retry(client, "POST", f"{self.base_url}/renders", json=body)
            data = response.json()
            items = data if isinstance(data, list) else [data]
            renders = [Render.from_api(item) for item in items if isinstance(item, dict)]
            return [await self._wait(client, render) for render in renders]

    async def _wait(self, client: httpx.AsyncClient, render: Render) -> Render:
        """Poll until the render succeeds or fails, within the attempt budget."""
        for _ in range(self.poll_attempts):
            if render.status == "succeeded":
                return render
            if render.status == "failed":
                raise RenderException(render.error_message or "Render failed", render_id=render.id)
            if render.status not in PENDING_STATUSES:
                raise RenderException(f"Unexpected render status '{render.status}'", render_id=render.id)
            await asyncio.sleep(self.poll_interval)
            response = await self._request_with_retry(client, "GET", f"{self.base_url}/renders/{render.id}")
            render = Render.from_api(response.json())

        if render.status == "succeeded":
            return render
        raise RenderException("Render did not finish in time", render_id=render.id)

    async def render_template(
        self,
        template_id: str,
        modifications: Optional[Dict[str, Any]] = None,
        output_format: str = "png",
    ) -> List[Render]:
        renders = await self._submit({
            "template_id": template_id,
            "modifications": modifications or {},
            "output_format": output_format,
        })
        if not renders:
            raise RenderException("Rendering service returned no renders")
        return renders

    async def render_by_tags(
        self,
        tags: List[str],
        modifications: Optional[Dict[str, Any]] = None,
        output_format: str = "png",
    ) -> List[Render]:
        """One render per template matching ``tags``; may be empty."""
        return await self._submit({
            "tags": list(tags),
            "modifications": modifications or {},
            "output_format": output_format,
        })

    async def list_templates(self) -> List[Dict[str, Any]]:
        log_external_call(logger, "creatomate", "list_templates")
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await self._request_with_retry(client, "GET", f"{self.base_url}/templates")
            data = response.json()
        return data if isinstance(data, list) else []


def get_render_client() -> RenderClient:
    """FastAPI dependency for the rendering client."""
    return RenderClient()
