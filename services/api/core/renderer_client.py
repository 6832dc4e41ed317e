# services/api/core/renderer_client.py
from __future__ import annotations

import asyncio
import json
import logging

import httpx

from core.errors import (
    EmptyArtifactError,
    RenderError,
    RendererTimeoutError,
    RendererUnreachableError,
)
from schemas.packet import PacketRequest

logger = logging.getLogger(__name__)


def _error_detail(response: httpx.Response) -> str:
    """
    Message body of a failed worker response: JSON `message` when the
    body is JSON, the whole JSON otherwise, else the raw text.
    """
    try:
        data = response.json()
    except ValueError:
        return response.text
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return json.dumps(data)


class RendererClient:
    """
    Talks to the remote PDF worker:

        POST {base_url}/generate-packet   (application/json)
        -> 2xx + application/pdf bytes
    """

    def __init__(self, base_url: str, client: httpx.AsyncClient, timeout: float = 120.0):
        self.base_url = base_url.rstrip("/")
        self.client = client
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/generate-packet"

    async def render(self, packet: PacketRequest) -> bytes:
        """
        Submit the packet request and return the PDF bytes.

        Raises:
            RendererUnreachableError: host could not be reached
            RendererTimeoutError: no answer within `timeout` seconds
            RenderError: non-2xx answer
            EmptyArtifactError: 2xx with an empty body
        """
        logger.info(
            f"Sending request to worker: {self.endpoint} "
            f"{json.dumps(packet.to_log_summary())}"
        )

        try:
            async with asyncio.timeout(self.timeout):
                response = await self.client.post(
                    self.endpoint,
                    json=packet.to_wire(),
                    headers={"Content-Type": "application/json"},
                    timeout=self.timeout,
                )
        except TimeoutError as e:
            logger.error(f"Worker did not answer within {self.timeout}s: {self.endpoint}")
            raise RendererTimeoutError(self.endpoint, self.timeout) from e
        except httpx.TimeoutException as e:
            logger.error(f"Worker timeout: {self.endpoint}: {e}")
            raise RendererTimeoutError(self.endpoint, self.timeout) from e
        except httpx.TransportError as e:
            logger.error(f"Cannot reach worker at {self.endpoint}: {e}")
            raise RendererUnreachableError(self.endpoint) from e

        if not response.is_success:
            message = (
                f"Worker request failed: {response.status_code} {response.reason_phrase}"
                f" - {_error_detail(response)}"
            )
            logger.error(message)
            raise RenderError(response.status_code, message)

        pdf_bytes = response.content
        if len(pdf_bytes) == 0:
            logger.error("Received empty PDF from worker")
            raise EmptyArtifactError()

        logger.info(f"PDF generated successfully: {len(pdf_bytes)} bytes")
        return pdf_bytes
