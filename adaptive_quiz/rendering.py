"""
Best-effort rendering of question prompts to PNG images.

The quiz never waits on a render: callers schedule `render` in the background
and pick up the image when (and if) `on_ready` fires. A failed fetch is only
logged, and the callback is not invoked.
"""

from __future__ import annotations

import logging
import tempfile
import time
from pathlib import Path
from typing import Callable, Optional, Protocol

import httpx

LOGGER = logging.getLogger(__name__)

CODECOGS_BASE_URL = "https://latex.codecogs.com/"

# characters the image endpoint needs spelled out as HTML entities
_LATEX_ESCAPES = {
    "+": "&plus;",
    " ": "&space;",
}

OnReady = Callable[[Path], None]


class PromptRenderer(Protocol):
    async def render(self, latex: str, on_ready: Optional[OnReady] = None) -> Optional[Path]:
        ...


class NullRenderer:
    """Renderer used when prompt images are disabled."""

    async def render(self, latex: str, on_ready: Optional[OnReady] = None) -> Optional[Path]:
        return None


def build_render_url(latex: str, dpi: int = 300, background: str = "transparent") -> str:
    if not latex:
        latex = "null"
    # other whitespace (tabs, newlines) is dropped; the endpoint has no escape for it
    body = "".join(_LATEX_ESCAPES.get(ch, ch.strip()) for ch in latex)
    return f"{CODECOGS_BASE_URL}png.image?\\dpi{{{dpi}}}\\bg{{{background}}}{body}"


class CodecogsRenderer:
    def __init__(
        self,
        output_dir: Path | None = None,
        *,
        dpi: int = 300,
        background: str = "transparent",
        client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        self.output_dir = Path(output_dir) if output_dir else Path(tempfile.gettempdir())
        self.dpi = dpi
        self.background = background
        self._client = client
        self._timeout = timeout

    async def _fetch(self, url: str) -> bytes:
        if self._client is not None:
            response = await self._client.get(url)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(url)
        response.raise_for_status()
        return response.content

    async def render(self, latex: str, on_ready: Optional[OnReady] = None) -> Optional[Path]:
        url = build_render_url(latex, self.dpi, self.background)
        LOGGER.debug("%r produces URL %s", latex, url)
        try:
            data = await self._fetch(url)
        except httpx.HTTPError as exc:
            LOGGER.error("prompt render failed for %r: %s", latex, exc)
            return None

        path = self.output_dir / f"temp-latex-{time.time_ns()}.png"
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            LOGGER.error("could not save prompt image to %s: %s", path, exc)
            return None
        LOGGER.debug("saved prompt image to %s", path)
        if on_ready is not None:
            on_ready(path)
        return path
