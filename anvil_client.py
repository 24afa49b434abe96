"""World Anvil article source and stylesheet asset uploaders."""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional

try:
    from playwright.async_api import (  # type: ignore[import-not-found]
        APIRequestContext,
        Error as PlaywrightError,
        async_playwright,
    )
except ImportError as exc:  # pragma: no cover - surfacing missing dependency
    raise SystemExit(
        "Missing dependency 'playwright'. Install with pip install playwright"
    ) from exc

from anvil_transform.models import Article
from anvil_transform.stylesheet import UploadResult

DEFAULT_API_BASE_URL = "https://www.worldanvil.com/api/aragorn"
DEFAULT_TIMEOUT_MS = 30_000


class ArticleFetchError(Exception):
    """Raised when an article cannot be retrieved from its source."""


class AnvilClient:
    """Thin async client over the World Anvil HTTP API."""

    def __init__(
        self,
        request: APIRequestContext,
        *,
        api_base_url: str = DEFAULT_API_BASE_URL,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        self.request = request
        self.api_base_url = api_base_url.rstrip("/")
        self.timeout_ms = timeout_ms

    @classmethod
    @asynccontextmanager
    async def connect(
        cls,
        *,
        application_key: str = "",
        auth_token: str = "",
        api_base_url: str = DEFAULT_API_BASE_URL,
    ) -> AsyncIterator["AnvilClient"]:
        """Yield a client backed by a fresh Playwright request context."""

        headers: Dict[str, str] = {"Accept": "application/json"}
        if application_key:
            headers["x-application-key"] = application_key
        if auth_token:
            headers["x-auth-token"] = auth_token

        async with async_playwright() as playwright:
            request = await playwright.request.new_context(
                extra_http_headers=headers
            )
            try:
                yield cls(request, api_base_url=api_base_url)
            finally:
                await request.dispose()

    async def _get_json(self, path: str) -> Dict[str, Any]:
        url = f"{self.api_base_url}/{path.lstrip('/')}"
        try:
            response = await self.request.get(url, timeout=self.timeout_ms)
        except PlaywrightError as exc:
            raise ArticleFetchError(f"GET {url} failed: {exc}") from exc
        if not response.ok:
            raise ArticleFetchError(
                f"GET {url} returned {response.status} {response.status_text}"
            )
        try:
            payload = await response.json()
        except (PlaywrightError, ValueError) as exc:
            raise ArticleFetchError(
                f"GET {url} returned invalid JSON: {exc}"
            ) from exc
        if not isinstance(payload, dict):
            raise ArticleFetchError(f"GET {url} returned a non-object body")
        return payload

    async def get_article(self, article_id: str) -> Article:
        """Fetch and normalize a single article."""

        payload = await self._get_json(f"article/{article_id}")
        return Article.from_dict(payload)

    async def get_display_css(self, world_id: str) -> str:
        """Return the world's custom display stylesheet (may be empty)."""

        payload = await self._get_json(f"world/{world_id}")
        return str(payload.get("display_css") or "")

    def uploader(self, upload_url: str) -> "HttpAssetUploader":
        return HttpAssetUploader(self.request, upload_url)


class JsonArticleSource:
    """Article source reading exported payloads from disk.

    ``path`` is either a single JSON file or a directory of
    ``<article_id>.json`` files.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    async def get_article(self, article_id: str) -> Article:
        target = (
            self.path / f"{article_id}.json"
            if self.path.is_dir()
            else self.path
        )
        try:
            payload = json.loads(target.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ArticleFetchError(
                f"Unable to read article {article_id} from {target}: {exc}"
            ) from exc
        if not isinstance(payload, dict):
            raise ArticleFetchError(f"{target} does not hold an article")
        article = Article.from_dict(payload)
        if not article.id:
            article.id = article_id
        return article

    async def get_display_css(self, world_id: str) -> str:
        css_path = self.path.parent / "display.css"
        if self.path.is_dir():
            css_path = self.path / "display.css"
        if css_path.exists():
            return css_path.read_text(encoding="utf-8")
        return ""


class HttpAssetUploader:
    """Upload assets with a multipart POST, as a Foundry server expects."""

    def __init__(
        self,
        request: APIRequestContext,
        upload_url: str,
        *,
        source: str = "data",
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        self.request = request
        self.upload_url = upload_url
        self.source = source
        self.timeout_ms = timeout_ms

    async def upload(
        self, file_name: str, target_path: str, data: bytes
    ) -> UploadResult:
        path = f"{target_path.strip('/')}/{file_name}"
        try:
            response = await self.request.post(
                self.upload_url,
                multipart={
                    "source": self.source,
                    "target": target_path,
                    "upload": {
                        "name": file_name,
                        "mimeType": "text/css",
                        "buffer": data,
                    },
                },
                timeout=self.timeout_ms,
            )
        except PlaywrightError as exc:
            return UploadResult(ok=False, path=path, message=str(exc))
        message: Optional[str] = None
        if not response.ok:
            message = f"{response.status} {response.status_text}"
        return UploadResult(
            ok=response.ok,
            path=path,
            status=response.status,
            message=message,
        )


class DirectoryAssetUploader:
    """Write assets under a local directory instead of uploading them."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    async def upload(
        self, file_name: str, target_path: str, data: bytes
    ) -> UploadResult:
        destination = self.root / target_path.strip("/") / file_name
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(data)
        except OSError as exc:
            return UploadResult(
                ok=False, path=str(destination), message=str(exc)
            )
        return UploadResult(ok=True, path=str(destination))


__all__ = [
    "AnvilClient",
    "ArticleFetchError",
    "DirectoryAssetUploader",
    "HttpAssetUploader",
    "JsonArticleSource",
]
