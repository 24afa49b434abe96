"""Rewrite the world display stylesheet and re-host it as a module asset."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import Optional, Protocol

DEFAULT_RESERVED_CLASS = "world-anvil"
DEFAULT_STYLESHEET_NAME = "world-anvil.css"
DEFAULT_ASSET_TARGET = "modules/world-anvil/assets"

STANDALONE_USER_CSS_RE = re.compile(r"\.user-css\S*,")
STACKED_USER_CSS_RE = re.compile(r"\.user-css\S*[\s*]\.user-css\S*")
USER_CSS_RE = re.compile(r"\.user-css\S*")


@dataclass(frozen=True, slots=True)
class UploadResult:
    """Outcome reported by an asset uploader."""

    ok: bool
    path: Optional[str] = None
    status: Optional[int] = None
    message: Optional[str] = None


class AssetUploader(Protocol):
    async def upload(
        self, file_name: str, target_path: str, data: bytes
    ) -> UploadResult:
        ...


def rewrite_stylesheet(
    css: str, *, reserved_class: str = DEFAULT_RESERVED_CLASS
) -> str:
    """Map user-authored ``.user-css*`` selectors onto ``reserved_class``."""

    replacement = f".{reserved_class}"
    css = STANDALONE_USER_CSS_RE.sub("", css)
    css = STACKED_USER_CSS_RE.sub(replacement, css)
    return USER_CSS_RE.sub(replacement, css)


class StylesheetPublisher:
    """Upload rewritten stylesheets and hand back the tag that loads them.

    Without ``upload_timeout`` the upload is fire-and-forget: ``publish``
    schedules it and immediately returns a ``<link>`` to the expected path,
    so the link may point at an asset that never arrives. With a timeout the
    upload is awaited and a failure falls back to an inline ``<style>``.
    """

    def __init__(
        self,
        uploader: AssetUploader,
        *,
        file_name: str = DEFAULT_STYLESHEET_NAME,
        target_path: str = DEFAULT_ASSET_TARGET,
        reserved_class: str = DEFAULT_RESERVED_CLASS,
        upload_timeout: Optional[float] = None,
    ) -> None:
        self.uploader = uploader
        self.file_name = file_name
        self.target_path = target_path.strip("/")
        self.reserved_class = reserved_class
        self.upload_timeout = upload_timeout
        self._pending: set[asyncio.Task[UploadResult]] = set()

    @property
    def href(self) -> str:
        return f"/{self.target_path}/{self.file_name}"

    def link_tag(self) -> str:
        return f'<link href="{self.href}" rel="stylesheet">'

    async def publish(self, css: str) -> str:
        """Rewrite ``css``, submit it for upload and return the style tag."""

        rewritten = rewrite_stylesheet(css, reserved_class=self.reserved_class)
        upload = self.uploader.upload(
            self.file_name, self.target_path, rewritten.encode("utf-8")
        )

        if self.upload_timeout is None:
            task = asyncio.create_task(upload)
            self._pending.add(task)
            task.add_done_callback(self._finish_upload)
            return self.link_tag()

        try:
            result = await asyncio.wait_for(upload, self.upload_timeout)
        except asyncio.TimeoutError:
            print(
                "⚠️ Stylesheet upload timed out after"
                f" {self.upload_timeout}s; inlining styles."
            )
            return f"<style>{rewritten}</style>"
        except Exception as exc:
            print(f"⚠️ Stylesheet upload failed: {exc}; inlining styles.")
            return f"<style>{rewritten}</style>"
        if not result.ok:
            print(
                f"⚠️ Stylesheet upload failed: {result.message};"
                " inlining styles."
            )
            return f"<style>{rewritten}</style>"
        return self.link_tag()

    def _finish_upload(self, task: asyncio.Task[UploadResult]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            print(f"⚠️ Stylesheet upload failed: {exc}")
            return
        result = task.result()
        if result.ok:
            print(f"✅ Stylesheet uploaded: {result.path or self.href}")
        else:
            print(f"⚠️ Stylesheet upload failed: {result.message}")

    @property
    def pending_uploads(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for any background uploads that are still in flight."""

        if self._pending:
            await asyncio.gather(*tuple(self._pending), return_exceptions=True)


__all__ = [
    "AssetUploader",
    "DEFAULT_ASSET_TARGET",
    "DEFAULT_RESERVED_CLASS",
    "DEFAULT_STYLESHEET_NAME",
    "StylesheetPublisher",
    "UploadResult",
    "rewrite_stylesheet",
]
