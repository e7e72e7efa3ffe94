"""
Document fetcher: loads a registration's uploaded documents from disk.

The MIME type comes from the file extension only: `.pdf` is sent as
`application/pdf`, everything else is sent as JPEG bytes.  No content
sniffing is done.
"""

from __future__ import annotations

import asyncio
import base64
import os
from dataclasses import dataclass
from pathlib import Path

from driver_onboarding.core.logging import get_logger
from driver_onboarding.validation.errors import DocumentFetchError

logger = get_logger(__name__)

PDF_MIME_TYPE = "application/pdf"
IMAGE_MIME_TYPE = "image/jpeg"


def mime_type_for(path: str) -> str:
    """Derive the upload MIME type from the path's extension."""
    extension = os.path.splitext(path)[1].lower()
    return PDF_MIME_TYPE if extension == ".pdf" else IMAGE_MIME_TYPE


@dataclass(frozen=True)
class FetchedDocument:
    """Raw bytes of one document plus the MIME type they are sent as."""

    path: str
    data: bytes
    mime_type: str

    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def data_url(self) -> str:
        """`data:` URL embedding the document as base64."""
        return f"data:{self.mime_type};base64,{self.base64()}"


class DocumentFetcher:
    """Reads document bytes, resolving relative paths against `base_dir`."""

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self.base_dir = Path(base_dir) if base_dir else None

    def resolve(self, path: str) -> Path:
        candidate = Path(path)
        if self.base_dir is not None and not candidate.is_absolute():
            return self.base_dir / candidate
        return candidate

    async def fetch(self, path: str) -> FetchedDocument:
        """Load one document; raises DocumentFetchError if it is missing or unreadable."""
        if not path:
            raise DocumentFetchError("Document path is empty", path=path)

        resolved = self.resolve(path)
        try:
            data = await asyncio.to_thread(resolved.read_bytes)
        except FileNotFoundError as exc:
            raise DocumentFetchError(f"Document not found: {resolved}", path=str(resolved)) from exc
        except OSError as exc:
            raise DocumentFetchError(
                f"Could not read document {resolved}: {exc.strerror or exc}",
                path=str(resolved),
            ) from exc

        logger.debug("Document loaded", path=str(resolved), size=len(data))
        return FetchedDocument(path=str(resolved), data=data, mime_type=mime_type_for(path))
