#!/usr/bin/env python3
# symbol_art/acquire.py
"""
Image acquisition: local files and remote URLs -> RGBA PixelBuffer.

Features:
- HTTP session with automatic retry using urllib3 Retry.
- imgur page links (https://imgur.com/<id>) are rewritten to direct image
  links (https://i.imgur.com/<id><ext>). The link's own extension is tried
  first, then each configured fallback extension in order.
- Optional downscale to a maximum width, keeping the aspect ratio.

Every failure surfaces as AcquisitionError; nothing here is retried by the
caller.
"""

from __future__ import annotations

import io
import logging
import os
import re
from typing import Iterable, List, Optional, Sequence

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from PIL import Image, ImageOps, UnidentifiedImageError

from symbol_art.config import Config
from symbol_art.errors import AcquisitionError
from symbol_art.imaging.pixel_buffer import PixelBuffer

__all__ = [
    "ImageLoader",
    "candidate_urls",
    "fit_width",
    "is_url",
]

log = logging.getLogger(__name__)

_IMGUR_RE = re.compile(r".*imgur.*/([a-zA-Z0-9]+)(\.[a-zA-Z0-9]+)?$")


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def candidate_urls(url: str, fallback_exts: Sequence[str]) -> List[str]:
    """
    Return the URLs to try for ``url``, in order.
    Non-imgur URLs are tried as given.
    """
    m = _IMGUR_RE.match(url.strip())
    if not m:
        return [url]
    image_id, ext = m.group(1), m.group(2)
    exts: List[str] = []
    for e in ([ext] if ext else []) + list(fallback_exts):
        if e not in exts:
            exts.append(e)
    return [f"https://i.imgur.com/{image_id}{e}" for e in exts]


def fit_width(img: Image.Image, max_width: int) -> Image.Image:
    if max_width <= 0 or img.width <= max_width:
        return img
    ratio = max_width / float(img.width)
    height = max(1, int(img.height * ratio))
    return img.resize((max_width, height), Image.LANCZOS)


def _decode(raw: bytes) -> Image.Image:
    with Image.open(io.BytesIO(raw)) as img:
        img = ImageOps.exif_transpose(img)
        return img.convert("RGBA")


class ImageLoader:
    """
    Loads source images for the pipeline.
    Thread-safe for concurrent reads; one HTTP session per loader.
    """

    def __init__(
        self,
        user_agent: str,
        connect_timeout: float = 5.0,
        read_timeout: float = 15.0,
        retries: int = 2,
        fallback_exts: Iterable[str] = (".jpg", ".jpeg", ".tif"),
        max_width: int = 0,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = (connect_timeout, read_timeout)
        self.fallback_exts = list(fallback_exts)
        self.max_width = max_width

        if session is None:
            session = requests.Session()
            retry = Retry(
                total=retries,
                connect=retries,
                read=retries,
                backoff_factor=0.3,
                status_forcelist=(429, 500, 502, 503, 504),
                allowed_methods=False,
            )
            adapter = HTTPAdapter(max_retries=retry)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
        session.headers["User-Agent"] = user_agent
        self.session = session

    @classmethod
    def from_config(cls, cfg: Config, session: Optional[requests.Session] = None) -> "ImageLoader":
        n = cfg["network"]
        return cls(
            n["user_agent"],
            connect_timeout=n["connect_timeout_s"],
            read_timeout=n["read_timeout_s"],
            retries=n["retries"],
            fallback_exts=n["fallback_exts"],
            max_width=cfg["image"]["max_width"],
            session=session,
        )

    # -------------
    # Fetch logic
    # -------------

    def load(self, source: str) -> PixelBuffer:
        """Load a path or URL and return it as an RGBA raster."""
        img = self.fetch_url(source) if is_url(source) else self.open_file(source)
        img = fit_width(img, self.max_width)
        log.info("Loaded image: %dx%d", img.width, img.height)
        return PixelBuffer.from_image(img)

    def open_file(self, path: str) -> Image.Image:
        path = os.path.expanduser(path)
        try:
            with open(path, "rb") as f:
                return _decode(f.read())
        except (OSError, UnidentifiedImageError) as e:
            raise AcquisitionError(f"Failed to load image file {path}: {e}") from e

    def fetch_url(self, url: str) -> Image.Image:
        candidates = candidate_urls(url, self.fallback_exts)
        for i, candidate in enumerate(candidates):
            log.info("Load: %s", candidate)
            try:
                r = self.session.get(candidate, timeout=self.timeout)
                r.raise_for_status()
                if not r.content:
                    raise ValueError("empty response")
                return _decode(r.content)
            except (requests.RequestException, OSError, ValueError, UnidentifiedImageError) as e:
                if i + 1 < len(candidates):
                    log.warning("Error: %s -> retry", e)
                else:
                    log.warning("Error: %s", e)
        raise AcquisitionError(f"Failed to load image from {url}")
