"""Content extraction per resource kind.

- BLOG: fetch the page and take text from ``h1``, ``p`` and ``span``.
- SUBSTACK / ARXIV_HTML: fetch the page and take text from ``p`` only.
- ARXIV_PDF: download the document into a staging directory, open it with
  PyMuPDF and take the text of every page in order.

A failed fetch is reported as such; page parsing only runs on a fetched
body, so network errors always take priority over parse errors.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Tuple

import fitz  # PyMuPDF
import httpx
from bs4 import BeautifulSoup

from .downloader import DownloadError, download_pdf
from .errors import ExtractionError
from .models import ReadingResource, ResourceKind
from .nlp import clean_text

logger = logging.getLogger(__name__)

BLOG_CONTENT_SELECTOR = "h1, p, span"
POST_CONTENT_SELECTOR = "p"
POST_TITLE_SELECTOR = "h1.post-title, h1.article-title, .post-title, .article-title, .ltx_title_document"

HTML_KINDS = frozenset({ResourceKind.BLOG, ResourceKind.SUBSTACK, ResourceKind.ARXIV_HTML})


async def fetch_page(url: str, client: httpx.AsyncClient) -> str:
    try:
        resp = await client.get(url)
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        raise ExtractionError(f"failed to fetch {url}: {exc}") from exc
    return resp.text


def _texts(soup: BeautifulSoup, selector: str) -> List[str]:
    fragments = []
    for element in soup.select(selector):
        text = clean_text(element.get_text(" ", strip=True))
        if text:
            fragments.append(text)
    return fragments


def _page_title(soup: BeautifulSoup) -> str:
    if soup.title is not None:
        return clean_text(soup.title.get_text(" ", strip=True))
    return ""


def scrape_html(kind: ResourceKind, html: str) -> Tuple[List[str], str]:
    """Return ``(fragments, title)`` selected from `html` for `kind`."""
    soup = BeautifulSoup(html, "lxml")

    if kind is ResourceKind.BLOG:
        title = _page_title(soup)
        if not title:
            h1 = soup.find("h1")
            title = clean_text(h1.get_text(" ", strip=True)) if h1 is not None else ""
        return _texts(soup, BLOG_CONTENT_SELECTOR), title

    if kind in (ResourceKind.SUBSTACK, ResourceKind.ARXIV_HTML):
        heading = soup.select_one(POST_TITLE_SELECTOR)
        title = clean_text(heading.get_text(" ", strip=True)) if heading is not None else _page_title(soup)
        return _texts(soup, POST_CONTENT_SELECTOR), title

    raise ExtractionError("invalid resource type")


def extract_pdf_pages(pdf_path: Path) -> Tuple[List[str], str]:
    """Extract the text of every page of `pdf_path`, in page order.

    Stops at the first page that cannot be read. A document with no
    extractable text at all is an error rather than an empty result.
    """
    try:
        doc = fitz.open(str(pdf_path))
    except Exception as exc:
        raise ExtractionError(f"cannot open {pdf_path.name}: {exc}") from exc

    try:
        try:
            page_count = doc.page_count
        except Exception as exc:
            raise ExtractionError(f"cannot count pages of {pdf_path.name}: {exc}") from exc

        pages: List[str] = []
        for number in range(page_count):
            try:
                text = doc.load_page(number).get_text("text")
            except Exception as exc:
                raise ExtractionError(f"cannot read page {number + 1} of {pdf_path.name}: {exc}") from exc
            pages.append(text)

        title = (doc.metadata or {}).get("title") or ""
    finally:
        doc.close()

    if not any(p.strip() for p in pages):
        raise ExtractionError(f"no extractable text in {pdf_path.name}")
    return pages, title


async def _extract_pdf(resource: ReadingResource, url: str, client: httpx.AsyncClient, staging_dir: Path, keep_staged: bool) -> None:
    try:
        pdf_path = await download_pdf(url, staging_dir, client=client)
    except DownloadError as exc:
        raise ExtractionError(str(exc)) from exc
    resource.staged_path = pdf_path

    try:
        pages, title = await asyncio.to_thread(extract_pdf_pages, pdf_path)
    finally:
        if not keep_staged:
            pdf_path.unlink(missing_ok=True)
            resource.staged_path = None

    resource.raw_content = pages
    resource.title = clean_text(title)


async def extract(
    resource: ReadingResource,
    client: httpx.AsyncClient,
    staging_dir: Path | str = "arxiv",
    keep_staged: bool = True,
) -> ReadingResource:
    """Populate `raw_content` and `title` of `resource` and return it."""
    if resource.kind not in HTML_KINDS and resource.kind is not ResourceKind.ARXIV_PDF:
        raise ExtractionError("invalid resource type", raw_url=resource.raw_url)
    if resource.validated_url is None:
        raise ExtractionError("resource has no validated URL", raw_url=resource.raw_url)

    url = str(resource.validated_url)
    try:
        if resource.kind is ResourceKind.ARXIV_PDF:
            await _extract_pdf(resource, url, client, Path(staging_dir), keep_staged)
        else:
            html = await fetch_page(url, client)
            fragments, title = scrape_html(resource.kind, html)
            if not fragments:
                raise ExtractionError("no text content found on page")
            resource.raw_content = fragments
            resource.title = title
    except ExtractionError as exc:
        exc.raw_url = resource.raw_url
        raise

    logger.info(f"Extracted {len(resource.raw_content)} fragments from {resource.raw_url}")
    return resource
