from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup

from deep_research.tools.web_utils import normalize_text


@dataclass
class ExtractedContent:
    url: str
    title: str
    text: str
    method: str


def _extract_title(raw_html: str) -> str:
    soup = BeautifulSoup(raw_html, "html.parser")
    title = soup.title.string if soup.title and soup.title.string else ""
    return normalize_text(title)


def _extract_with_trafilatura(raw_html: str) -> str:
    import trafilatura

    extracted = trafilatura.extract(raw_html, output_format="txt")
    if not isinstance(extracted, str):
        return ""
    return normalize_text(extracted)


def _extract_with_soup(raw_html: str) -> str:
    soup = BeautifulSoup(raw_html, "html.parser")
    for tag in soup(["script", "style", "noscript", "nav", "header", "footer", "aside"]):
        tag.decompose()
    body = soup.body or soup
    return normalize_text(body.get_text("\n"))


def extract_main_content(url: str, raw_content: str) -> ExtractedContent:
    """Extract main article text from a raw HTML (or plain text) payload."""
    seems_html = "<html" in raw_content.lower() or "<body" in raw_content.lower()
    if not seems_html:
        return ExtractedContent(url=url, title="", text=normalize_text(raw_content), method="raw")

    title = _extract_title(raw_content)
    primary_text = _extract_with_trafilatura(raw_content)
    if primary_text:
        return ExtractedContent(url=url, title=title, text=primary_text, method="trafilatura")

    return ExtractedContent(url=url, title=title, text=_extract_with_soup(raw_content), method="soup")
