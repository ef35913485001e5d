"""HTML document summaries via BeautifulSoup."""

from __future__ import annotations

from pathlib import Path

from bs4 import BeautifulSoup

from projscan.models.documents import HtmlDocumentSummary

HTML_SUFFIXES = (".html", ".htm")


def extract_metadata(soup: BeautifulSoup) -> dict[str, str]:
    """Document title plus every <meta name|property content> pair."""
    metadata = {"title": soup.title.get_text(strip=True) if soup.title else ""}
    for meta in soup.find_all("meta"):
        content = meta.get("content")
        if content is None:
            continue
        key = meta.get("name") or meta.get("property")
        if key:
            metadata[key] = content
    return metadata


def summarize_html(content: str | bytes) -> HtmlDocumentSummary:
    soup = BeautifulSoup(content, "html.parser")
    metadata = extract_metadata(soup)
    return HtmlDocumentSummary(
        title=metadata["title"],
        heading_count=len(soup.select("h1, h2, h3, h4, h5, h6")),
        link_count=len(soup.select("a[href]")),
        image_count=len(soup.find_all("img")),
        table_count=len(soup.find_all("table")),
        form_count=len(soup.find_all("form")),
        list_count=len(soup.select("ul, ol")),
        metadata=metadata,
    )


def parse_html_file(path: Path) -> HtmlDocumentSummary:
    return summarize_html(path.read_bytes())
