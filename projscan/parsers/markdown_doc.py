"""Markdown structure extraction.

Front matter is read with PyYAML, the body is rendered with Python-Markdown,
and headings, links, images and code blocks are collected from the rendered
tree with BeautifulSoup.
"""

from __future__ import annotations

import math
import re
from pathlib import Path
from typing import Any

import markdown
import yaml
from bs4 import BeautifulSoup

from projscan.config.constants import WORDS_PER_MINUTE
from projscan.models.documents import (
    MarkdownCodeBlock,
    MarkdownContent,
    MarkdownHeading,
    MarkdownImage,
    MarkdownLink,
)
from projscan.utils.logger import parser_logger

MARKDOWN_SUFFIXES = (".md", ".markdown")
MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]

FRONT_MATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)
FENCE_RE = re.compile(r"```.*?```", re.DOTALL)
TAG_RE = re.compile(r"<[^>]*>")
MARKUP_RE = re.compile(r"[#*_~`\[\](){}|]+")
LANGUAGE_CLASS_PREFIXES = ("language-", "lang-")


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Separate a leading YAML block from the Markdown body.

    Invalid YAML or a non-mapping block is logged and treated as empty.
    """
    match = FRONT_MATTER_RE.match(text)
    if not match:
        return {}, text
    body = text[match.end() :]
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        parser_logger.warning("Invalid front matter ignored", error=str(exc))
        return {}, body
    if not isinstance(data, dict):
        return {}, body
    return data, body


def slugify(text: str) -> str:
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    return re.sub(r"\s+", "-", slug.strip())


def count_words(body: str) -> int:
    text = FENCE_RE.sub(" ", body)
    text = TAG_RE.sub(" ", text)
    text = MARKUP_RE.sub(" ", text)
    return len(text.split())


def reading_time(word_count: int) -> int:
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def _code_language(code) -> str | None:
    for css_class in code.get("class") or []:
        for prefix in LANGUAGE_CLASS_PREFIXES:
            if css_class.startswith(prefix):
                return css_class[len(prefix) :]
    return None


def parse_markdown(text: str) -> MarkdownContent:
    if not text.strip():
        return MarkdownContent(raw_content=text, html_content="")

    front_matter, body = split_front_matter(text)
    html = markdown.markdown(body, extensions=MARKDOWN_EXTENSIONS)
    soup = BeautifulSoup(html, "html.parser")

    headings: list[MarkdownHeading] = []
    code_blocks: list[MarkdownCodeBlock] = []
    position = 0
    # Headings and code blocks share one document-order position counter
    for node in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6", "pre"]):
        if node.name == "pre":
            code = node.find("code")
            language = _code_language(code) if code else None
            code_blocks.append(
                MarkdownCodeBlock(
                    content=node.get_text(),
                    language=language,
                    fenced=language is not None or _is_fenced(body, node.get_text()),
                    position=position,
                )
            )
        else:
            heading_text = node.get_text(" ", strip=True)
            headings.append(
                MarkdownHeading(
                    level=int(node.name[1]),
                    text=heading_text,
                    id=slugify(heading_text),
                    position=position,
                )
            )
        position += 1

    links = [
        MarkdownLink(
            text=a.get_text(strip=True),
            url=a["href"],
            title=a.get("title"),
            internal=a["href"].startswith("#"),
        )
        for a in soup.find_all("a", href=True)
    ]
    images = [
        MarkdownImage(
            alt_text=img.get("alt", ""),
            url=img.get("src", ""),
            title=img.get("title"),
            local=not img.get("src", "").startswith("http"),
        )
        for img in soup.find_all("img")
    ]

    words = count_words(body)
    return MarkdownContent(
        title=headings[0].text if headings else None,
        raw_content=text,
        html_content=html,
        headings=headings,
        links=links,
        images=images,
        code_blocks=code_blocks,
        front_matter=front_matter,
        word_count=words,
        reading_time_minutes=reading_time(words),
    )


def _is_fenced(body: str, code: str) -> bool:
    """Whether a code block without a language came from a ``` fence."""
    first_line = code.strip("\n").split("\n", 1)[0]
    for match in FENCE_RE.finditer(body):
        if first_line in match.group(0):
            return True
    return False


def parse_markdown_file(path: Path) -> MarkdownContent:
    return parse_markdown(path.read_text(encoding="utf-8", errors="replace"))
