"""Source and document parsers used alongside Git introspection."""

from .html import HTML_SUFFIXES, parse_html_file, summarize_html
from .java_source import extract_class_structure, parse_java_file, parse_javadoc
from .markdown_doc import MARKDOWN_SUFFIXES, parse_markdown, parse_markdown_file
from .pom import PomParseError, parse_pom, parse_pom_text

__all__ = [
    "HTML_SUFFIXES",
    "MARKDOWN_SUFFIXES",
    "PomParseError",
    "extract_class_structure",
    "parse_html_file",
    "parse_java_file",
    "parse_javadoc",
    "parse_markdown",
    "parse_markdown_file",
    "parse_pom",
    "parse_pom_text",
    "summarize_html",
]
