"""Pattern-based structural extraction for Java source files.

This is a lightweight scanner, not a Java parser: it reads the package
declaration, the first type declaration, method signatures with their
brace-matched bodies, and the Javadoc and comments found near them.
"""

from __future__ import annotations

import re
from pathlib import Path

from projscan.models.documents import (
    ClassStructure,
    JavadocStructure,
    JavadocTag,
    MethodStructure,
    Parameter,
)

PACKAGE_RE = re.compile(r"package\s+([\w.]+)\s*;")
CLASS_RE = re.compile(
    r"(public|private|protected)?\s*(static)?\s*(class|interface|enum)\s+(\w+)"
)
METHOD_RE = re.compile(
    r"(public|private|protected)?\s*(static)?\s*(\w+(?:<.*>)?)\s+(\w+)\s*\(([^)]*)\)"
)
BODY_START_RE = re.compile(r"\s*(?:throws\s+[\w,\s.]+)?\s*\{")
JAVADOC_RE = re.compile(r"/\*\*(.*?)\*/", re.DOTALL)
LINE_COMMENT_RE = re.compile(r"//(.*)$", re.MULTILINE)
BLOCK_COMMENT_RE = re.compile(r"/\*(.*?)\*/", re.DOTALL)
JAVADOC_TAG_RE = re.compile(r"@(\w+)\s+(.*?)(?=\s*@|\s*\*/|$)", re.DOTALL)

JAVADOC_LOOKBEHIND = 500
CLASS_COMMENT_WINDOW = (200, 200)
METHOD_COMMENT_WINDOW = (200, 100)

# Statements that look like "<word> <word>(...)" to the signature pattern
_NOT_RETURN_TYPES = frozenset({"return", "new", "else", "throw", "case", "yield"})


def extract_package_name(content: str) -> str:
    match = PACKAGE_RE.search(content)
    return match.group(1) if match else "default"


def parse_javadoc(text: str) -> JavadocStructure:
    """Split a Javadoc body into its description and @tag entries."""
    clean = re.sub(r"^\s*\*\s*", "", text)
    clean = re.sub(r"\n\s*\*\s*", "\n", clean).strip()

    first_tag = clean.find("@")
    if first_tag == -1:
        return JavadocStructure(description=clean, tags=[])

    tags = [
        JavadocTag(name=m.group(1), value=m.group(2).strip())
        for m in JAVADOC_TAG_RE.finditer(clean)
    ]
    return JavadocStructure(description=clean[:first_tag].strip(), tags=tags)


def _last_javadoc(text: str) -> JavadocStructure | None:
    javadoc = None
    for match in JAVADOC_RE.finditer(text):
        javadoc = parse_javadoc(match.group(1).strip())
    return javadoc


def _comments_in(text: str) -> list[str]:
    comments = [m.group(1).strip() for m in LINE_COMMENT_RE.finditer(text)]
    for match in BLOCK_COMMENT_RE.finditer(text):
        comment = match.group(1).strip()
        # Javadoc bodies start with the second asterisk
        if not comment.startswith("*"):
            comments.append(comment)
    return comments


def _window(content: str, position: int, window: tuple[int, int]) -> str:
    before, after = window
    return content[max(0, position - before) : min(len(content), position + after)]


def find_matching_brace(content: str, open_index: int) -> int:
    """Index of the brace closing the one at open_index, or -1."""
    depth = 1
    for index in range(open_index + 1, len(content)):
        char = content[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return -1


def parse_parameters(raw: str) -> list[Parameter]:
    params = []
    for chunk in raw.split(","):
        parts = chunk.split()
        if len(parts) >= 2:
            params.append(Parameter(type=parts[0], name=parts[1].replace(")", "")))
    return params


def extract_methods(content: str) -> list[MethodStructure]:
    methods = []
    for match in METHOD_RE.finditer(content):
        access, static, return_type, name, params = match.groups()
        if return_type in _NOT_RETURN_TYPES:
            continue

        start = match.start()
        body = ""
        opening = BODY_START_RE.match(content, match.end())
        if opening:
            brace = opening.end() - 1
            closing = find_matching_brace(content, brace)
            if closing > brace:
                body = content[brace : closing + 1]

        methods.append(
            MethodStructure(
                access_modifier=access or "",
                is_static=static is not None,
                return_type=return_type,
                method_name=name,
                parameters=parse_parameters(params),
                body=body,
                javadoc=_last_javadoc(
                    content[max(0, start - JAVADOC_LOOKBEHIND) : start]
                ),
                comments=_comments_in(_window(content, start, METHOD_COMMENT_WINDOW)),
            )
        )
    return methods


def extract_class_structure(file_name: str, content: str) -> ClassStructure:
    """Summarize one Java compilation unit."""
    class_name = file_name.removesuffix(".java")
    class_type = "class"
    javadoc = None
    comments: list[str] = []

    match = CLASS_RE.search(content)
    if match:
        class_type, class_name = match.group(3), match.group(4)
        javadoc = _last_javadoc(content[: match.start()])
        comments = _comments_in(_window(content, match.start(), CLASS_COMMENT_WINDOW))

    return ClassStructure(
        file_name=file_name,
        package_name=extract_package_name(content),
        class_name=class_name,
        class_type=class_type,
        methods=extract_methods(content),
        javadoc=javadoc,
        comments=comments,
    )


def parse_java_file(path: Path) -> ClassStructure:
    content = path.read_text(encoding="utf-8", errors="replace")
    return extract_class_structure(path.name, content)
