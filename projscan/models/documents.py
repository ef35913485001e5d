"""Structural summaries produced by the source and document parsers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class DocumentModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# Java sources


class JavadocTag(DocumentModel):
    name: str
    value: str


class JavadocStructure(DocumentModel):
    description: str = ""
    tags: list[JavadocTag] = []


class Parameter(DocumentModel):
    type: str
    name: str


class MethodStructure(DocumentModel):
    access_modifier: str = ""
    is_static: bool = False
    return_type: str
    method_name: str
    parameters: list[Parameter] = []
    body: str = ""
    javadoc: JavadocStructure | None = None
    comments: list[str] = []


class ClassStructure(DocumentModel):
    file_name: str
    package_name: str = "default"
    class_name: str | None = None
    class_type: str | None = None  # class | interface | enum
    methods: list[MethodStructure] = []
    javadoc: JavadocStructure | None = None
    comments: list[str] = []


# Maven build descriptors


class PomCoordinates(DocumentModel):
    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    packaging: str = "jar"


class ParentInfo(DocumentModel):
    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    relative_path: str | None = None


class Property(DocumentModel):
    name: str
    value: str


class Dependency(DocumentModel):
    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    scope: str = "compile"
    type: str = "jar"


class PluginConfiguration(DocumentModel):
    name: str
    value: str


class Plugin(DocumentModel):
    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    configuration_items: list[PluginConfiguration] = []


class PomStructure(DocumentModel):
    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    packaging: str = "jar"
    name: str | None = None
    description: str | None = None
    parent_info: ParentInfo | None = None
    properties: list[Property] = []
    dependencies: list[Dependency] = []
    plugins: list[Plugin] = []
    modules: list[str] = []

    @property
    def coordinates(self) -> PomCoordinates:
        return PomCoordinates(
            group_id=self.group_id,
            artifact_id=self.artifact_id,
            version=self.version,
            packaging=self.packaging,
        )


# HTML


class HtmlDocumentSummary(DocumentModel):
    title: str = ""
    heading_count: int = 0
    link_count: int = 0
    image_count: int = 0
    table_count: int = 0
    form_count: int = 0
    list_count: int = 0
    metadata: dict[str, str] = {}


# Markdown


class MarkdownHeading(DocumentModel):
    level: int
    text: str
    id: str
    position: int


class MarkdownLink(DocumentModel):
    text: str
    url: str
    title: str | None = None
    internal: bool = False


class MarkdownImage(DocumentModel):
    alt_text: str
    url: str
    title: str | None = None
    local: bool = True


class MarkdownCodeBlock(DocumentModel):
    content: str
    language: str | None = None
    fenced: bool = True
    position: int


class MarkdownContent(DocumentModel):
    title: str | None = None
    raw_content: str
    html_content: str
    headings: list[MarkdownHeading] = []
    links: list[MarkdownLink] = []
    images: list[MarkdownImage] = []
    code_blocks: list[MarkdownCodeBlock] = []
    front_matter: dict[str, Any] = {}
    word_count: int = 0
    reading_time_minutes: int = 1
