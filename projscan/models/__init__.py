"""Data models for projscan results."""

from .documents import (
    ClassStructure,
    Dependency,
    HtmlDocumentSummary,
    JavadocStructure,
    JavadocTag,
    MarkdownCodeBlock,
    MarkdownContent,
    MarkdownHeading,
    MarkdownImage,
    MarkdownLink,
    MethodStructure,
    Parameter,
    ParentInfo,
    Plugin,
    PluginConfiguration,
    PomCoordinates,
    PomStructure,
    Property,
)
from .git import (
    BranchInfo,
    ChangeType,
    CommitInfo,
    ContributorInfo,
    FileChange,
    RepositorySnapshot,
    RepositoryStatistics,
    TagInfo,
)

__all__ = [
    "BranchInfo",
    "ChangeType",
    "ClassStructure",
    "CommitInfo",
    "ContributorInfo",
    "Dependency",
    "FileChange",
    "HtmlDocumentSummary",
    "JavadocStructure",
    "JavadocTag",
    "MarkdownCodeBlock",
    "MarkdownContent",
    "MarkdownHeading",
    "MarkdownImage",
    "MarkdownLink",
    "MethodStructure",
    "Parameter",
    "ParentInfo",
    "Plugin",
    "PluginConfiguration",
    "PomCoordinates",
    "PomStructure",
    "Property",
    "RepositorySnapshot",
    "RepositoryStatistics",
    "TagInfo",
]
