from __future__ import annotations

from tidycontext.models.cache import CacheSnapshot, ContentKey
from tidycontext.models.github import (
    CodeSearchItem,
    CodeSearchResponse,
    DirectoryEntry,
    FileDescriptor,
    IssueRecord,
    IssueSearchResponse,
    RepositoryRecord,
    RepositoryRef,
)
from tidycontext.models.tools import (
    DocResult,
    GenerateCodeInput,
    IssueSummary,
    ListPackagesInput,
    PackageDetailsInput,
    PackageInfo,
    PackageSummary,
    ReadFileInput,
    SearchFunctionsInput,
    SearchIssuesInput,
)

__all__ = [
    # github
    "RepositoryRecord",
    "RepositoryRef",
    "FileDescriptor",
    "DirectoryEntry",
    "CodeSearchItem",
    "CodeSearchResponse",
    "IssueRecord",
    "IssueSearchResponse",
    # cache
    "CacheSnapshot",
    "ContentKey",
    # tools
    "ListPackagesInput",
    "PackageDetailsInput",
    "SearchFunctionsInput",
    "SearchIssuesInput",
    "GenerateCodeInput",
    "ReadFileInput",
    "PackageSummary",
    "PackageInfo",
    "DocResult",
    "IssueSummary",
]
