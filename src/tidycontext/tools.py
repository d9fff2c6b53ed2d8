"""Tool and resource handlers.

Transport-independent: every handler takes the ``AppState`` plus raw
arguments and returns either text or a JSON-serialisable value. Input
validation failures become ``INVALID_INPUT``; other ``TidyContextError``s
pass through untouched for the server to serialise.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError

from tidycontext.errors import ErrorCode, TidyContextError
from tidycontext.models.tools import (
    GenerateCodeInput,
    ListPackagesInput,
    PackageDetailsInput,
    ReadFileInput,
    SearchFunctionsInput,
    SearchIssuesInput,
)
from tidycontext.templates import DOCS, TEMPLATE_NAMES, mime_type_for, render_template

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from tidycontext.state import AppState

ToolResult = str | list[Any] | dict[str, Any]

URI_SCHEME = "tidymodels"

_REPO_URI = re.compile(rf"^{URI_SCHEME}://repos/([^/]+)$")
_FILE_URI = re.compile(rf"^{URI_SCHEME}://files/([^/]+)/(.+)$")
_DOCS_URI = re.compile(rf"^{URI_SCHEME}://docs/(.+)$")
_TEMPLATE_URI = re.compile(rf"^{URI_SCHEME}://templates/(.+)$")

M = TypeVar("M", bound=BaseModel)


def parse_input(model: type[M], arguments: dict[str, Any] | None) -> M:
    try:
        return model.model_validate(arguments or {})
    except ValidationError as exc:
        message = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}"
            for err in exc.errors()
        )
        raise TidyContextError(
            code=ErrorCode.INVALID_INPUT,
            message=message,
            recoverable=False,
        ) from exc


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


async def list_tidymodels_packages(state: AppState, arguments: dict[str, Any]) -> ToolResult:
    args = parse_input(ListPackagesInput, arguments)
    packages = await state.resolver.list_packages(force_refresh=args.refresh)
    return [package.model_dump() for package in packages]


async def get_package_details(state: AppState, arguments: dict[str, Any]) -> ToolResult:
    args = parse_input(PackageDetailsInput, arguments)
    packages = await state.resolver.resolve_packages(args.package)
    if not packages:
        raise TidyContextError(
            code=ErrorCode.NOT_FOUND,
            message=f'Package "{args.package}" not found in {state.settings.github.org} organization',
            suggestion="Use list_tidymodels_packages to see available packages.",
            recoverable=False,
        )
    # The filter is a substring match; an exact name wins over the first hit.
    best = next((p for p in packages if p.name == args.package), packages[0])
    return best.model_dump(exclude_none=True)


async def search_r_functions(state: AppState, arguments: dict[str, Any]) -> ToolResult:
    args = parse_input(SearchFunctionsInput, arguments)
    results = await state.resolver.search_docs(args.query, args.package)
    if not results:
        scope = f' in package "{args.package}"' if args.package else ""
        return f'No functions found matching "{args.query}"{scope}'
    return [result.model_dump(exclude_none=True) for result in results]


async def generate_tidymodels_code(state: AppState, arguments: dict[str, Any]) -> ToolResult:
    args = parse_input(GenerateCodeInput, arguments)
    return render_template(args.task, args.template)


async def search_issues(state: AppState, arguments: dict[str, Any]) -> ToolResult:
    args = parse_input(SearchIssuesInput, arguments)
    issues = await state.resolver.search_issues(args.query, args.repo, args.state)
    if not issues:
        scope = f' in repository "{args.repo}"' if args.repo else ""
        return f'No {args.state} issues found matching "{args.query}"{scope}'
    return [issue.model_dump() for issue in issues]


async def read_file(state: AppState, arguments: dict[str, Any]) -> ToolResult:
    args = parse_input(ReadFileInput, arguments)
    return await state.resolver.get_file_content(args.repo, args.path)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: type[BaseModel]
    handler: Callable[[AppState, dict[str, Any]], Awaitable[ToolResult]]

    def input_schema(self) -> dict[str, Any]:
        return self.input_model.model_json_schema()


TOOLS: dict[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(
            "list_tidymodels_packages",
            "List all packages in the tidymodels ecosystem",
            ListPackagesInput,
            list_tidymodels_packages,
        ),
        ToolSpec(
            "get_package_details",
            "Get detailed information about a specific tidymodels package",
            PackageDetailsInput,
            get_package_details,
        ),
        ToolSpec(
            "search_r_functions",
            "Search for R functions in tidymodels packages",
            SearchFunctionsInput,
            search_r_functions,
        ),
        ToolSpec(
            "generate_tidymodels_code",
            "Generate R code for common tidymodels tasks",
            GenerateCodeInput,
            generate_tidymodels_code,
        ),
        ToolSpec(
            "search_issues",
            "Search for issues in tidymodels repositories",
            SearchIssuesInput,
            search_issues,
        ),
        ToolSpec(
            "read_file",
            "Read a file from a tidymodels repository",
            ReadFileInput,
            read_file,
        ),
    )
}


async def call_tool(state: AppState, name: str, arguments: dict[str, Any] | None) -> str:
    """Run a tool and render its result as text."""
    spec = TOOLS.get(name)
    if spec is None:
        raise TidyContextError(
            code=ErrorCode.INVALID_INPUT,
            message=f"Unknown tool: {name}",
            recoverable=False,
        )
    result = await spec.handler(state, arguments or {})
    if isinstance(result, str):
        return result
    return json.dumps(result, indent=2)


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResourceInfo:
    uri: str
    name: str
    mime_type: str
    description: str


async def list_resources(state: AppState) -> list[ResourceInfo]:
    repos = await state.resolver.list_repositories()
    resources = [
        ResourceInfo(
            uri=f"{URI_SCHEME}://repos/{repo.name}",
            name=repo.name,
            mime_type="application/json",
            description=repo.description or f"Repository: {repo.name}",
        )
        for repo in repos
    ]
    resources.extend(
        ResourceInfo(
            uri=f"{URI_SCHEME}://docs/{name}",
            name=title,
            mime_type="text/markdown",
            description=f"{title} for the tidymodels ecosystem",
        )
        for name, (title, _) in DOCS.items()
    )
    resources.extend(
        ResourceInfo(
            uri=f"{URI_SCHEME}://templates/{name}",
            name=f"{name.capitalize()} Template",
            mime_type="text/plain",
            description=f"Template for {name} code with tidymodels",
        )
        for name in TEMPLATE_NAMES
    )
    return resources


async def read_resource(state: AppState, uri: str) -> tuple[str, str]:
    """Return ``(text, mime_type)`` for a ``tidymodels://`` URI."""
    if match := _REPO_URI.match(uri):
        repo = await state.resolver.get_repository(match.group(1))
        return repo.model_dump_json(indent=2), "application/json"

    if match := _FILE_URI.match(uri):
        repo_name, path = match.groups()
        text = await state.resolver.get_file_content(repo_name, path)
        return text, mime_type_for(path)

    if match := _DOCS_URI.match(uri):
        name = match.group(1)
        if name not in DOCS:
            raise TidyContextError(
                code=ErrorCode.NOT_FOUND,
                message=f"Documentation not found: {name}",
                suggestion=f"Available pages: {', '.join(DOCS)}",
                recoverable=False,
            )
        return DOCS[name][1], "text/markdown"

    if match := _TEMPLATE_URI.match(uri):
        return render_template("Example task", match.group(1)), "text/plain"

    raise TidyContextError(
        code=ErrorCode.INVALID_INPUT,
        message=f"Invalid URI format: {uri}",
        recoverable=False,
    )
