"""Unit tests for tidycontext.parsing."""

from __future__ import annotations

from tidycontext.parsing import (
    NO_DOCUMENTATION,
    extract_roxygen_blocks,
    matching_blocks,
    parse_description,
    render_documentation,
    truncate_readme,
)

RECIPES_DESCRIPTION = """\
Package: recipes
Title: Preprocessing and Feature Engineering Steps for Modeling
Version: 1.1.0.9000
Authors@R: c(
    person("Max", "Kuhn", , "max@posit.co", role = c("aut", "cre"))
  )
Description: A recipe prepares your data for modeling. We provide an
    extensible framework for pipeable sequences of feature engineering
    steps.
License: MIT + file LICENSE
Depends:
    dplyr,
    R (>= 3.6)
Imports:
    cli,
    clock (>= 0.6.1),
    generics (>= 0.1.2),
    rlang (>= 1.1.0)
Suggests:
    covr,
    testthat (>= 3.0.0)
Encoding: UTF-8"""

ROXYGEN_SOURCE = """\
#' Centering and scaling numeric data
#'
#' `step_normalize()` creates a specification of a recipe step that will
#' normalize numeric data.
#' @export
step_normalize <- function(recipe, ..., role = NA, trained = FALSE) {
  add_step(recipe, step_normalize_new(terms = enquos(...)))
}

#' Remove zero-variance columns
#' @export
step_zv <- function(recipe, ...) {
  add_step(recipe)
}

helper <- function(x) x
"""


class TestParseDescription:
    def test_labelled_fields(self) -> None:
        fields = parse_description(RECIPES_DESCRIPTION)
        assert fields.title == "Preprocessing and Feature Engineering Steps for Modeling"
        assert fields.version == "1.1.0.9000"
        assert fields.description == "A recipe prepares your data for modeling. We provide an"

    def test_continuation_fields_are_joined(self) -> None:
        fields = parse_description(RECIPES_DESCRIPTION)
        assert fields.imports == "cli, clock (>= 0.6.1), generics (>= 0.1.2), rlang (>= 1.1.0)"
        assert fields.suggests == "covr, testthat (>= 3.0.0)"

    def test_single_line_field_with_empty_first_line(self) -> None:
        # Depends is a single-line field; its value starts on the next line.
        assert parse_description(RECIPES_DESCRIPTION).depends == ""

    def test_labels_are_case_insensitive(self) -> None:
        fields = parse_description("title: lower\nVERSION: 2.0\nimports: a,\n  b")
        assert fields.title == "lower"
        assert fields.version == "2.0"
        assert fields.imports == "a, b"

    def test_label_must_start_the_line(self) -> None:
        fields = parse_description("Notes: see Version: 9.9\nVersion: 1.0")
        assert fields.version == "1.0"

    def test_missing_labels_default_to_empty(self) -> None:
        fields = parse_description("Package: lonely")
        assert fields.title == ""
        assert fields.version == ""
        assert fields.depends == ""
        assert fields.imports == ""
        assert fields.suggests == ""

    def test_description_falls_back_to_repository_description(self) -> None:
        fields = parse_description("Package: lonely", "Repo description")
        assert fields.description == "Repo description"

    def test_description_without_any_fallback(self) -> None:
        assert parse_description("", None).description == ""

    def test_crlf_line_endings(self) -> None:
        fields = parse_description("Title: Windows\r\nImports:\r\n    a,\r\n    b\r\nLicense: MIT")
        assert fields.title == "Windows"
        assert fields.imports == "a, b"


class TestTruncateReadme:
    def test_long_readme_is_cut_and_marked(self) -> None:
        readme = "x" * 1500
        excerpt = truncate_readme(readme)
        assert excerpt == "x" * 1000 + "..."
        assert len(excerpt) == 1003

    def test_short_readme_is_unchanged(self) -> None:
        readme = "y" * 800
        assert truncate_readme(readme) == readme

    def test_exactly_at_limit_is_unchanged(self) -> None:
        readme = "z" * 1000
        assert truncate_readme(readme) == readme

    def test_cut_ignores_word_boundaries(self) -> None:
        assert truncate_readme("hello world", limit=7) == "hello w..."


class TestRoxygen:
    def test_blocks_end_at_function_header(self) -> None:
        blocks = extract_roxygen_blocks(ROXYGEN_SOURCE)
        assert len(blocks) == 2
        assert blocks[0].startswith("#' Centering and scaling")
        assert blocks[0].endswith("function(recipe, ..., role = NA, trained = FALSE)")
        assert blocks[1].endswith("step_zv <- function(recipe, ...)")

    def test_matching_is_case_insensitive(self) -> None:
        blocks = extract_roxygen_blocks(ROXYGEN_SOURCE)
        assert matching_blocks(blocks, "NORMALIZE") == [blocks[0]]

    def test_render_joins_matches_with_blank_line(self) -> None:
        text = render_documentation(ROXYGEN_SOURCE, "@export")
        blocks = extract_roxygen_blocks(ROXYGEN_SOURCE)
        assert text == f"{blocks[0]}\n\n{blocks[1]}"

    def test_no_matching_block_yields_sentinel(self) -> None:
        assert render_documentation(ROXYGEN_SOURCE, "tidy_posterior") == "No documentation found"
        assert NO_DOCUMENTATION == "No documentation found"

    def test_file_without_roxygen_yields_sentinel(self) -> None:
        assert render_documentation("helper <- function(x) x\n", "helper") == NO_DOCUMENTATION
