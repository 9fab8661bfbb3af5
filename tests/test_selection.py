"""Tests for requested-field trees and the analyzer helpers."""

from __future__ import annotations

import pytest

from app.errors import InvalidArgument
from app.selection import (
    EMPTY_SELECTION,
    FieldSelection,
    contains_field_anywhere,
    count_fields_outside,
    requested_top_level_fields,
)


def test_from_paths_builds_nested_tree_in_request_order() -> None:
    selection = FieldSelection.from_paths(
        ["title", "similarTitles.id", "id", "similarTitles.sources.name"]
    )

    assert selection.names() == ("title", "similarTitles", "id")
    similar = selection.child("similarTitles")
    assert similar.names() == ("id", "sources")
    assert similar.child("sources").names() == ("name",)
    assert selection.child("title").is_empty()


def test_from_paths_merges_duplicate_fields() -> None:
    selection = FieldSelection.from_paths(["id", "id", "similarTitles.id", "similarTitles"])

    assert len(selection) == 2
    assert selection.child("similarTitles").names() == ("id",)


@pytest.mark.parametrize("path", ["", "similarTitles.", ".id", "a..b", "  "])
def test_from_paths_rejects_blank_segments(path: str) -> None:
    with pytest.raises(InvalidArgument):
        FieldSelection.from_paths([path])


def test_from_mapping_accepts_none_leaves() -> None:
    selection = FieldSelection.from_mapping(
        {"id": None, "details": {"title": None, "sources": {"name": {}}}}
    )

    assert selection == FieldSelection.from_paths(["id", "details.title", "details.sources.name"])


def test_from_mapping_rejects_scalar_children() -> None:
    with pytest.raises(InvalidArgument):
        FieldSelection.from_mapping({"id": "yes"})


def test_requested_top_level_fields_ignores_nested_names() -> None:
    selection = FieldSelection.from_paths(["id", "similarTitles.title"])

    assert requested_top_level_fields(selection) == {"id", "similarTitles"}


def test_contains_field_anywhere_searches_every_depth() -> None:
    selection = FieldSelection.from_paths(["id", "similarTitles.sources.name"])

    assert contains_field_anywhere(selection, "sources")
    assert contains_field_anywhere(selection, "similarTitles")
    assert not contains_field_anywhere(selection, "poster")
    assert not contains_field_anywhere(EMPTY_SELECTION, "sources")


def test_count_fields_outside_counts_only_top_level() -> None:
    baseline = {"id", "title"}
    selection = FieldSelection.from_paths(["id", "title", "sources.name", "plotOverview"])

    assert count_fields_outside(selection, baseline) == 2
    assert count_fields_outside(EMPTY_SELECTION, baseline) == 0
