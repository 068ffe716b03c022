import math

import pytest

from src.rndc_admin.utils.listing import ListState, matches_text, page_count, paginate


def test_matches_text_is_case_insensitive_substring():
    assert matches_text("ana", "Mariana Pérez", "12345678")
    assert matches_text("1234", "Mariana", "12345678")
    assert not matches_text("juan", "Mariana", "12345678")


def test_empty_query_matches_everything():
    assert matches_text("", "x")
    assert matches_text("   ", None)


def test_page_count_rounds_up():
    assert page_count(0, 10) == 0
    assert page_count(10, 10) == 1
    assert page_count(11, 10) == 2
    with pytest.raises(ValueError):
        page_count(5, 0)


def test_paginate_window_and_labels():
    items = list(range(1, 24))
    page = paginate(items, 3, 10)
    assert page.items == (21, 22, 23)
    assert page.total_pages == 3
    assert page.label == "Mostrando 21-23 de 23"
    assert page.has_previous and not page.has_next


def test_paginate_clamps_out_of_range_page():
    page = paginate(list(range(5)), 9, 2)
    assert page.page == 3
    assert page.items == (4,)
    empty = paginate([], 4, 10)
    assert empty.page == 1
    assert empty.items == ()
    assert empty.label == "Mostrando 0-0 de 0"


def test_filter_change_resets_page():
    state = ListState(items=tuple(range(50)), page_size=10).with_page(4)
    assert state.page == 4
    state = state.with_filter("q", "1")
    assert state.page == 1
    state = state.with_page(3).with_page_size(25)
    assert state.page == 1
    assert state.page_size == 25


def test_visible_applies_predicate_before_paging():
    state = ListState(items=tuple(range(30)), page_size=5).with_filter("even", True)
    page = state.visible(lambda n, f: (n % 2 == 0) if f.get("even") else True)
    assert page.items == (0, 2, 4, 6, 8)
    assert page.total_items == 15


@pytest.mark.parametrize("page_size", [1, 3, 10])
@pytest.mark.parametrize("multiple", ["zero", "one", "p", "p+1", "3p-1"])
def test_pages_partition_the_list(page_size, multiple):
    n = {"zero": 0, "one": 1, "p": page_size, "p+1": page_size + 1, "3p-1": 3 * page_size - 1}[multiple]
    items = [f"item-{i}" for i in range(n)]
    total = page_count(n, page_size)
    assert total == math.ceil(n / page_size)

    pages = [paginate(items, number, page_size).items for number in range(1, total + 1)]
    assert all(len(p) == page_size for p in pages[:-1])
    if pages:
        assert 1 <= len(pages[-1]) <= page_size
    assert [item for p in pages for item in p] == items


NAMES = ["Mariana Pérez", "ANA", "Juan", "Susana", "", "Ananías"]


@pytest.mark.parametrize("query", ["ana", "AN", "", "x", "ías"])
def test_text_filter_is_idempotent(query):
    once = [name for name in NAMES if matches_text(query, name)]
    twice = [name for name in once if matches_text(query, name)]
    assert twice == once
    assert once == [name for name in NAMES if query.strip().lower() in name.lower()]
