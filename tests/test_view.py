"""Tests for dashboard view building."""

import locale

import pytest

from conftest import TODAY, make_item

from stockpile.config import ColumnsConfig, ExpiryConfig
from stockpile.display import days_label
from stockpile.expiry import EXPIRED, NO_EXPIRY
from stockpile.models import Summary
from stockpile.sheet import parse_table, to_items
from stockpile.view import (
    build_view,
    filter_items,
    list_categories,
    sort_items,
    summarize,
    urgent_items,
)


class TestFilter:
    def test_all_keeps_everything(self, sample_items):
        assert filter_items(sample_items, "all") == sample_items
        assert filter_items(sample_items, "") == sample_items
        assert filter_items(sample_items, None) == sample_items

    def test_exact_category_match(self, sample_items):
        result = filter_items(sample_items, "食物")
        assert [i.name for i in result] == ["泡麵", "乾糧"]

    def test_case_sensitive(self):
        items = [make_item("Water", "Water"), make_item("water", "water")]
        assert [i.name for i in filter_items(items, "Water")] == ["Water"]

    def test_no_partial_match(self):
        items = [make_item("Canned", "Food-canned")]
        assert filter_items(items, "Food") == []


class TestSort:
    def test_expiry_puts_no_expiry_last(self, sample_items):
        result = sort_items(sample_items, "expiry")
        assert [i.name for i in result] == [
            "乾糧", "電池", "泡麵", "礦泉水", "急救包", "口罩",
        ]

    def test_expiry_sort_is_stable(self):
        items = [
            make_item("b", expiry_date="2025-04-01"),
            make_item("a", expiry_date="2025-04-01"),
            make_item("c"),
            make_item("d"),
        ]
        result = sort_items(items, "expiry")
        assert [i.name for i in result] == ["b", "a", "c", "d"]

    def test_category_sort_is_stable(self):
        items = [
            make_item("x", "B"),
            make_item("y", "A"),
            make_item("z", "B"),
            make_item("w", "A"),
        ]
        result = sort_items(items, "category")
        assert [i.name for i in result] == ["y", "w", "x", "z"]

    def test_category_sort_uses_locale_collation(self):
        saved = locale.setlocale(locale.LC_COLLATE)
        for name in ("en_US.UTF-8", "en_US.utf8"):
            try:
                locale.setlocale(locale.LC_COLLATE, name)
                break
            except locale.Error:
                continue
        else:
            pytest.skip("en_US locale not installed")
        try:
            items = [make_item("b", "b"), make_item("B", "B"), make_item("a", "a")]
            result = sort_items(items, "category")
        finally:
            locale.setlocale(locale.LC_COLLATE, saved)

        # Case is not a primary key: "a" does not sort after "B"
        assert result[0].name == "a"
        assert {i.name for i in result[1:]} == {"b", "B"}

    def test_unknown_mode_keeps_order(self, sample_items):
        assert sort_items(sample_items, "none") == sample_items
        assert sort_items(sample_items, "bogus") == sample_items


class TestSummary:
    def test_counts(self, sample_items):
        s = summarize(sample_items)
        assert s == Summary(total=6, safe=1, soon=1, expired=2, noexpiry=2)

    def test_counts_sum_to_total(self, sample_items):
        s = summarize(sample_items)
        assert s.safe + s.soon + s.expired + s.noexpiry == s.total

    def test_empty(self):
        assert summarize([]) == Summary()


class TestUrgent:
    def test_only_expired_items_sorted(self, sample_items):
        result = urgent_items(sample_items)
        assert [i.name for i in result] == ["乾糧", "電池"]
        assert all(i.status == EXPIRED for i in result)

    def test_empty_when_nothing_expired(self):
        items = [make_item("水", expiry_date="2026-01-01"), make_item("刀")]
        assert urgent_items(items) == []

    def test_follows_configured_thresholds(self):
        records = parse_table(
            "名稱,類別,數量,到期日(YYYY-MM-DD),備註\n"
            "罐頭,食物,4,2025-04-05,\n"
            "乾糧,食物,3,2025-03-15,\n"
        )
        expiry = ExpiryConfig(expired_within_days=7, soon_within_days=60)
        items = to_items(records, ColumnsConfig(), today=TODAY, expiry=expiry)

        assert [(i.days_left, i.status) for i in items] == [(26, "soon"), (5, "expired")]
        assert [i.name for i in urgent_items(items)] == ["乾糧"]


class TestBuildView:
    def test_summary_ignores_filter(self, sample_items):
        view = build_view(sample_items, category="不存在的類別")
        assert view.items == ()
        assert view.summary == summarize(sample_items)
        assert len(view.urgent) == 2

    def test_filter_and_sort_together(self, sample_items):
        view = build_view(sample_items, category="食物", sort="expiry")
        assert [i.name for i in view.items] == ["乾糧", "泡麵"]
        assert view.category == "食物"
        assert view.sort == "expiry"

    def test_defaults(self, sample_items):
        view = build_view(sample_items)
        assert view.category == "all"
        assert view.sort == "none"
        assert list(view.items) == sample_items

    def test_categories_first_seen_order(self, sample_items):
        assert list_categories(sample_items) == ["飲水", "藥品", "食物", "照明", "防護"]
        view = build_view(sample_items)
        assert view.categories == ("飲水", "藥品", "食物", "照明", "防護")

    def test_empty_dataset(self):
        view = build_view([])
        assert view.summary == Summary()
        assert view.urgent == ()
        assert view.items == ()


def test_single_no_expiry_row_scenario():
    """A single no-expiry row gives one item and no urgent entries."""
    records = parse_table("name,category,qty,expiry,note\nWater,Water,10,-,\n")
    columns = ColumnsConfig(
        name="name", category="category", quantity="qty",
        expiry="expiry", note="note",
    )
    items = to_items(records, columns, today=TODAY)
    view = build_view(items)

    assert len(records) == 1
    assert items[0].status == NO_EXPIRY
    assert view.urgent == ()
    assert view.summary.total == 1
    assert view.summary.safe == 0
    assert view.summary.soon == 0
    assert view.summary.expired == 0


def test_expired_twenty_days_ago_scenario():
    """An item 20 days past expiry is urgent with a negative count."""
    item = make_item("乾糧", "食物", "2025-02-18")
    view = build_view([item])

    assert item.status == EXPIRED
    assert item.days_left == -20
    assert view.urgent == (item,)
    assert days_label(item.days_left) == "已過期 20 天"
