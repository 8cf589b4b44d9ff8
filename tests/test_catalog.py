"""Tests for xfilter.catalog -- item parsing, groups and file entries."""

from __future__ import annotations

from xfilter.catalog import Group, Item, ItemCatalog, parse_item_line


class TestParseItemLine:
    def test_text_only(self) -> None:
        assert parse_item_line("alpha") == ("alpha", None, None)

    def test_text_and_description(self) -> None:
        assert parse_item_line("alpha\tfirst") == ("alpha", "first", None)

    def test_all_fields(self) -> None:
        assert parse_item_line("alpha\tfirst\tout") == ("alpha", "first", "out")

    def test_extra_tabs_stay_in_output(self) -> None:
        assert parse_item_line("a\tb\tc\td") == ("a", "b", "c\td")


class TestItem:
    def test_key_is_utf8_text(self) -> None:
        assert Item("héllo").key == "héllo".encode("utf-8")

    def test_result_prefers_output(self) -> None:
        assert Item("a", output="b").result == "b"
        assert Item("a").result == "a"

    def test_empty_output_is_still_output(self) -> None:
        assert Item("a", output="").result == ""

    def test_items_compare_by_identity(self) -> None:
        assert Item("a") != Item("a")


class TestLoad:
    def test_plain_lines_in_order(self) -> None:
        catalog = ItemCatalog.from_lines(["one\n", "two\n", "three"])
        assert [item.text for item in catalog.items] == ["one", "two", "three"]

    def test_empty_lines_ignored_without_grouping(self) -> None:
        catalog = ItemCatalog.from_lines(["one", "", "two"])
        assert [item.text for item in catalog.items] == ["one", "two"]
        assert catalog.groups == []

    def test_empty_text_field_is_dropped(self) -> None:
        catalog = ItemCatalog.from_lines(["\tdescription only", "ok"])
        assert [item.text for item in catalog.items] == ["ok"]

    def test_grouping_captures_first_line_and_after_blank(self) -> None:
        lines = ["Fruit", "apple", "pear", "", "", "Veg", "leek"]
        catalog = ItemCatalog.from_lines(lines, grouping=True)

        assert [group.name for group in catalog.groups] == ["Fruit", "Veg"]
        by_text = {item.text: item.group for item in catalog.items}
        assert by_text["apple"] == Group("Fruit")
        assert by_text["pear"] == Group("Fruit")
        assert by_text["leek"] == Group("Veg")

    def test_load_returns_count_and_bumps_generation(self) -> None:
        catalog = ItemCatalog()
        before = catalog.generation
        assert catalog.load(["a", "b"]) == 2
        assert catalog.generation > before

    def test_description_and_output_parsed(self) -> None:
        catalog = ItemCatalog.from_lines(["name\tdesc\tcmd --run"])
        item = catalog.items[0]
        assert item.description == "desc"
        assert item.output == "cmd --run"


class TestFileEntries:
    def test_file_items_follow_static_items(self) -> None:
        catalog = ItemCatalog.from_lines(["static"])
        catalog.set_file_entries("src/", ["a.py", "b.py"])
        assert [item.text for item in catalog.items] == ["static", "src/a.py", "src/b.py"]
        assert len(catalog) == 3

    def test_dotfiles_excluded(self) -> None:
        catalog = ItemCatalog()
        catalog.set_file_entries("", [".git", "README"])
        assert [item.text for item in catalog.file_items] == ["README"]

    def test_entries_replaced_wholesale(self) -> None:
        catalog = ItemCatalog()
        catalog.set_file_entries("", ["a"])
        catalog.set_file_entries("", ["b"])
        assert [item.text for item in catalog.file_items] == ["b"]

    def test_clear_file_entries(self) -> None:
        catalog = ItemCatalog.from_lines(["static"])
        catalog.set_file_entries("", ["a"])
        catalog.clear_file_entries()
        assert [item.text for item in catalog.items] == ["static"]
