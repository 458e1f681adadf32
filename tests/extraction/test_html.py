# ABOUTME: Tests for BeautifulSoup table helpers: cell snapshots, span parsing and grid expansion
# ABOUTME: Uses small inline tables so every expected slot is easy to read

import pytest

from appledata.extraction.html import (
    TableCell,
    data_cells,
    header_cells,
    iter_wikitables,
    parse_document,
    row_labels,
    strip_footnotes,
    table_grid,
    table_rows,
)


def _first_table(html: str):
    return next(iter_wikitables(parse_document(html)))


class TestTableCell:
    def test_from_tag_keeps_markup_and_text(self):
        table = _first_table('<table class="wikitable"><tr><td colspan="2">iPhone10,3<br/>iPhone10,6</td></tr></table>')
        cell = data_cells(table_rows(table)[0])[0]

        assert cell.colspan == 2
        assert "<br/>" in cell.html
        assert cell.text == "iPhone10,3iPhone10,6"
        assert not cell.is_header

    @pytest.mark.parametrize(("raw", "expected"), [("3", 3), (" 2 ", 2), ("0", 1), ("-4", 1), ("two", 1), ("", 1)])
    def test_invalid_colspan_counts_as_one(self, raw, expected):
        table = _first_table(f'<table><tr><td colspan="{raw}">x</td></tr></table>')
        assert data_cells(table_rows(table)[0])[0].colspan == expected

    def test_columns_follow_colspans(self):
        table = _first_table(
            '<table><tr><th>Processor</th><td colspan="3">A</td><td>B</td><td>C</td></tr></table>'
        )
        row = table_rows(table)[0]

        assert [cell.column for cell in data_cells(row)] == [1, 4, 5]
        assert [cell.label for cell in header_cells(row)] == ["Processor"]

    def test_text_without_footnotes(self):
        cell = TableCell(text="", html='iOS 16.7.2<sup class="reference">[12]</sup> [3]')
        assert cell.text_without_footnotes() == "iOS 16.7.2"


class TestStripFootnotes:
    def test_line_breaks_become_spaces(self):
        assert strip_footnotes("14.1<br>14.1.1") == "14.1 14.1.1"

    def test_inline_markup_is_joined(self):
        assert strip_footnotes('12<a href="#">.1</a>') == "12.1"

    def test_sup_blocks_removed(self):
        assert strip_footnotes("A11 Bionic<sup>[5]</sup><sup>note</sup>") == "A11 Bionic"


class TestTableIteration:
    def test_wikitables_preferred(self):
        document = parse_document('<table id="plain"></table><table class="wikitable sortable" id="wiki"></table>')
        assert [table["id"] for table in iter_wikitables(document)] == ["wiki"]

    def test_falls_back_to_all_tables(self):
        document = parse_document('<table id="a"></table><table id="b"></table>')
        assert [table["id"] for table in iter_wikitables(document)] == ["a", "b"]

    def test_row_labels(self):
        table = _first_table(
            "<table><tr><th> Operating\n system </th><th>Initial</th><th>x</th><td>1</td></tr></table>"
        )
        assert row_labels(table_rows(table)[0]) == ["Operating system", "Initial"]


class TestTableGrid:
    def test_rowspan_and_colspan_fill_slots(self):
        table = _first_table(
            "<table>"
            "<tr><th>Model</th><th>SoC</th><th>RAM</th></tr>"
            '<tr><td>8</td><td rowspan="2">A11</td><td>2</td></tr>'
            "<tr><td>X</td><td>3</td></tr>"
            '<tr><td colspan="3">footer</td></tr>'
            "</table>"
        )
        grid = table_grid(table)

        assert [[cell.label if cell else None for cell in row] for row in grid] == [
            ["Model", "SoC", "RAM"],
            ["8", "A11", "2"],
            ["X", "A11", "3"],
            ["footer", "footer", "footer"],
        ]
        # the spanned slot points back at the anchoring row
        assert grid[2][1].row == 1
        assert grid[2][2].column == 2

    def test_ragged_rows_are_padded(self):
        table = _first_table("<table><tr><td>a</td><td>b</td></tr><tr><td>c</td></tr></table>")
        grid = table_grid(table)

        assert len(grid[1]) == 2
        assert grid[1][1] is None

    def test_rowspan_past_last_row_is_clipped(self):
        table = _first_table('<table><tr><td rowspan="5">a</td><td>b</td></tr></table>')
        assert len(table_grid(table)) == 1
