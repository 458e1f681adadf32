# ABOUTME: Tests for the firmware version scan over summary and release pages
# ABOUTME: Document order is kept and non-version content is skipped quietly

from appledata.core.version import Version
from appledata.extraction.html import iter_wikitables, parse_document
from appledata.extraction.versions import (
    extract_versions_from_pages,
    extract_versions_from_release_page,
    extract_versions_from_summary,
    is_release_table,
    versions_in_cell_markup,
)


class TestSummaryPage:
    def test_header_ids(self, history_page):
        versions = extract_versions_from_summary(parse_document(history_page))
        assert versions == [Version(16, 0, 0), Version(16, 0, 2), Version(16, 1, 0)]

    def test_ids_outside_wikitables_are_ignored(self):
        document = parse_document('<table><tr><th id="2.0">2.0</th></tr></table>')
        assert extract_versions_from_summary(document) == []

    def test_single_component_id_is_skipped(self):
        document = parse_document('<table class="wikitable"><tr><th id="16">16</th></tr></table>')
        assert extract_versions_from_summary(document) == []


class TestCellMarkup:
    def test_one_version_per_line(self):
        assert versions_in_cell_markup("14.1<br>14.1.1") == [Version(14, 1, 0), Version(14, 1, 1)]

    def test_footnotes_dropped(self):
        assert versions_in_cell_markup('14.0.1<sup class="reference">[4]</sup>') == [Version(14, 0, 1)]

    def test_links_are_read_as_text(self):
        assert versions_in_cell_markup('<a href="/wiki/IOS_14">14.2</a> (18B92)') == [Version(14, 2, 0)]

    def test_lines_without_versions(self):
        assert versions_in_cell_markup("Beta<br/>") == []


class TestReleasePage:
    def test_first_column_of_version_tables(self, make_release_page):
        page = make_release_page("14.0", "14.0.1<sup>[4]</sup>", "14.1<br>14.1.1", "Beta")
        versions = extract_versions_from_release_page(parse_document(page))

        assert versions == [Version(14, 0, 0), Version(14, 0, 1), Version(14, 1, 0), Version(14, 1, 1)]

    def test_is_release_table(self, make_release_page):
        tables = list(iter_wikitables(parse_document(make_release_page("1.0"))))
        assert [is_release_table(table) for table in tables] == [True, False]

    def test_pages_concatenate_in_order(self, make_release_page):
        documents = [parse_document(make_release_page("2.0", "2.0")), parse_document(make_release_page("1.1"))]
        assert extract_versions_from_pages(documents) == [Version(2, 0, 0), Version(2, 0, 0), Version(1, 1, 0)]
