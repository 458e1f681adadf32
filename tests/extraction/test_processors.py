# ABOUTME: Tests for processor extraction from the SoC table and theiphonewiki headlines
# ABOUTME: Checks label matching, rowspan handling and code de-duplication

import pytest

from appledata.core.models import ProcessorRecord
from appledata.extraction.html import parse_document
from appledata.extraction.processors import (
    extract_processors,
    extract_processors_from_headlines,
    match_processor_label,
    processor_code,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("A11 Bionic", "A11 Bionic"),
        ("A10 Fusion[7]", "A10 Fusion"),
        ("A17 Pro (3 nm)", "A17 Pro"),
        ("A5X", "A5X"),
        ("A4", "A4"),
        ("Samsung S5L8900", None),
        ("Apple A11 Bionic", None),
        ("", None),
    ],
)
def test_match_processor_label(text, expected):
    assert match_processor_label(text) == expected


def test_processor_code():
    assert processor_code("A11 Bionic") == "A11_Bionic"
    assert processor_code("A4") == "A4"


class TestExtractProcessors:
    def test_soc_table(self, soc_table):
        records = extract_processors(parse_document(soc_table))

        assert [record.code for record in records] == ["A11_Bionic", "A12_Bionic", "A16_Bionic", "A17_Pro"]
        assert records[0] == ProcessorRecord(code="A11_Bionic", label="A11 Bionic")

    def test_other_tables_on_the_page_are_ignored(self, models_page):
        records = extract_processors(parse_document(models_page))
        assert len(records) == 4

    def test_header_with_footnote(self):
        html = (
            '<table class="wikitable">'
            "<tr><th>Model</th><th>System-on-chip<sup>[1]</sup></th></tr>"
            "<tr><td>iPhone 4</td><td>A4</td></tr>"
            "</table>"
        )
        assert [record.label for record in extract_processors(parse_document(html))] == ["A4"]

    def test_no_soc_table(self, device_table):
        assert extract_processors(parse_document(device_table)) == []


class TestExtractProcessorsFromHeadlines:
    def test_headlines(self, headlines_page):
        records = extract_processors_from_headlines(parse_document(headlines_page))

        assert [(record.code, record.label) for record in records] == [
            ("S5L8930", "Apple A4"),
            ("T8015", "Apple A11 Bionic"),
        ]

    def test_no_headlines(self):
        assert extract_processors_from_headlines(parse_document("<h5>Plain</h5>")) == []
