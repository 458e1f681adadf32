# ABOUTME: Fixed regular expressions used by table extraction, compiled once at import
# ABOUTME: Version tokens, hardware identifiers, processor labels and footnote markup

import re

DEFAULT_FAMILY_PREFIXES: tuple[str, ...] = ("iPhone",)

# Bracketed numeric references such as "[12]"
FOOTNOTE_REFERENCE = re.compile(r"\[\d+\]")

# <sup>...</sup> blocks hold footnote links on wiki pages
FOOTNOTE_MARKUP = re.compile(r"<sup\b[^>]*>.*?</sup>", re.IGNORECASE | re.DOTALL)

LINE_BREAK = re.compile(r"<br\s*/?>", re.IGNORECASE)

# 1-3 dot separated digit groups, not glued to further digits or dots
VERSION_TOKEN = re.compile(r"(?<![\d.])\d+(?:\.\d+){0,2}(?![\d.]*\d)")

# Release pages and summary ids always carry at least major.minor
RELEASE_VERSION_TOKEN = re.compile(r"\d+\.\d+(?:\.\d+)?")
VERSION_ID = re.compile(r"^[0-9]+\.[0-9]+(?:\.[0-9]+)?$")

PROCESSOR_LABEL = re.compile(r"^(A[0-9]+X?(?: Fusion| Bionic| Pro)?)")
PROCESSOR_HEADLINE = re.compile(r"^([^ ]+) (Apple A[0-9]+X?(?: Fusion| Bionic)?)")
PROCESSOR_CODE_SEPARATOR = "_"


def hardware_identifier_pattern(family_prefixes: tuple[str, ...] = DEFAULT_FAMILY_PREFIXES) -> re.Pattern[str]:
    """Pattern for "<family><int>,<int>" tokens such as iPhone10,3."""
    families = "|".join(re.escape(prefix) for prefix in family_prefixes)
    return re.compile(rf"(?:{families})[0-9]+,[0-9]+")


HARDWARE_IDENTIFIER = hardware_identifier_pattern()
