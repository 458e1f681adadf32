# ABOUTME: Exception taxonomy for table extraction and version parsing failures
# ABOUTME: Errors abort a single table or row; "not the table we want" is never an error


class ExtractionError(Exception):
    """Raised when a table matched a known shape and then broke an assumed sub-structure."""

    def __init__(self, message: str, *, table_index: int | None = None, row_label: str | None = None):
        super().__init__(message)
        self.message = message
        self.table_index = table_index
        self.row_label = row_label

    def __str__(self) -> str:
        location = []
        if self.table_index is not None:
            location.append(f"table {self.table_index}")
        if self.row_label:
            location.append(f"row '{self.row_label}'")
        if not location:
            return self.message
        return f"{self.message} ({', '.join(location)})"

    def locate(self, *, table_index: int | None = None, row_label: str | None = None) -> "ExtractionError":
        """Fill in location details that were unknown where the error was raised."""
        if self.table_index is None:
            self.table_index = table_index
        if self.row_label is None:
            self.row_label = row_label
        return self


class StructuralMismatch(ExtractionError):
    """A required row or row pairing is missing, or a row's value count disagrees with the header."""

    pass


class PatternNotFound(ExtractionError):
    """An expected fixed pattern (hardware identifier, version token) is absent from a cell."""

    pass


class VersionFormatError(ExtractionError, ValueError):
    """A string expected to be a version did not parse."""

    pass
