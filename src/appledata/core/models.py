# ABOUTME: Domain records produced by table extraction: devices, processors and table failures
# ABOUTME: Records are built fresh per run and handed straight to persistence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from appledata.core.version import Version, VersionRange


class ProcessorRecord(BaseModel):
    """A system-on-chip with a stable short code used as join key."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(description="Short code, e.g. A11_Bionic")
    label: str = Field(description="Human readable label, e.g. A11 Bionic")


class DeviceRecord(BaseModel):
    """One retail model with its codenames, processor and supported firmware range."""

    model_name: str = Field(description="Marketing model name from the table header")
    codenames: list[str] = Field(min_length=1, description="Hardware identifiers, in source order")
    processor: str = Field(default="", description="Processor label, empty when unset")
    min_version: Version = Field(default_factory=Version.zero, description="Earliest supported release")
    max_version: Version = Field(default_factory=Version.zero, description="Latest supported release")

    @field_validator("codenames")
    @classmethod
    def _unique_codenames(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError(f"Duplicate codenames: {value}")
        return value

    @property
    def supported_range(self) -> VersionRange:
        return VersionRange.inclusive(self.min_version, self.max_version)

    @property
    def has_unset_fields(self) -> bool:
        return not self.processor or self.min_version.is_zero or self.max_version.is_zero

    def __str__(self) -> str:
        return (
            f"{self.model_name} ({'; '.join(self.codenames)}) [{self.processor}] "
            f"- Support: [{self.min_version}, {self.max_version}]"
        )


class TableFailure(BaseModel):
    """A unit of work (table or page) that was aborted while the run continued."""

    source: str = Field(description="URL or label of the document the failure came from")
    table_index: int | None = Field(default=None, description="Index of the table within the document")
    row_label: str | None = Field(default=None, description="Header label of the offending row")
    error_type: str = Field(description="Exception class name")
    message: str = Field(description="Diagnostic message")

    @classmethod
    def from_exception(cls, source: str, error: Exception, table_index: int | None = None) -> "TableFailure":
        return cls(
            source=source,
            table_index=getattr(error, "table_index", None) if table_index is None else table_index,
            row_label=getattr(error, "row_label", None),
            error_type=type(error).__name__,
            message=getattr(error, "message", str(error)),
        )
