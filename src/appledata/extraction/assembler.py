# ABOUTME: Zips per-row value sequences into DeviceRecords by model position
# ABOUTME: Unset processor/version fields keep a defined empty value instead of dropping the model

from collections.abc import Sequence

from appledata.core.errors import StructuralMismatch
from appledata.core.models import DeviceRecord
from appledata.core.version import Version


def assemble_devices(
    model_names: Sequence[str],
    processors: Sequence[str | None],
    codenames: Sequence[Sequence[str]],
    min_versions: Sequence[Version | None],
    max_versions: Sequence[Version | None],
    table_index: int | None = None,
) -> list[DeviceRecord]:
    """Build one DeviceRecord per header model, preserving header order.

    Raises:
        StructuralMismatch: any field sequence is not as long as model_names
    """
    expected = len(model_names)
    fields = {
        "processor": processors,
        "hardware identifiers": codenames,
        "initial release": min_versions,
        "latest release": max_versions,
    }
    for name, values in fields.items():
        if len(values) != expected:
            raise StructuralMismatch(
                f"{len(values)} {name} values for {expected} models", table_index=table_index, row_label=name
            )

    return [
        DeviceRecord(
            model_name=model_name,
            codenames=list(model_codenames),
            processor=processor or "",
            min_version=min_version or Version.zero(),
            max_version=max_version or Version.zero(),
        )
        for model_name, processor, model_codenames, min_version, max_version in zip(
            model_names, processors, codenames, min_versions, max_versions, strict=True
        )
    ]
