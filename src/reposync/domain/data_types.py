"""Map per-source analyte / assay codes onto data type categories."""

from __future__ import annotations

from typing import Final

from reposync.domain.model.enums import DataType

DNA_SEQ_ANALYTE_CODES: Final[frozenset[str]] = frozenset({"D", "G", "W", "X", "WGS", "WXS"})
RNA_SEQ_ANALYTE_CODES: Final[frozenset[str]] = frozenset({"R", "T", "H", "RNA-SEQ"})


def classify(code: str | None) -> DataType | None:
    """Return the data type for ``code`` or ``None`` when it is not a known code."""

    if code is None:
        return None
    normalized = code.strip().upper()
    if normalized in DNA_SEQ_ANALYTE_CODES:
        return DataType.DNA_SEQ
    if normalized in RNA_SEQ_ANALYTE_CODES:
        return DataType.RNA_SEQ
    return None


def resolve_data_type(code: str | None) -> DataType:
    """Like :func:`classify` but falls back to ``DataType.UNCLASSIFIED``."""

    return classify(code) or DataType.UNCLASSIFIED
