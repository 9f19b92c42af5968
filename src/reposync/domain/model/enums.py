"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class RepositorySource(StrEnum):
    """Known upstream sources, declared in activation order."""

    EGA = "ega"
    CGHUB = "cghub"
    AWS = "aws"
    COLLAB = "collab"


class RepositoryType(StrEnum):
    GNOS = "gnos"
    EGA_ARCHIVE = "ega-archive"
    S3 = "s3"


class DataType(StrEnum):
    DNA_SEQ = "dna-seq"
    RNA_SEQ = "rna-seq"
    UNCLASSIFIED = "unclassified"
