from __future__ import annotations

import pytest

from reposync.domain.data_types import classify, resolve_data_type
from reposync.domain.model import DataType


@pytest.mark.parametrize("code", ["D", "G", "W", "X", "WGS", "WXS", " wgs "])
def test_dna_codes(code: str) -> None:
    assert resolve_data_type(code) is DataType.DNA_SEQ


@pytest.mark.parametrize("code", ["R", "T", "H", "RNA-Seq"])
def test_rna_codes(code: str) -> None:
    assert resolve_data_type(code) is DataType.RNA_SEQ


@pytest.mark.parametrize("code", [None, "", "   ", "Q", "miRNA-Seq"])
def test_unknown_codes_are_unclassified(code: str | None) -> None:
    assert classify(code) is None
    assert resolve_data_type(code) is DataType.UNCLASSIFIED
