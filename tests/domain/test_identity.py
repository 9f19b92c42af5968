from __future__ import annotations

from uuid import UUID

import pytest

from reposync.domain.identity import (
    IDENTITY_NAMESPACE,
    IDENTITY_VERSION,
    encode_components,
    file_id,
    observation_id,
    resolve_id,
)


def test_resolve_id_is_deterministic() -> None:
    assert resolve_id("file", "a1", "reads.bam") == resolve_id("file", "a1", "reads.bam")


def test_resolve_id_is_uuid5_in_fixed_namespace() -> None:
    value = UUID(resolve_id("file", "a1", "reads.bam"))

    assert value.version == 5
    assert IDENTITY_VERSION == 1
    assert IDENTITY_NAMESPACE == UUID("6b1c3a52-8e0f-5d1e-9c47-3f2a8d6e4b10")


def test_resolve_id_depends_on_component_order() -> None:
    assert resolve_id("a", "b") != resolve_id("b", "a")


@pytest.mark.parametrize(
    ("left", "right"),
    [
        (("ab", "c"), ("a", "bc")),
        (("a/b",), ("a", "b")),
        (("a\\", "b"), ("a", "\\b")),
        (("a\\/b",), ("a\\", "b")),
    ],
)
def test_encoding_is_injective(left: tuple[str, ...], right: tuple[str, ...]) -> None:
    assert encode_components(left) != encode_components(right)
    assert resolve_id(*left) != resolve_id(*right)


def test_encode_components_escapes_separator_and_escape() -> None:
    assert encode_components(("a/b", "c\\d")) == "a\\/b/c\\\\d"


def test_resolve_id_requires_components() -> None:
    with pytest.raises(ValueError, match="At least one"):
        resolve_id()


def test_resolve_id_rejects_non_string_components() -> None:
    with pytest.raises(TypeError):
        resolve_id("file", 1)  # type: ignore[arg-type]


def test_file_and_observation_ids_use_distinct_conventions() -> None:
    assert file_id("a1", "reads.bam") == resolve_id("file", "a1", "reads.bam")
    assert observation_id("cghub", "a1") == resolve_id("observation", "cghub", "a1")
    assert file_id("x", "y") != observation_id("x", "y")
