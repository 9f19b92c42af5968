from __future__ import annotations

import pytest

from reposync.adapters.identifier import IdentifierClient
from reposync.adapters.notification import LoggingNotifier
from reposync.app import (
    build_donor_id_resolver,
    build_import_context,
    build_notifier,
    create_importers,
)
from reposync.config import ImportConfig, MissingConfigurationError
from reposync.domain.model import RepositorySource
from tests.helpers.repository_files import InMemoryStore


@pytest.fixture
def ega_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EGA_USERNAME", "importer@example.org")
    monkeypatch.setenv("EGA_PASSWORD", "secret")


@pytest.mark.usefixtures("ega_credentials")
def test_create_importers_follow_activation_order() -> None:
    store = InMemoryStore()

    importers = create_importers(
        [RepositorySource.COLLAB, RepositorySource.EGA, RepositorySource.CGHUB],
        unit_of_work_factory=store.unit_of_work,
    )

    assert [importer.source for importer in importers] == [
        RepositorySource.EGA,
        RepositorySource.CGHUB,
        RepositorySource.COLLAB,
    ]


def test_create_importers_only_loads_active_source_config(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("EGA_USERNAME", raising=False)
    monkeypatch.delenv("EGA_PASSWORD", raising=False)
    store = InMemoryStore()

    importers = create_importers(
        [RepositorySource.CGHUB, RepositorySource.AWS], unit_of_work_factory=store.unit_of_work
    )

    assert [importer.source for importer in importers] == [
        RepositorySource.CGHUB,
        RepositorySource.AWS,
    ]
    with pytest.raises(MissingConfigurationError, match="EGA_PASSWORD, EGA_USERNAME"):
        create_importers([RepositorySource.EGA], unit_of_work_factory=store.unit_of_work)


def test_donor_resolution_is_optional(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("IDENTIFIER_SERVICE_URL", raising=False)
    assert build_donor_id_resolver() is None

    monkeypatch.setenv("IDENTIFIER_SERVICE_URL", "https://id.example.org")
    assert isinstance(build_donor_id_resolver(), IdentifierClient)


def test_reports_are_logged_without_mail_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SENDGRID_API_KEY", raising=False)

    assert isinstance(build_notifier(), LoggingNotifier)


def test_import_context_requires_index_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("INDEX_URL", raising=False)

    with pytest.raises(MissingConfigurationError, match="INDEX_URL"):
        build_import_context(import_config=ImportConfig(sources=(RepositorySource.CGHUB,)))


def test_import_context_carries_import_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INDEX_URL", "https://search.example.org")
    monkeypatch.delenv("IDENTIFIER_SERVICE_URL", raising=False)
    monkeypatch.delenv("SENDGRID_API_KEY", raising=False)

    context = build_import_context(
        import_config=ImportConfig(
            sources=(RepositorySource.AWS, RepositorySource.CGHUB),
            require_resolved_donors=True,
        )
    )

    assert context.sources == (RepositorySource.AWS, RepositorySource.CGHUB)
    assert context.require_resolved_donors is True
    assert [importer.source for importer in context.importers] == [
        RepositorySource.CGHUB,
        RepositorySource.AWS,
    ]
    assert isinstance(context.notifier, LoggingNotifier)
