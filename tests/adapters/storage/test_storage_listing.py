from __future__ import annotations

from datetime import UTC, datetime

import httpx
import pytest

from reposync.adapters.storage import (
    StorageListingClient,
    StorageListingError,
    StorageListingImporter,
    parse_entities,
    parse_entity,
)
from reposync.config.object_store import get_object_store_config
from reposync.domain.model import AWS_VIRGINIA, COLLABORATORY, RepositorySource, server_for_source
from tests.helpers.repository_files import InMemoryStore, make_client_factory


def _entity(index: int) -> dict[str, object]:
    return {
        "id": f"0000000{index}-aaaa-5bbb-8ccc-dddddddddddd",
        "gnosId": f"analysis-{index}",
        "fileName": f"file-{index}.bam",
        "projectCode": "BRCA-US",
        "access": "controlled",
        "createdTime": 1451606400000,
    }


def test_parse_entity_builds_donorless_observation() -> None:
    server = server_for_source(RepositorySource.AWS)

    observation = parse_entity(_entity(1), server=server)

    assert observation.source is RepositorySource.AWS
    assert observation.repo_code == AWS_VIRGINIA
    assert observation.analysis_id == "analysis-1"
    assert observation.file_name == "file-1.bam"
    assert observation.donors == ()
    (copy,) = observation.file_copies
    assert copy.url.endswith("/oicr.icgc/data/00000001-aaaa-5bbb-8ccc-dddddddddddd")
    assert copy.last_modified == datetime(2016, 1, 1, tzinfo=UTC)


def test_parse_entities_skips_malformed_entities() -> None:
    server = server_for_source(RepositorySource.COLLAB)

    observations = parse_entities([{"id": "x"}, _entity(2)], server=server)

    assert [observation.repo_code for observation in observations] == [COLLABORATORY]


def test_client_pages_until_last_page() -> None:
    pages = {
        "0": {"content": [_entity(1), _entity(2)], "number": 0, "totalPages": 2, "last": False},
        "1": {"content": [_entity(3)], "number": 1, "totalPages": 2, "last": True},
    }
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=pages[request.url.params["page"]])

    client = StorageListingClient(
        config=get_object_store_config(RepositorySource.AWS),
        client_factory=make_client_factory(handler),
    )

    entities = client.read_entities()

    assert len(entities) == 3
    assert [request.url.params["page"] for request in requests] == ["0", "1"]
    assert requests[0].url.path == "/entities"
    assert requests[0].url.params["size"] == "2000"


def test_client_stops_on_empty_page() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"content": []})

    client = StorageListingClient(
        config=get_object_store_config(RepositorySource.COLLAB),
        client_factory=make_client_factory(handler),
    )

    assert client.read_entities() == []


def test_client_rejects_malformed_page() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[1, 2, 3])

    client = StorageListingClient(
        config=get_object_store_config(RepositorySource.AWS),
        client_factory=make_client_factory(handler),
    )

    with pytest.raises(StorageListingError):
        client.read_entities()


@pytest.mark.parametrize(
    ("source", "repo_code"),
    [(RepositorySource.AWS, AWS_VIRGINIA), (RepositorySource.COLLAB, COLLABORATORY)],
)
def test_importer_is_parameterised_per_mirror(source: RepositorySource, repo_code: str) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"content": [_entity(1)], "last": True})

    store = InMemoryStore()
    importer = StorageListingImporter(
        source,
        StorageListingClient(
            config=get_object_store_config(source),
            client_factory=make_client_factory(handler),
        ),
        store.unit_of_work,
    )

    importer.execute()

    assert importer.source is source
    (observation,) = store.rows[source]
    assert observation.repo_code == repo_code
