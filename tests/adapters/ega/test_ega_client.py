from __future__ import annotations

import json
from urllib.parse import parse_qs

import httpx
import pytest

from reposync.adapters.ega import (
    EGAAPIError,
    EGAClient,
    EGAImporter,
    EGASessionExpiredError,
    parse_file,
    split_file_name,
)
from reposync.config.ega import EGAConfig, get_ega_config
from reposync.domain.model import EGA, RepositorySource
from tests.helpers.repository_files import InMemoryStore, make_client_factory

FILE_PAYLOAD: dict[str, object] = {
    "fileID": "EGAF00001",
    "fileName": "/EGAR0001/ad3e4c6f-0000-4000-8000-000000000001/reads.bam",
    "fileSize": 2048,
    "unencryptedChecksum": "ABCDEF0123456789ABCDEF0123456789",
    "fileStatus": "available",
    "fileDataset": "EGAD00001",
    "submitterDonorId": "SUBJ-7",
    "projectCode": "BRCA-UK",
    "libraryStrategy": "WGS",
}


def _ok(result: object) -> httpx.Response:
    return httpx.Response(200, json={"header": {"code": "200"}, "response": {"result": result}})


def _expired() -> httpx.Response:
    return httpx.Response(
        200, json={"header": {"code": "991", "userMessage": "session expired"}, "response": {}}
    )


@pytest.fixture
def ega_config(monkeypatch: pytest.MonkeyPatch) -> EGAConfig:
    monkeypatch.setenv("EGA_USERNAME", "importer@example.org")
    monkeypatch.setenv("EGA_PASSWORD", "secret")
    monkeypatch.delenv("EGA_API_URL", raising=False)
    return get_ega_config()


class FakeEGAServer:
    """Serves datasets/files and expires the session a configurable number of times."""

    def __init__(self, *, expirations: int = 0) -> None:
        self.expirations = expirations
        self.logins = 0
        self.login_bodies: list[dict[str, list[str]]] = []
        self.sessions_seen: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/ega/rest/access/v2")
        if path == "/users/login":
            self.logins += 1
            self.login_bodies.append(parse_qs(request.content.decode()))
            return _ok(["success", f"session-{self.logins}"])

        self.sessions_seen.append(request.url.params["session"])
        if self.expirations > 0:
            self.expirations -= 1
            return _expired()
        if path == "/datasets":
            return _ok(["EGAD00001"])
        if path == "/datasets/EGAD00001/files":
            return _ok([FILE_PAYLOAD])
        return httpx.Response(404)


def test_login_posts_loginrequest_form(ega_config: EGAConfig) -> None:
    server = FakeEGAServer()
    client = EGAClient(config=ega_config, client_factory=make_client_factory(server))

    client.read_dataset_files()

    (body,) = server.login_bodies
    assert json.loads(body["loginrequest"][0]) == {
        "username": "importer@example.org",
        "password": "secret",
    }
    assert client.session_id == "session-1"


def test_reads_dataset_files(ega_config: EGAConfig) -> None:
    server = FakeEGAServer()
    client = EGAClient(config=ega_config, client_factory=make_client_factory(server))

    (dataset,) = client.read_dataset_files()

    assert dataset.dataset_id == "EGAD00001"
    assert dataset.files == [FILE_PAYLOAD]
    assert set(server.sessions_seen) == {"session-1"}


def test_expired_session_is_renewed_and_call_retried_once(ega_config: EGAConfig) -> None:
    server = FakeEGAServer(expirations=1)
    client = EGAClient(config=ega_config, client_factory=make_client_factory(server))

    (dataset,) = client.read_dataset_files()

    assert server.logins == 2
    assert server.sessions_seen[:2] == ["session-1", "session-2"]
    assert dataset.files == [FILE_PAYLOAD]


def test_second_expiry_raises(ega_config: EGAConfig) -> None:
    server = FakeEGAServer(expirations=2)
    client = EGAClient(config=ega_config, client_factory=make_client_factory(server))

    with pytest.raises(EGASessionExpiredError) as excinfo:
        client.read_dataset_files()

    assert excinfo.value.code == 991
    assert server.logins == 2


def test_non_ok_code_raises_api_error(ega_config: EGAConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/users/login"):
            return _ok(["success", "session-1"])
        return httpx.Response(
            200, json={"header": {"code": "500", "developerMessage": "boom"}, "response": {}}
        )

    client = EGAClient(config=ega_config, client_factory=make_client_factory(handler))

    with pytest.raises(EGAAPIError, match="got 500: boom") as excinfo:
        client.read_dataset_files()

    assert not isinstance(excinfo.value, EGASessionExpiredError)


def test_failed_login_raises(ega_config: EGAConfig) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"header": {"code": "401"}, "response": {"result": []}})

    client = EGAClient(config=ega_config, client_factory=make_client_factory(handler))

    with pytest.raises(EGAAPIError, match="Could not log in"):
        client.read_dataset_files()


def test_parse_file_splits_analysis_directory() -> None:
    observation = parse_file(
        FILE_PAYLOAD, dataset_id="EGAD00001", base_url="https://ega.ebi.ac.uk/"
    )

    assert observation is not None
    assert observation.repo_code == EGA
    assert observation.repo_file_id == "EGAF00001"
    assert observation.analysis_id == "ad3e4c6f-0000-4000-8000-000000000001"
    assert observation.file_name == "reads.bam"
    assert observation.md5sum == "abcdef0123456789abcdef0123456789"
    assert observation.analyte_code == "WGS"
    (donor,) = observation.donors
    assert donor.submitted_donor_id == "SUBJ-7"
    assert donor.study == "EGAD00001"
    assert observation.file_copies[0].url == "https://ega.ebi.ac.uk/ega/files/EGAF00001"


def test_parse_file_skips_unavailable_files() -> None:
    payload = {**FILE_PAYLOAD, "fileStatus": "pending"}

    assert parse_file(payload, dataset_id="EGAD00001", base_url="https://ega.ebi.ac.uk/") is None


@pytest.mark.parametrize(
    ("file_name", "expected"),
    [
        ("reads.bam", (None, "reads.bam")),
        ("a1/reads.bam", ("a1", "reads.bam")),
        ("/EGAR1/a1/reads.bam", ("a1", "reads.bam")),
    ],
)
def test_split_file_name(file_name: str, expected: tuple[str | None, str]) -> None:
    assert split_file_name(file_name) == expected


def test_importer_stages_translated_files(ega_config: EGAConfig) -> None:
    store = InMemoryStore()
    importer = EGAImporter(
        EGAClient(config=ega_config, client_factory=make_client_factory(FakeEGAServer())),
        store.unit_of_work,
    )

    importer.execute()

    (observation,) = store.rows[RepositorySource.EGA]
    assert observation.source is RepositorySource.EGA
