"""Translate EGA dataset files into file observations."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from reposync.domain.model import EGA, Donor, FileCopy, FileObservation, RepositorySource

from .schema import EGAFilePayload

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .client import DatasetFiles
    from .schema import EGAFileInput

log = getLogger(__name__)

EGA_FILE_PATH = "ega/files"
AVAILABLE_STATUS = "available"


def _ensure_file_payload(file: EGAFileInput) -> EGAFilePayload:
    if isinstance(file, EGAFilePayload):
        return file
    return EGAFilePayload.model_validate(file)


def split_file_name(file_name: str) -> tuple[str | None, str]:
    """Split ``<analysis id>/<file name>`` submissions; bare names have no analysis."""

    parent, _, name = file_name.strip("/").rpartition("/")
    if not parent:
        return None, name
    return parent.rsplit("/", 1)[-1], name


def parse_file(
    file: EGAFileInput, *, dataset_id: str, base_url: str
) -> FileObservation | None:
    payload = _ensure_file_payload(file)
    if payload.file_status is not None and payload.file_status.lower() != AVAILABLE_STATUS:
        return None

    path_analysis_id, file_name = split_file_name(payload.file_name)
    analysis_id = payload.analysis_id or path_analysis_id or payload.dataset_id or dataset_id

    donors: tuple[Donor, ...] = ()
    if payload.submitter_donor_id:
        donors = (
            Donor(
                submitted_donor_id=payload.submitter_donor_id,
                project_code=payload.project_code,
                study=dataset_id,
            ),
        )

    md5sum = payload.file_md5.lower() if payload.file_md5 else None
    copy = FileCopy(
        repo_code=EGA,
        url=f"{base_url.rstrip('/')}/{EGA_FILE_PATH}/{payload.file_id}",
        file_name=file_name,
        file_size=payload.file_size,
        file_md5sum=md5sum,
        repo_file_id=payload.file_id,
    )
    return FileObservation(
        source=RepositorySource.EGA,
        repo_code=EGA,
        repo_file_id=payload.file_id,
        analysis_id=analysis_id,
        file_name=file_name,
        md5sum=md5sum,
        size=payload.file_size,
        analyte_code=payload.library_strategy,
        donors=donors,
        file_copies=(copy,),
    )


def parse_datasets(datasets: Iterable[DatasetFiles], *, base_url: str) -> list[FileObservation]:
    observations: list[FileObservation] = []
    for dataset in datasets:
        for file in dataset.files:
            try:
                observation = parse_file(file, dataset_id=dataset.dataset_id, base_url=base_url)
            except ValidationError as exc:
                log.warning(
                    "Skipping malformed EGA file in dataset '%s': %s",
                    dataset.dataset_id,
                    exc.errors()[:1],
                )
                continue
            if observation is not None:
                observations.append(observation)
    return observations
