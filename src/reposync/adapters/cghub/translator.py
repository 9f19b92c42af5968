"""Translate CGHub analysis details into file observations."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from reposync.domain.model import CGHUB, Donor, FileCopy, FileObservation, RepositorySource

from .schema import AnalysisDetail

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .schema import AnalysisDetailInput

log = getLogger(__name__)

CGHUB_DOWNLOAD_PATH = "cghub/data/analysis/download"
LIVE_STATE = "live"
US_PROJECT_SUFFIX = "-US"


def _ensure_analysis_detail(detail: AnalysisDetailInput) -> AnalysisDetail:
    if isinstance(detail, AnalysisDetail):
        return detail
    return AnalysisDetail.model_validate(detail)


def project_code(disease_abbr: str | None) -> str | None:
    if not disease_abbr:
        return None
    return f"{disease_abbr.upper()}{US_PROJECT_SUFFIX}"


def parse_analysis(detail: AnalysisDetailInput, *, base_url: str) -> list[FileObservation]:
    """Return one observation per file of a live analysis."""

    analysis = _ensure_analysis_detail(detail)
    if analysis.state is not None and analysis.state != LIVE_STATE:
        return []

    donors: tuple[Donor, ...] = ()
    if analysis.participant_id:
        donors = (
            Donor(
                submitted_donor_id=analysis.participant_id,
                project_code=project_code(analysis.disease_abbr),
            ),
        )

    url = f"{base_url.rstrip('/')}/{CGHUB_DOWNLOAD_PATH}/{analysis.analysis_id}"
    analyte_code = analysis.analyte_code or analysis.library_strategy

    observations: list[FileObservation] = []
    for file in analysis.files:
        copy = FileCopy(
            repo_code=CGHUB,
            url=url,
            file_name=file.filename,
            file_format=_file_format(file.filename),
            file_size=file.filesize,
            file_md5sum=file.md5sum,
            last_modified=analysis.last_modified,
            repo_file_id=analysis.analysis_id,
        )
        observations.append(
            FileObservation(
                source=RepositorySource.CGHUB,
                repo_code=CGHUB,
                repo_file_id=f"{analysis.analysis_id}/{file.filename}",
                analysis_id=analysis.analysis_id,
                file_name=file.filename,
                md5sum=file.md5sum,
                size=file.filesize,
                analyte_code=analyte_code,
                donors=donors,
                file_copies=(copy,),
            )
        )
    return observations


def parse_analyses(
    details: Iterable[AnalysisDetailInput], *, base_url: str
) -> list[FileObservation]:
    """Translate every analysis, skipping (and logging) malformed ones."""

    observations: list[FileObservation] = []
    skipped = 0
    for detail in details:
        try:
            observations.extend(parse_analysis(detail, base_url=base_url))
        except ValidationError as exc:
            skipped += 1
            log.warning("Skipping malformed CGHub analysis: %s", exc.errors()[:1])
    if skipped:
        log.warning("Skipped %s malformed CGHub analyses", skipped)
    return observations


def _file_format(file_name: str) -> str | None:
    name = file_name.lower()
    for suffix, file_format in (
        (".bam.bai", "BAI"),
        (".bai", "BAI"),
        (".bam", "BAM"),
        (".vcf.gz", "VCF"),
        (".vcf", "VCF"),
        (".fastq.gz", "FASTQ"),
        (".tar.gz", "TGZ"),
    ):
        if name.endswith(suffix):
            return file_format
    return None
