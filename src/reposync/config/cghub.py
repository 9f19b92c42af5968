"""CGHub metadata service configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_list
from .http_resilience import NO_RETRY, ResilienceConfig

CGHUB_BASE_URL = "https://cghub.ucsc.edu"
CGHUB_ANALYSIS_DETAIL_PATH = "/cghub/metadata/analysisDetail"
CGHUB_TCGA_STUDY = "phs000178"
CGHUB_TIMEOUT_SECONDS = 120.0

DEFAULT_DISEASE_CODES = (
    "BLCA",
    "BRCA",
    "COAD",
    "GBM",
    "HNSC",
    "KIRC",
    "LAML",
    "LUAD",
    "LUSC",
    "OV",
    "PRAD",
    "STAD",
    "THCA",
    "UCEC",
)


@dataclass(frozen=True, slots=True)
class CGHubConfig:
    disease_codes: tuple[str, ...]
    study: str
    resilience: ResilienceConfig


def get_cghub_config() -> CGHubConfig:
    return CGHubConfig(
        disease_codes=env_list("CGHUB_DISEASE_CODES", DEFAULT_DISEASE_CODES),
        study=CGHUB_TCGA_STUDY,
        resilience=ResilienceConfig(
            name="cghub",
            base_url=CGHUB_BASE_URL,
            timeout_seconds=CGHUB_TIMEOUT_SECONDS,
            retry=NO_RETRY,
            default_headers={"Accept": "application/json"},
        ),
    )
