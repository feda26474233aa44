"""Environment configuration.

Values are read once per process. Nothing is validated at startup: a missing
token or project id surfaces later as a failed downstream call.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    sanity_project_id: str
    sanity_dataset: str
    sanity_api_version: str
    sanity_write_token: str
    admin_origin: str
    github_token: str
    github_owner: str
    github_repo: str
    preview_pages_project: str
    http_timeout_seconds: float
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            sanity_project_id=os.getenv('SANITY_PROJECT_ID', 'jbvskr1t'),
            sanity_dataset=os.getenv('SANITY_DATASET', 'production'),
            sanity_api_version=os.getenv('SANITY_API_VERSION', '2024-01-01'),
            sanity_write_token=os.getenv('SANITY_WRITE_TOKEN', ''),
            admin_origin=os.getenv('ADMIN_ORIGIN', ''),
            github_token=os.getenv('GITHUB_TOKEN', ''),
            github_owner=os.getenv('GITHUB_OWNER', 'ericvanlare'),
            github_repo=os.getenv('GITHUB_REPO', 'webcomic-sandbox'),
            preview_pages_project=os.getenv('PREVIEW_PAGES_PROJECT', 'webcomic-sandbox'),
            http_timeout_seconds=float(os.getenv('HTTP_TIMEOUT_SECONDS', '30')),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
