from adapter.github.client import GitHubClient
from adapter.github.code_host import GitHubCodeHost
from adapter.sanity.comic_reader import SanityComicReader
from adapter.sanity.comic_writer import SanityComicWriter
from adapter.sanity.connection import get_sanity_client
from port.code_host import CodeHostPort
from port.comic_reader import ComicReader
from port.comic_writer import ComicWriter
from utils.settings import get_settings


def get_comic_reader() -> ComicReader:
    settings = get_settings()
    return SanityComicReader(get_sanity_client(), settings.sanity_project_id, settings.sanity_dataset)


def get_comic_writer() -> ComicWriter:
    return SanityComicWriter(get_sanity_client())


def get_code_host() -> CodeHostPort:
    settings = get_settings()
    client = GitHubClient(settings.github_token, timeout=settings.http_timeout_seconds)
    return GitHubCodeHost(client, settings.github_owner, settings.github_repo)


def get_preview_pages_project() -> str:
    return get_settings().preview_pages_project
