"""In-memory stand-in for the GitHub contents client."""

from detective.analysis.models import CommitRecord, RemoteFile
from detective.github.contents import RemoteFetchError, RemoteListError

RAW_BASE = "https://raw.example.com/"


def remote_file(path: str, size: int = 100, download_url: str | None = "default") -> RemoteFile:
    if download_url == "default":
        download_url = RAW_BASE + path
    return RemoteFile(
        path=path,
        name=path.rsplit("/", 1)[-1],
        kind="file",
        size=size,
        download_url=download_url,
    )


def remote_dir(path: str) -> RemoteFile:
    return RemoteFile(path=path, name=path.rsplit("/", 1)[-1], kind="dir")


class FakeSource:
    def __init__(
        self,
        tree: dict[str, list[RemoteFile]] | None = None,
        contents: dict[str, str] | None = None,
        metadata: dict | None = None,
        commits: list[CommitRecord] | None = None,
        failing_dirs=(),
        failing_files=(),
    ):
        self.tree = tree or {}
        self.contents = contents or {}
        self.metadata = metadata
        self.commits = commits or []
        self.failing_dirs = set(failing_dirs)
        self.failing_files = set(failing_files)
        self.listed: list[str] = []
        self.fetched: list[str] = []

    async def list_directory(self, path: str = "") -> list[RemoteFile]:
        self.listed.append(path)
        if path in self.failing_dirs:
            raise RemoteListError(path, "500 Internal Server Error")
        return list(self.tree.get(path, []))

    async def fetch_raw(self, url: str) -> str:
        path = url[len(RAW_BASE):] if url.startswith(RAW_BASE) else url
        self.fetched.append(path)
        if path in self.failing_files or path not in self.contents:
            raise RemoteFetchError(url, "404 Not Found")
        return self.contents[path]

    async def fetch_metadata(self) -> dict | None:
        return self.metadata

    async def fetch_commits(self, limit: int = 30) -> list[CommitRecord]:
        return self.commits[:limit]
