"""Verdict and remote-file types shared by the classifier and repository pipeline."""

from dataclasses import asdict, dataclass, field


@dataclass
class LineVerdict:
    """Per-line classification. Only contextual smoothing mutates it after creation."""

    content: str
    is_ai: bool
    confidence: float
    reasons: list[str] = field(default_factory=list)

    @property
    def is_blank(self) -> bool:
        return not self.content.strip()

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Stats:
    total_lines: int = 0
    ai_lines: int = 0
    human_lines: int = 0
    ai_percentage: float = 0.0
    human_percentage: float = 0.0
    overall_confidence: float = 0.5

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class FileVerdict:
    total_lines: int
    ai_lines: int
    human_lines: int
    ai_percentage: float
    human_percentage: float
    overall_confidence: float
    lines: list[LineVerdict] = field(default_factory=list)

    @property
    def stats(self) -> Stats:
        return Stats(
            total_lines=self.total_lines,
            ai_lines=self.ai_lines,
            human_lines=self.human_lines,
            ai_percentage=self.ai_percentage,
            human_percentage=self.human_percentage,
            overall_confidence=self.overall_confidence,
        )

    def to_dict(self) -> dict:
        data = self.stats.to_dict()
        data["lines"] = [line.to_dict() for line in self.lines]
        return data


@dataclass(frozen=True)
class FileAnalysis:
    path: str
    language: str
    size: int
    verdict: FileVerdict

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "language": self.language,
            "size": self.size,
            "analysis": self.verdict.to_dict(),
        }


@dataclass(frozen=True)
class RemoteFile:
    """One entry of a remote directory listing."""

    path: str
    name: str
    kind: str  # "file" or "dir"
    size: int = 0
    download_url: str | None = None

    @classmethod
    def from_api(cls, item: dict) -> "RemoteFile":
        return cls(
            path=item.get("path", ""),
            name=item.get("name", ""),
            kind=item.get("type", "file"),
            size=item.get("size") or 0,
            download_url=item.get("download_url"),
        )


@dataclass(frozen=True)
class CommitRecord:
    author_login: str = ""
    author_name: str = ""
    author_email: str = ""
    message: str = ""

    @classmethod
    def from_api(cls, item: dict) -> "CommitRecord":
        commit = item.get("commit") or {}
        author = commit.get("author") or {}
        return cls(
            author_login=(item.get("author") or {}).get("login") or "",
            author_name=author.get("name") or "",
            author_email=author.get("email") or "",
            message=commit.get("message") or "",
        )


@dataclass(frozen=True)
class Provenance:
    is_generated: bool = False
    indicators: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RepositoryVerdict:
    repository_url: str
    total_files: int
    analyzed_files: int
    files: list[FileAnalysis]
    stats: Stats
    provenance: Provenance = field(default_factory=Provenance)

    def to_dict(self) -> dict:
        return {
            "repository_url": self.repository_url,
            "total_files": self.total_files,
            "analyzed_files": self.analyzed_files,
            "files": [f.to_dict() for f in self.files],
            "overall_stats": self.stats.to_dict(),
            "is_generated": self.provenance.is_generated,
            "indicators": list(self.provenance.indicators),
        }
