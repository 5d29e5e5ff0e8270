"""Fold line verdicts into file and repository statistics."""

from dataclasses import dataclass, field

from detective.analysis.models import (
    FileAnalysis,
    FileVerdict,
    LineVerdict,
    Provenance,
    RepositoryVerdict,
    Stats,
)

_DEFAULT_CONFIDENCE = 0.5


def _percent(count: int, total: int) -> float:
    return count / total * 100 if total > 0 else 0.0


def summarize(verdicts: list[LineVerdict]) -> FileVerdict:
    """Count AI/human lines and average confidence over non-blank lines."""
    counted = [v for v in verdicts if not v.is_blank]
    total = len(counted)
    ai_lines = sum(1 for v in counted if v.is_ai)
    human_lines = total - ai_lines
    confidence = sum(v.confidence for v in counted) / total if total else _DEFAULT_CONFIDENCE

    return FileVerdict(
        total_lines=total,
        ai_lines=ai_lines,
        human_lines=human_lines,
        ai_percentage=_percent(ai_lines, total),
        human_percentage=_percent(human_lines, total),
        overall_confidence=confidence,
        lines=list(verdicts),
    )


@dataclass
class RepositoryTotals:
    """Running totals built one analyzed file at a time."""

    files: list[FileAnalysis] = field(default_factory=list)
    total_lines: int = 0
    ai_lines: int = 0
    human_lines: int = 0
    confidence_sum: float = 0.0

    def add(self, analysis: FileAnalysis) -> None:
        verdict = analysis.verdict
        self.files.append(analysis)
        self.total_lines += verdict.total_lines
        self.ai_lines += verdict.ai_lines
        self.human_lines += verdict.human_lines
        self.confidence_sum += verdict.overall_confidence

    def stats(self) -> Stats:
        # Line-weighted percentages; confidence averaged per analyzed file.
        analyzed = len(self.files)
        return Stats(
            total_lines=self.total_lines,
            ai_lines=self.ai_lines,
            human_lines=self.human_lines,
            ai_percentage=_percent(self.ai_lines, self.total_lines),
            human_percentage=_percent(self.human_lines, self.total_lines),
            overall_confidence=self.confidence_sum / analyzed if analyzed else _DEFAULT_CONFIDENCE,
        )

    def build(self, repository_url: str, total_files: int, provenance: Provenance) -> RepositoryVerdict:
        return RepositoryVerdict(
            repository_url=repository_url,
            total_files=total_files,
            analyzed_files=len(self.files),
            files=list(self.files),
            stats=self.stats(),
            provenance=provenance,
        )


@dataclass(frozen=True)
class UsageLevel:
    label: str
    description: str

    def to_dict(self) -> dict:
        return {"label": self.label, "description": self.description}


# (exclusive lower bound on AI percentage, level), checked top-down
_USAGE_LEVELS = (
    (30, UsageLevel("Strong AI Usage", "Code likely AI-generated")),
    (20, UsageLevel("High AI Usage", "Significant AI assistance")),
    (15, UsageLevel("Moderate AI Usage", "Some AI help detected")),
    (10, UsageLevel("Little AI Help", "Minor AI assistance")),
    (5, UsageLevel("Professional Code", "Well-written, minimal AI")),
)
_HUMAN_LEVEL = UsageLevel("Human Code", "Likely human-written")


def usage_level(ai_percentage: float) -> UsageLevel:
    """Bucket an AI line percentage into a human-readable usage level."""
    for threshold, level in _USAGE_LEVELS:
        if ai_percentage > threshold:
            return level
    return _HUMAN_LEVEL
