"""Second-pass reclassification of line verdicts using neighbouring lines."""

from detective.analysis.models import LineVerdict
from detective.analysis.rules import CREATIVE_PATTERNS

SANDWICH_CONFIDENCE = 0.7
BLOCK_CONFIDENCE = 0.6
BLOCK_MIN_RUN = 3
BLOCK_LOOKAHEAD = 2


def is_creative_human_code(line: str) -> bool:
    """Return True if the line carries a clear human signature (planning notes, placeholders, casual comments)."""
    content = line.strip()
    return any(p.search(content) for p in CREATIVE_PATTERNS)


def _flip(verdict: LineVerdict, floor: float, reason: str) -> None:
    verdict.is_ai = True
    verdict.confidence = max(verdict.confidence, floor)
    verdict.reasons.append(reason)


def _sandwich_pass(verdicts: list[LineVerdict]) -> None:
    for i in range(1, len(verdicts) - 1):
        current = verdicts[i]
        if current.is_blank or current.is_ai:
            continue
        # A blank neighbour is never AI, so blank lines break a sandwich.
        if verdicts[i - 1].is_ai and verdicts[i + 1].is_ai and not is_creative_human_code(current.content):
            _flip(current, SANDWICH_CONFIDENCE, "Line sandwiched between AI-generated code blocks")


def _ai_follows(verdicts: list[LineVerdict], start: int) -> bool:
    seen = 0
    for verdict in verdicts[start:]:
        if verdict.is_blank:
            continue
        if verdict.is_ai:
            return True
        seen += 1
        if seen >= BLOCK_LOOKAHEAD:
            break
    return False


def _block_pass(verdicts: list[LineVerdict]) -> None:
    run = 0
    for i, verdict in enumerate(verdicts):
        if verdict.is_blank:
            run = 0
            continue
        if verdict.is_ai:
            run += 1
            continue
        if run >= BLOCK_MIN_RUN and not is_creative_human_code(verdict.content):
            if _ai_follows(verdicts, i + 1):
                _flip(verdict, BLOCK_CONFIDENCE, "Part of extended AI-generated code block")
        run = 0


def smooth(verdicts: list[LineVerdict]) -> None:
    """
    Rewrite *verdicts* in place: first the sandwich pass, then the
    block-extension pass. Both walk forward once; flips from the first
    pass are visible to the second. Confidence only ever goes up.
    """
    _sandwich_pass(verdicts)
    _block_pass(verdicts)
