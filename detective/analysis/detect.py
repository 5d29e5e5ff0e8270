"""Classify code lines as likely AI-authored or human-written using lexical heuristics."""

from detective.analysis import rules
from detective.analysis.context import smooth
from detective.analysis.models import FileVerdict, LineVerdict
from detective.analysis.rules import Polarity
from detective.analysis.stats import summarize


def _neutral(line: str) -> LineVerdict:
    return LineVerdict(
        content=line,
        is_ai=False,
        confidence=rules.NEUTRAL_CONFIDENCE,
        reasons=["Empty line - neutral"],
    )


def classify_line(line: str, line_number: int, language: str) -> LineVerdict:
    """
    Score one line against the generic and language rules plus line-shape checks.
    *line_number* is 1-based and informational only.
    """
    content = line.strip()
    if not content:
        return _neutral(line)

    ai_score = 0.0
    human_score = 0.0
    reasons: list[str] = []

    language_rules = rules.LANGUAGE_RULES.get((language or "").lower(), ())
    for rule in (*rules.GENERIC_RULES, *language_rules):
        if not rule.matches(content):
            continue
        if rule.polarity is Polarity.AI:
            ai_score += rule.weight
        else:
            human_score += rule.weight
        reasons.append(rule.reason)

    if len(content) > rules.LONG_LINE:
        ai_score += rules.LONG_LINE_WEIGHT
        reasons.append("Very long line length typical of AI generation")
    elif len(content) < rules.SHORT_LINE and not rules.STRUCTURAL_PUNCTUATION.search(content):
        human_score += rules.SHORT_LINE_WEIGHT
        reasons.append("Short, concise line suggests human writing")

    if len(content) > rules.CLEAN_LINE and not rules.UNCLEAN_CHAR.search(content):
        ai_score += rules.CLEAN_LINE_WEIGHT
        reasons.append("Perfect syntax and structure")

    if rules.PLACEHOLDER_TOKENS.search(content):
        human_score += rules.PLACEHOLDER_WEIGHT
        reasons.append("Uses creative or placeholder naming typical of humans")

    total = ai_score + human_score
    confidence = max(ai_score, human_score) / total if total > 0 else rules.NEUTRAL_CONFIDENCE
    confidence = min(max(confidence, rules.MIN_CONFIDENCE), rules.MAX_CONFIDENCE)

    if not reasons:
        reasons.append("No significant patterns detected - neutral classification")

    return LineVerdict(
        content=line,
        # ties go to human
        is_ai=ai_score > human_score,
        confidence=confidence,
        reasons=reasons,
    )


def structure_score(code: str) -> float:
    """
    Whole-file bias in [0, 1]; higher means the overall shape looks more AI-like.
    Signals: indentation consistency (+0.3), aligned structure (+0.2),
    no human messiness (+0.15), comment density (+0.2), defensive
    programming density (+0.25), validation preamble (+0.2).
    """
    lines = [line for line in code.split("\n") if line.strip()]
    if not lines:
        return 0.0

    score = 0.0

    reference = ""
    consistent = 0
    aligned = 0
    for line in lines:
        indent = rules.INDENT.match(line).group(0)
        if not reference and indent:
            reference = indent
        if indent == "" or indent.startswith(reference):
            consistent += 1
        if rules.ALIGNED_LINE.match(line):
            aligned += 1

    if consistent / len(lines) > 0.9:
        score += 0.3
    if aligned / len(lines) > 0.4:
        score += 0.2

    messy = sum(1 for line in lines if any(p.search(line) for p in rules.MESSY_PATTERNS))
    if messy == 0 and len(lines) > 10:
        score += 0.15

    if len(rules.COMMENT.findall(code)) / len(lines) > 0.3:
        score += 0.2

    defensive = len(rules.ERROR_HANDLING.findall(code)) + len(rules.VALIDATION.findall(code))
    if defensive > len(lines) * 0.1:
        score += 0.25

    preamble = "\n".join(lines[: rules.PREAMBLE_LINES])
    if rules.DEFENSIVE_PREAMBLE.search(preamble):
        score += 0.2

    return min(score, 1.0)


def apply_structure_bias(verdicts: list[LineVerdict], bias: float) -> None:
    """Nudge confidence of AI lines up when the file shape looks AI-generated."""
    if bias <= rules.STRUCTURE_BIAS_THRESHOLD:
        return
    for verdict in verdicts:
        if verdict.is_ai:
            verdict.confidence = min(verdict.confidence + rules.STRUCTURE_BIAS_BOOST, rules.MAX_CONFIDENCE)


def classify(code: str, language: str) -> FileVerdict:
    """Run the full pipeline on one in-memory text: lines, structure bias, smoothing, stats."""
    verdicts = [
        classify_line(line, number, language)
        for number, line in enumerate(code.split("\n"), start=1)
    ]
    apply_structure_bias(verdicts, structure_score(code))
    smooth(verdicts)
    return summarize(verdicts)
