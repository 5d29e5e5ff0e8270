"""Weighted detection rules for line-level AI vs human classification."""

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class Polarity(Enum):
    AI = "ai"
    HUMAN = "human"


@dataclass(frozen=True)
class DetectionRule:
    pattern: re.Pattern
    weight: float
    reason: str
    polarity: Polarity

    def matches(self, content: str) -> bool:
        return self.pattern.search(content) is not None


def _rule(pattern: str, weight: float, reason: str, polarity: Polarity, flags: int = 0) -> DetectionRule:
    if weight < 0:
        raise ValueError(f"rule weight must be non-negative: {weight}")
    return DetectionRule(re.compile(pattern, flags), weight, reason, polarity)


_AI = Polarity.AI
_HUMAN = Polarity.HUMAN

# Comment leader: `//`, or `#` followed by whitespace
_C = r"(?://|#(?=\s))"

GENERIC_RULES: tuple[DetectionRule, ...] = (
    # AI indicators
    _rule(
        r"//\s*---\s*.*\s*---\s*$", 0.9,
        "Section-based comments with dashes, a signature of AI structure", _AI,
    ),
    _rule(
        r"//\s*Generated with.*ChatGPT|//.*AI Code Style Guide", 1.0,
        "Explicit AI generation comment", _AI, re.I,
    ),
    _rule(
        _C + r"\s*Step\s*\d+:|//\s*\d+\.", 0.8,
        "Contains step-by-step comments typical of AI explanations", _AI, re.I,
    ),
    _rule(
        _C + r"\s*(Get|Parse|Check|Validate|Perform|Display|Calculate|Initialize|Handle|Process).*$", 0.6,
        "Contains verbose explanatory comments typical of AI generation", _AI,
    ),
    _rule(
        r"(Usage:|Example:|Error:).*$", 0.7,
        "Contains structured error messages with examples", _AI,
    ),
    _rule(
        r"try\s*{.*?catch\s*\([^)]*\)\s*{.*?(console\.(error|log)|process\.exit)", 0.6,
        "try/catch with console output in CLI context, typical of ChatGPT", _AI, re.S,
    ),
    _rule(
        r"(process\.exit\(1\)|isNaN\(|\.length\s*[!=]=|args\.length|Missing\s+(argument|parameter))", 0.7,
        "Contains comprehensive input validation typical of AI first-draft code", _AI,
    ),
    _rule(
        r"(Usage:\s*|Example:\s*|Please\s+(provide|ensure|check))", 0.8,
        "Polite, structured error messages with usage examples", _AI, re.I,
    ),
    _rule(
        r"\b(commandLineArguments|userInput|calculationResult|operatorSymbol)\b", 0.6,
        "Uses overly descriptive variable names", _AI, re.I,
    ),
    _rule(
        r"switch\s*\([^)]+\)\s*{.*default:.*}", 0.4,
        "Contains comprehensive switch statement with default case", _AI, re.S,
    ),
    _rule(
        r"^#!", 0.3,
        "Includes shebang line typical of AI-generated scripts", _AI,
    ),
    # Human indicators
    _rule(
        r"console\.log\((?!.*Result:|.*Error:|.*Usage:)", 0.6,
        "Contains debug console.log statements", _HUMAN,
    ),
    _rule(
        r"(TODO|FIXME|HACK|XXX):", 0.7,
        "Contains TODO/FIXME comments indicating human planning", _HUMAN, re.I,
    ),
    _rule(
        _C + r"\s*[a-z][^.]*$", 0.3,
        "Contains short, terse comments typical of human code", _HUMAN,
    ),
    _rule(
        r"\b(btn|txt|img|nav|auth|cfg|opts|params|ctx|req|res|db|api|temp|tmp|val|str|num|arr|obj)\b", 0.4,
        "Uses abbreviated variable names common in human code", _HUMAN, re.I,
    ),
    _rule(
        r"\s{3,}(?!\s*//)|[;}]\s*[;}]|\t\s+|\s+\t", 0.5,
        "Has inconsistent spacing typical of human editing", _HUMAN,
    ),
    _rule(
        r"\[[^\]]*\]\.map\(|\.filter\(|\.reduce\(", 0.2,
        "Uses functional programming without extensive validation", _HUMAN,
    ),
)

_JAVASCRIPT_RULES = (
    _rule(r"console\.log\([^)]*\)", 0.2, "Contains debug console.log statements", _HUMAN),
    _rule(r"function\s+\w+\s*\([^)]*\)\s*{", 0.1, "Uses function declarations", _AI),
)

_TYPESCRIPT_RULES = (
    _rule(
        r":\s*(string|number|boolean|any|unknown|void|never)\b", 0.2,
        "Contains explicit type annotations", _AI,
    ),
)

_PYTHON_RULES = (
    _rule(r"print\([^)]*\)", 0.2, "Contains debug print statements", _HUMAN),
    _rule(r"def\s+\w+\s*\([^)]*\):", 0.1, "Uses function definitions", _AI),
    _rule(
        r"def\s+\w+\s*\(.*\w+\s*:\s*(int|str|bool|float|list|dict|Optional)\b", 0.2,
        "Uniformly type-hinted parameters", _AI,
    ),
)

LANGUAGE_RULES = MappingProxyType({
    "javascript": _JAVASCRIPT_RULES,
    "jsx": _JAVASCRIPT_RULES,
    "typescript": _TYPESCRIPT_RULES,
    "tsx": _TYPESCRIPT_RULES,
    "python": _PYTHON_RULES,
})

# Secondary line-shape heuristics
LONG_LINE = 120
LONG_LINE_WEIGHT = 0.2
SHORT_LINE = 20
SHORT_LINE_WEIGHT = 0.1
CLEAN_LINE = 30
CLEAN_LINE_WEIGHT = 0.1
PLACEHOLDER_WEIGHT = 0.3

STRUCTURAL_PUNCTUATION = re.compile(r"[{}();,]")
# Anything outside this set (quotes, backticks, non-ASCII) makes a line "unclean"
UNCLEAN_CHAR = re.compile(r"[^\w\s()\[\]{};:,.<>!@#$%^&*+=|\\?/-]", re.A)
# Underscores count as separators so foo_bar_hack() still matches
PLACEHOLDER_TOKENS = re.compile(
    r"(?<![A-Za-z0-9])(foo|bar|baz|qux|quirky|magic|hack|wtf)(?![A-Za-z0-9])", re.I,
)

NEUTRAL_CONFIDENCE = 0.5
MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.95

# Lines matching any of these are never reclassified by contextual smoothing
CREATIVE_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"(TODO|FIXME|HACK|XXX|NOTE):", re.I),
    re.compile(r"(?<![A-Za-z0-9])(foo|bar|baz|qux|quirky|magic|hack|wtf|temp|tmp)(?![A-Za-z0-9])", re.I),
    re.compile(r"console\.log\((?!.*Result:|.*Error:|.*Usage:)"),
    re.compile(_C + r"\s*(FIXME|TODO|HACK|NOTE)", re.I),
    re.compile(_C + r"\s*[a-z][^.A-Z]*$"),
    re.compile(r"\?\?\?|!!!|\.\.\.$"),
    re.compile(_C + r"\s*(lol|wtf|omg|meh|ugh)", re.I),
)

# Structural scoring
INDENT = re.compile(r"^\s*")
ALIGNED_LINE = re.compile(r"^\s*([{}\[\](),;]|\w+:\s*)")
MESSY_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"console\.log\("),
    re.compile(r"(TODO|FIXME|HACK)"),
    re.compile(r"\S\s{3,}(?!\s*//)"),
    re.compile(r"[;}]\s*[;}]"),
)
COMMENT = re.compile(r"/\*[\s\S]*?\*/|//.*$", re.M)
ERROR_HANDLING = re.compile(r"(try|catch|throw|Error|Exception)")
VALIDATION = re.compile(r"(isNaN|\.length|args\.length|Missing.*argument)")
DEFENSIVE_PREAMBLE = re.compile(r"(args\.length|Missing.*argument|isNaN|process\.exit)")
PREAMBLE_LINES = 20

STRUCTURE_BIAS_THRESHOLD = 0.5
STRUCTURE_BIAS_BOOST = 0.1
