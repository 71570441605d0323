# ScriptSync Ignore Rules
# Gitignore-style glob evaluation with last-match-wins semantics

import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from scriptsync.utils.paths import to_posix

IGNORE_FILE_NAME = ".claspignore"

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    "**/**",
    "!**/appsscript.json",
    "!**/*.gs",
    "!**/*.js",
    "!**/*.ts",
    "!**/*.html",
    "**/.*",
    "**/.*/**",
    ".git/**",
    "node_modules/**",
    "**/node_modules/**",
    "bower_components/**",
)

# Any single path segment, dot segments included
_ANY_SEGMENT = r"[^/]+"


def _find_class_end(segment: str, start: int) -> int:
    """Return the index of the "]" closing the class opened at start, or -1."""
    j = start + 1
    if j < len(segment) and segment[j] in "!^":
        j += 1
    if j < len(segment) and segment[j] == "]":
        j += 1
    while j < len(segment) and segment[j] != "]":
        j += 1
    return j if j < len(segment) else -1


def _translate_segment(segment: str, *, dot_aware: bool) -> str:
    """Translate one path segment of a glob into a regex fragment."""
    out: list[str] = []
    if dot_aware and not segment.startswith("."):
        out.append(r"(?!\.)")

    i, n = 0, len(segment)
    while i < n:
        c = segment[i]
        if c == "*":
            while i + 1 < n and segment[i + 1] == "*":
                i += 1
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            end = _find_class_end(segment, i)
            if end == -1:
                out.append(re.escape(c))
            else:
                body = segment[i + 1 : end].replace("\\", "\\\\")
                if body[:1] in ("!", "^"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                i = end
        elif c == "{":
            end = segment.find("}", i)
            if end == -1 or "," not in segment[i:end]:
                out.append(re.escape(c))
            else:
                options = segment[i + 1 : end].split(",")
                out.append("(?:" + "|".join(_translate_segment(o, dot_aware=False) for o in options) + ")")
                i = end
        elif c == "\\" and i + 1 < n:
            i += 1
            out.append(re.escape(segment[i]))
        else:
            out.append(re.escape(c))
        i += 1

    return "".join(out)


def compile_pattern(pattern: str, *, dot_aware: bool = True) -> re.Pattern[str]:
    """
    Compile a glob pattern into a regex matching whole relative paths.

    Supports:
    - * for any characters within a path segment
    - ** for any number of path segments
    - ? for a single character
    - [abc] / [!abc] character classes
    - {a,b} alternation

    A trailing "/" matches everything below the directory. With dot_aware,
    *, ? and [...] do not match segments starting with "." unless the
    pattern segment itself starts with a literal dot. ** always spans dot
    segments, so "**/**" matches every path.

    Args:
        pattern: Glob pattern (without a "!" prefix).
        dot_aware: Whether wildcards skip dot-segments.

    Returns:
        Compiled regex, to be used with fullmatch.
    """
    pat = to_posix(pattern.strip())
    if pattern.strip().endswith("/"):
        pat = f"{pat}/**" if pat else "**"
    segments = [s for s in pat.split("/") if s]
    if not segments:
        return re.compile(r"(?!)")

    parts: list[str] = []
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        if segment == "**":
            if index == last:
                parts.append(f"{_ANY_SEGMENT}(?:/{_ANY_SEGMENT})*")
            else:
                parts.append(f"(?:{_ANY_SEGMENT}/)*")
            continue
        parts.append(_translate_segment(segment, dot_aware=dot_aware))
        if index != last:
            parts.append("/")

    return re.compile("".join(parts))


@dataclass(frozen=True)
class IgnoreRule:
    """A single ignore rule."""

    pattern: str
    negated: bool = False
    regex: re.Pattern[str] = field(compare=False, repr=False, default=None)  # type: ignore[assignment]

    @classmethod
    def parse(cls, line: str) -> "IgnoreRule":
        """Create a rule from an ignore file line."""
        text = line.strip()
        negated = text.startswith("!")
        if negated:
            text = text[1:]
        elif text.startswith("\\!") or text.startswith("\\#"):
            text = text[1:]
        return cls(pattern=text, negated=negated, regex=compile_pattern(text))

    def matches(self, path: str) -> bool:
        """Check if rule pattern matches a normalised relative path."""
        return self.regex.fullmatch(path) is not None

    def __str__(self) -> str:
        return f"!{self.pattern}" if self.negated else self.pattern


class IgnoreRuleSet:
    """
    Ordered, immutable list of ignore rules.

    The last rule that matches a path decides: a plain rule excludes it,
    a "!" rule includes it again. Paths no rule matches are included.
    """

    def __init__(self, rules: Iterable[IgnoreRule] = (), *, source: Path | None = None):
        self._rules: tuple[IgnoreRule, ...] = tuple(rules)
        self.source = source

    @classmethod
    def from_patterns(cls, patterns: Iterable[str], *, source: Path | None = None) -> "IgnoreRuleSet":
        """Build a rule set from pattern lines."""
        return cls((IgnoreRule.parse(p) for p in patterns if p.strip()), source=source)

    @classmethod
    def default(cls) -> "IgnoreRuleSet":
        """The built-in rule set used when no ignore file exists."""
        return cls.from_patterns(DEFAULT_IGNORE_PATTERNS)

    @property
    def rules(self) -> tuple[IgnoreRule, ...]:
        return self._rules

    @property
    def patterns(self) -> list[str]:
        return [str(rule) for rule in self._rules]

    @property
    def is_default(self) -> bool:
        return self.source is None and self.patterns == list(DEFAULT_IGNORE_PATTERNS)

    def match(self, path: str) -> IgnoreRule | None:
        """Return the rule deciding a path, or None if no rule matches."""
        normalized = to_posix(path)
        for rule in reversed(self._rules):
            if rule.matches(normalized):
                return rule
        return None

    def is_ignored(self, path: str) -> bool:
        """Check if a path is excluded."""
        rule = self.match(path)
        return rule is not None and not rule.negated

    def __iter__(self) -> Iterator[IgnoreRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"IgnoreRuleSet({self.patterns!r})"


def is_ignored(path: str, rules: IgnoreRuleSet | Sequence[str]) -> bool:
    """
    Check a path against an ordered list of ignore rules.

    Args:
        path: Path relative to the content root.
        rules: Rule set, or raw pattern lines.

    Returns:
        True if the last matching rule excludes the path.
    """
    if not isinstance(rules, IgnoreRuleSet):
        rules = IgnoreRuleSet.from_patterns(rules)
    return rules.is_ignored(path)


def parse_ignore_text(text: str) -> list[str]:
    """
    Parse ignore file content into pattern lines.

    Blank lines and "#" comments are skipped, a leading BOM is dropped.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    patterns: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        patterns.append(stripped)
    return patterns


def load_ignore_file(path: Path | None) -> IgnoreRuleSet:
    """
    Load ignore rules from a file, or the defaults if it doesn't exist.

    Args:
        path: Path to the ignore file, or None.

    Returns:
        IgnoreRuleSet loaded from the file or the default rule set.
    """
    if path is None or not path.is_file():
        return IgnoreRuleSet.default()
    text = path.read_text(encoding="utf-8")
    return IgnoreRuleSet.from_patterns(parse_ignore_text(text), source=path)
