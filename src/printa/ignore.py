"""Ignore rule compilation and matching.

Rules are gitignore-style patterns evaluated against paths relative to the
walk root (forward slashes, directories carrying a trailing ``/``):
  - rules are evaluated in insertion order and the last matching rule wins,
    so a ``!pattern`` re-includes what an earlier rule excluded
  - ``dir/`` rules only match directories
  - patterns pathspec refuses to compile degrade to literal substring rules
  - unless hidden directories are shown, ``.*/`` is the first rule, so a user
    negation such as ``!.github/`` can bring one back
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pathspec import PathSpec

from .constants import GITIGNORE_FILE, HIDDEN_DIR_PATTERN, RuleKind, RuleSource
from .logging_utils import StructuredLogEvent, get_logger, log_event

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

logger = get_logger(__name__)

_GLOB_CHARS = frozenset("*?[")


@dataclass(frozen=True, slots=True)
class IgnoreRule:
    """One compiled ignore pattern."""

    raw: str
    kind: RuleKind
    negated: bool
    source: RuleSource
    spec: PathSpec | None = None

    @property
    def body(self) -> str:
        """Return the pattern without its negation prefix."""
        return self.raw[1:] if self.negated else self.raw

    def matches(self, rel_path: str, *, is_dir: bool) -> bool:
        """Return True if this rule applies to ``rel_path`` (negation not considered)."""
        if self.kind is RuleKind.LITERAL:
            return self.body in rel_path
        if self.kind is RuleKind.DIRECTORY and not is_dir:
            return False
        if self.spec is None:
            return False
        return self.spec.match_file(to_git_path(rel_path, is_dir=is_dir))

    def describe(self) -> str:
        return f"{self.raw!r} ({self.kind.value}, from {self.source.value})"


def to_git_path(rel_path: str, *, is_dir: bool) -> str:
    """Return ``rel_path`` with a trailing slash for directories.

    Directory-only patterns need the slash to match.
    """
    s = rel_path.strip("/")
    return s + "/" if is_dir else s


def classify_pattern(body: str) -> RuleKind:
    """Return the rule kind implied by a (non-negated) pattern body."""
    if body.endswith("/"):
        return RuleKind.DIRECTORY
    if "/" in body or any(ch in _GLOB_CHARS for ch in body):
        return RuleKind.GLOB
    return RuleKind.NAME


def compile_rule(raw: str, *, source: RuleSource) -> IgnoreRule:
    """Compile one pattern; never raises."""
    negated = raw.startswith("!") and len(raw) > 1
    body = raw[1:] if negated else raw
    try:
        spec = PathSpec.from_lines("gitwildmatch", [body])
    except ValueError:
        # GitWildMatchPatternError subclasses ValueError.
        log_event(
            logger,
            StructuredLogEvent(
                name="ignore.literal_fallback",
                message=f"treating malformed pattern {raw!r} as a literal substring",
                context={"pattern": raw, "source": source},
            ),
        )
        return IgnoreRule(raw=raw, kind=RuleKind.LITERAL, negated=False, source=source)
    return IgnoreRule(raw=raw, kind=classify_pattern(body), negated=negated, source=source, spec=spec)


def compile_rules(patterns: Iterable[str], *, source: RuleSource) -> tuple[IgnoreRule, ...]:
    """Compile ``patterns`` in order, dropping blanks and ``#`` comments."""
    rules: list[IgnoreRule] = []
    for raw in patterns:
        pat = raw.strip()
        if not pat or pat.startswith("#"):
            continue
        rules.append(compile_rule(pat, source=source))
    return tuple(rules)


@dataclass(frozen=True, slots=True)
class PatternMatcher:
    """Sequential ignore matcher; immutable once built."""

    rules: tuple[IgnoreRule, ...] = ()

    def explain(self, rel_path: str, *, is_dir: bool) -> IgnoreRule | None:
        """Return the last rule matching ``rel_path``, or None when no rule applies."""
        decisive: IgnoreRule | None = None
        for rule in self.rules:
            if rule.matches(rel_path, is_dir=is_dir):
                decisive = rule
        return decisive

    def ignores(self, rel_path: str, *, is_dir: bool) -> bool:
        """Return True if ``rel_path`` is excluded after evaluating every rule."""
        rule = self.explain(rel_path, is_dir=is_dir)
        return rule is not None and not rule.negated

    @property
    def has_negations(self) -> bool:
        return any(rule.negated for rule in self.rules)


def read_gitignore(root: Path) -> list[str] | None:
    """Return the pattern lines of ``root/.gitignore``, or None if there is none."""
    path = root / GITIGNORE_FILE
    try:
        text = path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None
    return [s for line in text.splitlines() if (s := line.strip()) and not s.startswith("#")]


@dataclass(frozen=True, slots=True)
class IgnoreSources:
    """Inputs assembled into a :class:`PatternMatcher`."""

    patterns: Sequence[str]
    use_gitignore: bool = True
    show_hidden: bool = False


def build_ignore_matcher(root: Path, sources: IgnoreSources) -> tuple[PatternMatcher, bool]:
    """Assemble the matcher for ``root``.

    Rule order: hidden-directory rule (unless shown), configured patterns,
    then ``.gitignore`` lines. Returns the matcher and whether a
    ``.gitignore`` file contributed.
    """
    rules: list[IgnoreRule] = []
    if not sources.show_hidden:
        rules.extend(compile_rules([HIDDEN_DIR_PATTERN], source=RuleSource.HIDDEN))
    rules.extend(compile_rules(sources.patterns, source=RuleSource.CONFIG))

    used_gitignore = False
    if sources.use_gitignore:
        lines = read_gitignore(root)
        if lines is not None:
            used_gitignore = True
            rules.extend(compile_rules(lines, source=RuleSource.GITIGNORE))

    matcher = PatternMatcher(rules=tuple(rules))
    log_event(
        logger,
        StructuredLogEvent(
            name="ignore.built",
            message="compiled ignore rules",
            context={
                "rule_count": len(matcher.rules),
                "gitignore": used_gitignore,
                "has_negations": matcher.has_negations,
            },
        ),
    )
    return matcher, used_gitignore
