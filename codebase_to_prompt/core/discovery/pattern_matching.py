# codebase_to_prompt/core/discovery/pattern_matching.py
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple
import pathspec
import structlog

from codebase_to_prompt.exceptions import ConfigError

log = structlog.get_logger(__name__)

GITIGNORE_FILE_NAME = ".gitignore"

# pathspec ends its regexes with a tail matching everything below a matched
# directory ("foo" also matches "foo/bar"). A gitignore rule only applies to
# the path itself, so the tail is cut off before matching.
_DESCENDANT_TAIL = "(?:(?P<ps_d>/).*)?$"
_DIRECTORY_DESCENDANT_TAIL = "(?P<ps_d>/).*$"


def _own_path_regex(compiled: pathspec.patterns.GitWildMatchPattern) -> Tuple[Pattern[str], bool]:
    # returns the regex for the path itself and whether the rule is directory-only.
    source = compiled.regex.pattern
    if source.endswith(_DIRECTORY_DESCENDANT_TAIL):
        return re.compile(source[:-len(_DIRECTORY_DESCENDANT_TAIL)] + "/$"), True
    if source.endswith(_DESCENDANT_TAIL):
        return re.compile(source[:-len(_DESCENDANT_TAIL)] + "$"), False
    return compiled.regex, False


@dataclass(frozen=True)
class IgnoreRule:
    """One compiled gitignore line.

    ``base`` is the directory holding the defining .gitignore, relative to the
    traversal root in posix form ("" for the root itself). Paths are matched
    relative to that directory, so anchored patterns ("/build", "docs/tmp")
    are anchored there.
    """
    pattern: str
    is_negation: bool
    origin_depth: int
    base: str
    compiled: pathspec.patterns.GitWildMatchPattern
    regex: Pattern[str]
    directory_only: bool = False

    def matches(self, relative_path: str, is_directory: bool) -> bool:
        # true if the rule's glob matches; whether that means ignore depends on is_negation.
        if self.directory_only and not is_directory:
            return False
        if self.base:
            prefix = self.base + "/"
            if not relative_path.startswith(prefix):
                return False
            relative_path = relative_path[len(prefix):]
        if self.directory_only:
            relative_path += "/"
        return self.regex.match(relative_path) is not None


def parse_ignore_lines(
    lines: Iterable[str],
    base: str = "",
    origin_depth: int = 0,
    strict: bool = False,
) -> List[IgnoreRule]:
    # compiles gitignore-format lines into rules, skipping blanks and comments.
    # a malformed line is skipped with a warning, or raises ConfigError when strict.
    rules: List[IgnoreRule] = []
    for raw_line in lines:
        line = raw_line.rstrip("\r\n")
        if not line.strip() or line.startswith("#"):
            continue
        try:
            compiled = pathspec.patterns.GitWildMatchPattern(line)
        except ValueError as e:
            if strict:
                raise ConfigError(f"invalid ignore pattern {line!r}: {e}")
            log.warning("invalid_ignore_pattern_skipped", pattern=line, base=base or ".", error=str(e))
            continue
        if compiled.include is None:
            continue
        regex, directory_only = _own_path_regex(compiled)
        rules.append(IgnoreRule(
            pattern=line,
            is_negation=not compiled.include,
            origin_depth=origin_depth,
            base=base,
            compiled=compiled,
            regex=regex,
            directory_only=directory_only,
        ))
    return rules


def load_gitignore_rules(directory: Path, base: str, origin_depth: int) -> List[IgnoreRule]:
    # loads the .gitignore held directly in `directory`, if any.
    gitignore_file_path = directory / GITIGNORE_FILE_NAME
    if not gitignore_file_path.is_file():
        return []
    try:
        with gitignore_file_path.open("r", encoding="utf-8", errors="ignore") as f_obj:
            rules = parse_ignore_lines(f_obj, base=base, origin_depth=origin_depth)
    except OSError as e:
        log.warning("failed_to_read_gitignore_file", path=str(gitignore_file_path), error=str(e))
        return []
    log.debug("gitignore_rules_loaded", path=str(gitignore_file_path), count=len(rules))
    return rules


class PatternMatcher:
    """Answers "is this path ignored?" against an ordered rule set.

    The matcher holds the rule list by reference: the walker pushes a
    directory's rules onto the same list before descending and pops them on
    return, so the matcher always sees the rules active for the current
    subtree.
    """

    def __init__(self, rules: Optional[List[IgnoreRule]] = None):
        self.rules: List[IgnoreRule] = rules if rules is not None else []

    def matches(self, relative_path: str, is_directory: bool) -> bool:
        # last matching rule wins; no match means not ignored.
        rule = self.matching_rule(relative_path, is_directory)
        return rule is not None and not rule.is_negation

    def matching_rule(self, relative_path: str, is_directory: bool) -> Optional[IgnoreRule]:
        # the rule that decided the outcome, for logging and diagnostics.
        for rule in reversed(self.rules):
            if rule.matches(relative_path, is_directory):
                return rule
        return None

    def push(self, rules: Sequence[IgnoreRule]) -> int:
        # appends a directory's rules; returns how many to pop afterwards.
        self.rules.extend(rules)
        return len(rules)

    def pop(self, count: int) -> None:
        if count:
            del self.rules[-count:]
