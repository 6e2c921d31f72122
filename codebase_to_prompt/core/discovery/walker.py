# codebase_to_prompt/core/discovery/walker.py
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Set
import structlog

from codebase_to_prompt.config.settings import FilterConfig
from codebase_to_prompt.core.discovery.pattern_matching import (
    PatternMatcher,
    load_gitignore_rules,
    parse_ignore_lines,
)
from codebase_to_prompt.exceptions import TraversalError
from codebase_to_prompt.util import NO_EXTENSION, extension_of

log = structlog.get_logger(__name__)

GIT_DIR_NAME = ".git"

ErrorHandler = Callable[[TraversalError], None]


@dataclass(frozen=True)
class FileEntry:
    # one eligible file. relative_path is posix-style and relative to the walk root.
    absolute_path: Path
    relative_path: str
    is_hidden: bool
    extension: Optional[str]


def passes_extension_filters(extension: Optional[str], config: FilterConfig) -> bool:
    # include is checked first, then exclude, so exclude wins when both list an extension.
    key = extension if extension else NO_EXTENSION
    if config.include_extensions and key not in config.include_extensions:
        return False
    if key in config.exclude_extensions:
        return False
    return True


def walk(
    root: Path,
    config: FilterConfig,
    on_error: Optional[ErrorHandler] = None,
    skip_paths: Optional[Set[Path]] = None,
) -> Iterator[FileEntry]:
    """
    Lazily yields the eligible files under `root`, depth-first, with the
    entries of every directory visited in lexicographic order of their names.

    Args:
        root: The directory to walk.
        config: Hidden-file, .gitignore and extension filtering settings.
        on_error: Called with a TraversalError for every directory or entry
            that could not be visited. The walk continues either way.
        skip_paths: Absolute paths never yielded (e.g. the output file).

    Yields:
        FileEntry objects in deterministic traversal order.
    """
    root = root.resolve()
    skipped = {p.resolve() for p in skip_paths} if skip_paths else set()
    log.info("directory_walk_started", root=str(root))

    # user-supplied patterns sit at the bottom of the rule stack, anchored at the root.
    matcher = PatternMatcher(parse_ignore_lines(config.ignore_patterns, base="", origin_depth=0))

    def report(error: TraversalError) -> None:
        log.warning("traversal_entry_skipped", path=str(error.path), error=str(error))
        if on_error is not None:
            on_error(error)

    def visit(directory: Path, rel_dir: str, depth: int) -> Iterator[FileEntry]:
        try:
            with os.scandir(directory) as it:
                entries: List[os.DirEntry] = sorted(it, key=lambda e: e.name)
        except OSError as e:
            report(TraversalError(f"cannot read directory {directory}: {e.strerror or e}", path=directory))
            return

        pushed = 0
        if config.respect_gitignore:
            pushed = matcher.push(load_gitignore_rules(directory, rel_dir, depth))
        try:
            for entry in entries:
                rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
                is_hidden = entry.name.startswith(".")

                if config.ignore_hidden and is_hidden:
                    log.debug("hidden_entry_skipped", path=rel_path)
                    continue

                try:
                    # symlinked directories are leaves: never descended into.
                    is_dir = entry.is_dir(follow_symlinks=False)
                    is_file = not is_dir and entry.is_file()
                except OSError as e:
                    report(TraversalError(f"cannot stat {entry.path}: {e.strerror or e}", path=Path(entry.path)))
                    continue

                if is_dir and config.respect_gitignore and entry.name == GIT_DIR_NAME:
                    continue
                rule = matcher.matching_rule(rel_path, is_dir)
                if rule is not None and not rule.is_negation:
                    log.debug(
                        "gitignored_entry_skipped",
                        path=rel_path, is_dir=is_dir, rule=rule.pattern, rule_base=rule.base or ".",
                    )
                    continue

                if is_dir:
                    yield from visit(Path(entry.path), rel_path, depth + 1)
                    continue
                if not is_file:
                    log.debug("non_regular_entry_skipped", path=rel_path)
                    continue

                extension = extension_of(entry.name)
                if not passes_extension_filters(extension, config):
                    continue
                absolute_path = Path(entry.path)
                if absolute_path in skipped:
                    log.debug("skip_path_not_yielded", path=rel_path)
                    continue
                yield FileEntry(
                    absolute_path=absolute_path,
                    relative_path=rel_path,
                    is_hidden=is_hidden,
                    extension=extension,
                )
        finally:
            matcher.pop(pushed)

    yield from visit(root, "", 0)
    log.info("directory_walk_finished", root=str(root))
