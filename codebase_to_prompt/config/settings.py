from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Tuple
import structlog

from codebase_to_prompt.exceptions import ConfigError
from codebase_to_prompt.util import normalize_extension

log = structlog.get_logger(__name__)

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024


class OutputFormat(Enum):
    # the three document renderings.
    CONSOLE = "console"
    MARKDOWN = "markdown"
    TEXT = "text"

    @classmethod
    def from_string(cls, s: str) -> "OutputFormat":
        try:
            return cls(s.strip().lower())
        except (ValueError, AttributeError):
            valid = ", ".join(f.value for f in cls)
            raise ConfigError(f"invalid output format {s!r}; expected one of: {valid}")


DEFAULT_OUTPUT_FORMAT = OutputFormat.CONSOLE


def _split_extension_values(values: Iterable[str]) -> FrozenSet[str]:
    # accepts repeated and comma-separated values: ("rs,go", "py") -> {"rs", "go", "py"}.
    extensions = set()
    for value in values:
        for part in str(value).split(","):
            ext = normalize_extension(part)
            if ext:
                extensions.add(ext)
    return frozenset(extensions)


@dataclass(frozen=True)
class FilterConfig:
    # decides which files of the tree are eligible. built once per run.
    include_extensions: FrozenSet[str] = frozenset()
    exclude_extensions: FrozenSet[str] = frozenset()
    ignore_hidden: bool = False
    respect_gitignore: bool = True
    ignore_patterns: Tuple[str, ...] = ()

    @classmethod
    def from_lists(
        cls,
        include: Iterable[str] = (),
        exclude: Iterable[str] = (),
        ignore_hidden: bool = False,
        respect_gitignore: bool = True,
        ignore_patterns: Iterable[str] = (),
    ) -> "FilterConfig":
        return cls(
            include_extensions=_split_extension_values(include),
            exclude_extensions=_split_extension_values(exclude),
            ignore_hidden=ignore_hidden,
            respect_gitignore=respect_gitignore,
            ignore_patterns=tuple(p for p in ignore_patterns if p and p.strip()),
        )


@dataclass
class BundleConfig:
    # holds all configuration parameters for a single run.
    directory: Path = field(default_factory=lambda: Path("."))
    output: Optional[Path] = None
    filters: FilterConfig = field(default_factory=FilterConfig)
    format: OutputFormat = DEFAULT_OUTPUT_FORMAT
    line_numbers: bool = False
    append_date: bool = False
    append_git_hash: bool = False
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    # None means "colour when the sink is a terminal".
    color: Optional[bool] = None

    def validate(self) -> None:
        """Raises ConfigError for anything that must stop the run before traversal."""
        if not isinstance(self.format, OutputFormat):
            self.format = OutputFormat.from_string(str(self.format))
        if not self.directory.exists():
            raise ConfigError(f"directory not found: {self.directory}")
        if not self.directory.is_dir():
            raise ConfigError(f"not a directory: {self.directory}")
        if self.max_file_size <= 0:
            raise ConfigError(f"max file size must be positive, got {self.max_file_size}")
        if (self.append_date or self.append_git_hash) and self.output is None:
            raise ConfigError("--append-date and --append-git-hash require an output file (-o/--output)")
        log.debug("bundle_config_validated", directory=str(self.directory), format=self.format.value)
