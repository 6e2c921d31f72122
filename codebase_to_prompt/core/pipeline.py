# codebase_to_prompt/core/pipeline.py
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Set

from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.console import Console as RichConsole
import structlog
import logging as stdlib_logging

from codebase_to_prompt.config.settings import BundleConfig, OutputFormat
from codebase_to_prompt.core.discovery.pattern_matching import parse_ignore_lines
from codebase_to_prompt.core.discovery.walker import walk
from codebase_to_prompt.core.git_utils import get_short_commit_hash
from codebase_to_prompt.core.output import decorate_output_path, open_sink, write_chunks
from codebase_to_prompt.core.processing import load_file_content
from codebase_to_prompt.core.rendering import RenderedDocument, Section, render
from codebase_to_prompt.exceptions import LoadError, TraversalError

log = structlog.get_logger(__name__)


@dataclass
class BundleResult:
    # what a run produced, for the caller's summary.
    format: OutputFormat
    output_path: Optional[Path]
    files: List[str] = field(default_factory=list)
    placeholders: int = 0
    warnings: List[TraversalError] = field(default_factory=list)
    bytes_written: int = 0


class BundleGenerator:
    # orchestrates walk -> load -> render -> write for one configuration.
    def __init__(self, config: BundleConfig):
        self.config: BundleConfig = config
        self.log = structlog.get_logger(f"{__name__}.{self.__class__.__name__}")
        self.included_files: List[str] = []
        self.placeholder_count = 0
        self.warnings: List[TraversalError] = []

    def iter_sections(self, skip_paths: Optional[Set[Path]] = None) -> Iterator[Section]:
        # one section per eligible file, in traversal order; load failures become placeholders.
        entries = walk(
            self.config.directory,
            self.config.filters,
            on_error=self.warnings.append,
            skip_paths=skip_paths,
        )
        for entry in entries:
            try:
                content = load_file_content(entry.absolute_path, self.config.max_file_size)
                section = Section.from_lines(
                    entry.relative_path, content.lines,
                    extension=entry.extension, missing_final_newline=content.missing_final_newline,
                )
            except LoadError as e:
                self.log.info("file_rendered_as_placeholder", path=entry.relative_path, reason=type(e).__name__)
                self.placeholder_count += 1
                section = Section.from_error(entry.relative_path, e, extension=entry.extension)
            self.included_files.append(entry.relative_path)
            yield section

    def generate(self, stream: BinaryIO, color: bool = False, skip_paths: Optional[Set[Path]] = None) -> int:
        # streams the rendered document into `stream`; returns bytes written.
        app_log_level = stdlib_logging.getLogger("codebase_to_prompt").getEffectiveLevel()
        progress_disabled = app_log_level > stdlib_logging.INFO or not sys.stderr.isatty()
        stderr_console = RichConsole(file=sys.stderr)

        with Progress(
            SpinnerColumn(), TextColumn("[bold blue]{task.description}"),
            transient=True, disable=progress_disabled, console=stderr_console
        ) as progress:
            task = progress.add_task("bundling files...", total=None)

            def tracked_sections() -> Iterator[Section]:
                for section in self.iter_sections(skip_paths=skip_paths):
                    progress.update(task, advance=1, description=f"bundling {section.relative_path}")
                    yield section

            document = RenderedDocument(format=self.config.format, sections=tracked_sections())
            written = write_chunks(render(document, line_numbers=self.config.line_numbers, color=color), stream)

        self.log.info(
            "bundle_generated",
            files=len(self.included_files),
            placeholders=self.placeholder_count,
            warnings=len(self.warnings),
            bytes_written=written,
        )
        return written


def _is_terminal(stream: BinaryIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        return False


def resolve_output_path(config: BundleConfig) -> Optional[Path]:
    # the output file name after optional date / git hash decoration.
    if config.output is None:
        return None
    if not (config.append_date or config.append_git_hash):
        return config.output
    git_hash = get_short_commit_hash(config.directory) if config.append_git_hash else None
    return decorate_output_path(config.output, append_date=config.append_date, git_hash=git_hash)


def run(config: BundleConfig, stdout: Optional[BinaryIO] = None) -> BundleResult:
    """
    Runs one bundle: validates the configuration, then writes the document
    to the configured output file or to `stdout` (default: the process's
    binary standard output).

    Raises:
        ConfigError: before anything is written, for invalid configuration.
        OutputError: the output file cannot be created or written.
    """
    config.validate()
    # compile user patterns up front so a bad one fails before any output.
    parse_ignore_lines(config.filters.ignore_patterns, strict=True)

    output_path = resolve_output_path(config)
    generator = BundleGenerator(config)
    log.info("bundle_run_started", directory=str(config.directory), output=str(output_path or "<stdout>"))

    if output_path is None:
        stream = stdout if stdout is not None else sys.stdout.buffer
        color = config.color if config.color is not None else _is_terminal(stream)
        written = generator.generate(stream, color=color)
    else:
        with open_sink(output_path) as stream:
            written = generator.generate(stream, color=bool(config.color), skip_paths={output_path})

    return BundleResult(
        format=config.format,
        output_path=output_path,
        files=generator.included_files,
        placeholders=generator.placeholder_count,
        warnings=generator.warnings,
        bytes_written=written,
    )
