# codebase_to_prompt/core/rendering.py
"""
Turns a stream of per-file Sections into the final document text.

One Renderer per OutputFormat; every renderer is fed the sections in
traversal order and yields text chunks that are written out as they come.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple, Type
import click
import structlog

from codebase_to_prompt.config.settings import OutputFormat
from codebase_to_prompt.exceptions import BinaryFileError, FileTooLargeError, LoadError
from codebase_to_prompt.util import get_language_hint

log = structlog.get_logger(__name__)

BINARY_PLACEHOLDER = "<binary or unreadable file>"
LINE_NUMBER_DELIMITER = " | "
MIN_LINE_NUMBER_WIDTH = 4
CONSOLE_HEADER_WIDTH = 80
NO_FINAL_NEWLINE_MARKER = "\\ No newline at end of file"


def placeholder_for(error: LoadError) -> str:
    # the single line shown instead of content for a file that could not be loaded.
    if isinstance(error, BinaryFileError):
        return BINARY_PLACEHOLDER
    if isinstance(error, FileTooLargeError):
        return f"<file too large: {error.size} bytes>"
    return f"<unreadable file: {error}>"


@dataclass(frozen=True)
class Section:
    # one file's slice of the document: numbered content lines, or a placeholder.
    relative_path: str
    content_lines: Tuple[Tuple[int, str], ...] = ()
    placeholder: Optional[str] = None
    extension: Optional[str] = None
    missing_final_newline: bool = False

    @classmethod
    def from_lines(
        cls,
        relative_path: str,
        lines: Sequence[str],
        extension: Optional[str] = None,
        missing_final_newline: bool = False,
    ) -> "Section":
        return cls(
            relative_path=relative_path,
            content_lines=tuple((i + 1, line) for i, line in enumerate(lines)),
            extension=extension,
            missing_final_newline=missing_final_newline and bool(lines),
        )

    @classmethod
    def from_error(cls, relative_path: str, error: LoadError, extension: Optional[str] = None) -> "Section":
        return cls(relative_path=relative_path, placeholder=placeholder_for(error), extension=extension)

    @property
    def is_placeholder(self) -> bool:
        return self.placeholder is not None


@dataclass
class RenderedDocument:
    # the sections of one run plus the format they are rendered in.
    format: OutputFormat
    sections: Iterable[Section]


class Renderer:
    """Base for the format renderers.

    Subclasses implement ``render_section``; ``render_document`` joins the
    sections with ``section_separator``.
    """
    format: OutputFormat
    section_separator: str = "\n"

    def __init__(self, line_numbers: bool = False, color: bool = False):
        self.line_numbers = line_numbers
        self.color = color

    def render_section(self, section: Section) -> str:
        raise NotImplementedError

    def render_document(self, sections: Iterable[Section]) -> Iterator[str]:
        first = True
        for section in sections:
            if not first:
                yield self.section_separator
            yield self.render_section(section)
            first = False

    def _body(self, section: Section) -> str:
        # content lines (optionally numbered) or the placeholder, each ending in "\n".
        # a last line without its own "\n" is followed by the no-newline marker.
        if section.is_placeholder:
            return f"{section.placeholder}\n"
        if not section.content_lines:
            return ""
        if self.line_numbers:
            width = max(MIN_LINE_NUMBER_WIDTH, len(str(section.content_lines[-1][0])))
            lines = [f"{n:>{width}}{LINE_NUMBER_DELIMITER}{text}" for n, text in section.content_lines]
        else:
            lines = [text for _, text in section.content_lines]
        if section.missing_final_newline:
            lines.append(NO_FINAL_NEWLINE_MARKER)
        return "\n".join(lines) + "\n"


class MarkdownRenderer(Renderer):
    format = OutputFormat.MARKDOWN

    def render_section(self, section: Section) -> str:
        body = self._body(section)
        # the fence must be longer than any backtick run inside the content.
        fence = "```"
        while fence in body:
            fence += "`"
        hint = "" if section.is_placeholder else get_language_hint(section.extension)
        return f"### `{section.relative_path}`\n\n{fence}{hint}\n{body}{fence}\n"


class TextRenderer(Renderer):
    format = OutputFormat.TEXT

    def render_section(self, section: Section) -> str:
        return f"./{section.relative_path}\n---\n{self._body(section)}---\n"


class ConsoleRenderer(Renderer):
    format = OutputFormat.CONSOLE

    def _header(self, relative_path: str) -> str:
        title = f"━━━ {relative_path} "
        header = title + "━" * max(3, CONSOLE_HEADER_WIDTH - len(title))
        if self.color:
            return click.style(header, fg="cyan", bold=True)
        return header

    def render_section(self, section: Section) -> str:
        body = self._body(section)
        if self.color and section.is_placeholder:
            body = click.style(section.placeholder, fg="yellow") + "\n"
        return f"{self._header(section.relative_path)}\n{body}"


RENDERERS: Dict[OutputFormat, Type[Renderer]] = {
    OutputFormat.CONSOLE: ConsoleRenderer,
    OutputFormat.MARKDOWN: MarkdownRenderer,
    OutputFormat.TEXT: TextRenderer,
}


def get_renderer(output_format: OutputFormat, line_numbers: bool = False, color: bool = False) -> Renderer:
    renderer_cls = RENDERERS[output_format]
    log.debug("renderer_selected", format=output_format.value, line_numbers=line_numbers, color=color)
    return renderer_cls(line_numbers=line_numbers, color=color and output_format is OutputFormat.CONSOLE)


def render(document: RenderedDocument, line_numbers: bool = False, color: bool = False) -> Iterator[bytes]:
    # renders a document to utf-8 encoded chunks, in section order.
    renderer = get_renderer(document.format, line_numbers=line_numbers, color=color)
    for chunk in renderer.render_document(document.sections):
        yield chunk.encode("utf-8")

