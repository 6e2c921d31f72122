# codebase_to_prompt/core/processing.py
"""
Reads a file's bytes and turns them into text lines, or reports why it
could not.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import List
import structlog

from codebase_to_prompt.config.settings import DEFAULT_MAX_FILE_SIZE
from codebase_to_prompt.exceptions import BinaryFileError, FileReadError, FileTooLargeError
from codebase_to_prompt.util import strip_utf8_bom

log = structlog.get_logger(__name__)


def split_content_lines(text: str) -> List[str]:
    # splits on "\n" only, so "\r" stays with its line and crlf content survives.
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


@dataclass(frozen=True)
class FileContent:
    # a file split into lines; missing_final_newline is set when the last line has no "\n".
    lines: List[str]
    missing_final_newline: bool = False


def load_file_content(file_path: Path, max_file_size: int = DEFAULT_MAX_FILE_SIZE) -> FileContent:
    """
    Loads a file as a list of text lines (without their "\\n").

    Raises:
        FileTooLargeError: the file is larger than `max_file_size` bytes.
        BinaryFileError: the content is not valid UTF-8.
        FileReadError: the file could not be stat'ed or read.
    """
    try:
        size = file_path.stat().st_size
    except OSError as e:
        raise FileReadError(f"cannot stat file: {e.strerror or e}", path=file_path)
    if size > max_file_size:
        log.info("skipping_file_over_size_limit", path=str(file_path), size=size, limit=max_file_size)
        raise FileTooLargeError(
            f"file too large: {size} bytes", path=file_path, size=size, limit=max_file_size
        )

    try:
        content_bytes = file_path.read_bytes()
    except OSError as e:
        log.warning("file_read_error_in_processing", path=str(file_path), error=str(e))
        raise FileReadError(f"cannot read file: {e.strerror or e}", path=file_path)
    if len(content_bytes) > max_file_size:
        # grew between stat and read.
        raise FileTooLargeError(
            f"file too large: {len(content_bytes)} bytes", path=file_path,
            size=len(content_bytes), limit=max_file_size,
        )

    try:
        text = strip_utf8_bom(content_bytes).decode("utf-8")
    except UnicodeDecodeError:
        log.info("file_not_valid_utf8_likely_binary", path=str(file_path))
        raise BinaryFileError("binary or non-utf-8 content", path=file_path)

    return FileContent(
        lines=split_content_lines(text),
        missing_final_newline=bool(text) and not text.endswith("\n"),
    )
