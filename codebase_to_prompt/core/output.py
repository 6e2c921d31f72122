import datetime
from pathlib import Path
from typing import BinaryIO, Iterable, Optional
import structlog
from codebase_to_prompt.exceptions import OutputError

log = structlog.get_logger(__name__)

DATE_SUFFIX_FORMAT = "%Y%m%d"

def decorate_output_path(
    output_path: Path,
    append_date: bool = False,
    git_hash: Optional[str] = None,
    today: Optional[datetime.date] = None,
) -> Path:
    # inserts _YYYYMMDD and/or _<hash> between the stem and the extension: out.md -> out_20240102_abc1234.md
    new_stem = output_path.stem
    if append_date:
        day = today or datetime.date.today()
        new_stem += "_" + day.strftime(DATE_SUFFIX_FORMAT)
        log.info("appending_date_to_output_filename", date=day.isoformat())
    if git_hash:
        new_stem += "_" + git_hash
        log.info("appending_git_hash_to_output_filename", git_hash=git_hash)
    return output_path.with_name(new_stem + output_path.suffix)

def open_sink(output_file_path: Path) -> BinaryIO:
    # opens (creating or truncating) the output file for binary writing.
    log.info("writing_output_to_file", path=str(output_file_path))
    try:
        return output_file_path.open("wb")
    except OSError as e:
        raise OutputError(f"failed to open output file '{output_file_path}': {e}")

def write_chunks(chunks: Iterable[bytes], stream: BinaryIO) -> int:
    # writes encoded chunks as they are produced; returns the byte count.
    written = 0
    try:
        for chunk in chunks:
            stream.write(chunk)
            written += len(chunk)
        stream.flush()
    except OSError as e:
        raise OutputError(f"failed to write output: {e}")
    return written
