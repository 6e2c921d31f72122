from typing import Optional

utf8_bom = b"\xef\xbb\xbf"

# the value a user passes to mean "files without an extension".
NO_EXTENSION = "."

def strip_utf8_bom(data: bytes) -> bytes:
    # removes the utf-8 byte order mark from byte data if present.
    if data.startswith(utf8_bom):
        return data[len(utf8_bom):]
    return data

def normalize_extension(raw: str) -> str:
    # "rs", ".rs" and " .rs " all name the same extension; "." names "no extension".
    value = raw.strip()
    if value == NO_EXTENSION:
        return NO_EXTENSION
    return value.lstrip(".")

def extension_of(file_name: str) -> Optional[str]:
    # extension without the dot, or None. ".bashrc" has none, ".hidden.rs" is "rs".
    stem = file_name.lstrip(".") if file_name.startswith(".") else file_name
    if "." not in stem:
        return None
    ext = stem.rsplit(".", 1)[1]
    return ext or None

def get_language_hint(extension: Optional[str]) -> str:
    # provides a language hint for markdown code blocks based on file extension.
    if not extension:
        return ""
    ext = extension.lower().strip(".")
    ext_map = {
        "py": "python", "js": "javascript", "ts": "typescript", "java": "java",
        "c": "c", "h": "c", "cpp": "cpp", "hpp": "cpp", "cs": "csharp", "go": "go",
        "rb": "ruby", "php": "php", "swift": "swift", "kt": "kotlin", "rs": "rust",
        "scala": "scala", "sh": "bash", "md": "markdown", "json": "json",
        "yaml": "yaml", "yml": "yaml", "xml": "xml", "html": "html", "css": "css",
        "sql": "sql", "dockerfile": "dockerfile", "toml": "toml", "ini": "ini",
    }
    return ext_map.get(ext, ext)
