import pytest
from pathlib import Path
from typing import Dict, Union

from codebase_to_prompt.logging_setup import configure_logging

configure_logging("warning")


def create_project_structure(base_dir: Path, structure: Dict[str, Union[str, bytes]]) -> Path:
    """Creates files (and their parent directories) under base_dir from a {relative_path: content} dict."""
    for rel_path, content in structure.items():
        file_path = base_dir / rel_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            file_path.write_bytes(content)
        else:
            file_path.write_text(content, encoding="utf-8", newline="")
    return base_dir


@pytest.fixture
def make_tree(tmp_path: Path):
    """Returns a factory building a project tree under a fresh directory."""
    def _make(structure: Dict[str, Union[str, bytes]], name: str = "proj") -> Path:
        root = tmp_path / name
        root.mkdir(exist_ok=True)
        return create_project_structure(root, structure)
    return _make
