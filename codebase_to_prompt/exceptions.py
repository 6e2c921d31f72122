from pathlib import Path
from typing import Optional


class CodebaseToPromptError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(CodebaseToPromptError):
    # invalid or conflicting configuration; fatal, raised before traversal.
    pass

class TraversalError(CodebaseToPromptError):
    # a directory or entry could not be visited. recoverable per entry.
    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path

class LoadError(CodebaseToPromptError):
    # a file's content could not be turned into text lines.
    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path

class BinaryFileError(LoadError):
    pass

class FileTooLargeError(LoadError):
    def __init__(self, message: str, path: Optional[Path] = None, size: int = 0, limit: int = 0):
        super().__init__(message, path)
        self.size = size
        self.limit = limit

class FileReadError(LoadError):
    pass

class OutputError(CodebaseToPromptError):
    # errors during output operations.
    pass

class GitError(CodebaseToPromptError):
    # errors from git commands.
    pass
