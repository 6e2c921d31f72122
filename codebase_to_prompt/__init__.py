"""codebase-to-prompt: bundle a source tree into one document for LLM prompts."""

__version__ = "0.2.0"
