"""Main entry point for the codebase-to-prompt CLI application."""

from codebase_to_prompt.cli.interface import main_cli


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli(prog_name="codebase-to-prompt")

if __name__ == '__main__':
    entrypoint()
