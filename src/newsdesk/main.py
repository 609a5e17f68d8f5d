"""Main entry point for the newsdesk CLI.

Usage:
    python -m newsdesk.main --help
    newsdesk --help  # If installed via pip/uv
"""

from newsdesk.cli import main

if __name__ == "__main__":
    main()
