"""
Module entry point for: python -m cvscan

Allows running the scanner directly as a module:
    python -m cvscan scan <pdf_path> [options]
    python -m cvscan batch <directory> [options]
    python -m cvscan serve [options]
"""

from .cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()
