"""Entry point for `python -m apihelper` and `apihelper` CLI."""

from apihelper.cli.app import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
