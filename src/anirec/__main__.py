"""Allow ``python -m anirec``."""

from anirec.cli.app import app

if __name__ == "__main__":
    app(prog_name="anirec")
