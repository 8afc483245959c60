"""Allow running the CLI as a module: python -m reportsys.cli"""

from . import app

if __name__ == "__main__":
    app()
