"""Allow running reportsys as a module: python -m reportsys"""

from reportsys.cli import app

if __name__ == "__main__":
    app()
