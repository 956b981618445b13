"""Entry: dimagram CLI (server, publish, unpublish)."""
from dimagram.cli import app

if __name__ == "__main__":
    app()
