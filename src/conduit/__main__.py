"""Allow ``python -m conduit``."""

from conduit.cli.app import app

app()
