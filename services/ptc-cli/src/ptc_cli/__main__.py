"""Allow ``python -m ptc_cli``."""

from ptc_cli.main import app

app()
