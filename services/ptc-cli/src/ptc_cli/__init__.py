"""ptc-cli: Command line interface for ptc."""
