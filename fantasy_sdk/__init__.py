"""Yahoo Fantasy Sports client SDK with a local SQL mirror and trade tooling."""

__version__ = "0.1.0"
