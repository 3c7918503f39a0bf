"""HTTP API for the Junto DAO governance program."""

__version__ = "0.1.0"
