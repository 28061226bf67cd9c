"""Electronic voting backend with vote-integrity enforcement and auditing."""

__version__ = "0.1.0"
