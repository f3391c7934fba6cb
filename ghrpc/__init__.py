"""ghrpc - GitHub data over a long-lived local RPC service."""

__version__ = "0.2.0"
