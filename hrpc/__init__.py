"""Request objects, options and cell-block codecs for HBase RPC calls."""

__version__ = "0.1.0"

__all__ = [
    "messages",
    "call",
    "query",
    "get",
    "scan",
    "mutate",
    "admin",
    "tables",
    "snapshot",
    "observability",
]