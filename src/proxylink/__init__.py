"""Settings reconciliation and reconnect coordination for proxylink-client."""

__version__ = "0.1.0"
