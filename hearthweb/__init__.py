"""Parts for a small threaded HTTP server: status codes, request parsing,
routing, connection tracking, pools, configuration, logging, compression
and colour output."""

__version__ = "1.0.0"