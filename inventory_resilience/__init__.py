"""Resilience core of the inventory backend.

Circuit breaker + TTL cache, plus the retry/bootstrap glue що використовує
database connection startup.
"""

__version__ = "1.0.0"
