# ABOUTME: Cross-cutting utilities and shared infrastructure
# ABOUTME: Supporting services: logging, retry policy and rich table rendering

from . import logging

__all__ = [
    "logging",
]
