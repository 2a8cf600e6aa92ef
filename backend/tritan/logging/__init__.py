"""
Logging Module

Process-wide logging setup for the Tritan editor core.
"""
from tritan.logging.setup import configure_logging

__all__ = ['configure_logging']
