"""
commission_kernel -- commission computation core.

Pure domain layer (currency conversion, weekly history, per-operation
commission rules), typed exceptions and structured logging. No file or
network I/O happens in this package.
"""

__version__ = "1.0.0"
