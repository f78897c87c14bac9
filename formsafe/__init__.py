"""
formsafe - validated storage entities and a single-use CSRF token handshake.
"""

__version__ = "1.0.0"
