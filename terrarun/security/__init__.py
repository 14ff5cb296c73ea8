"""
Security module for terrarun.

Validates everything that ends up on the terraform command line.
"""

from .sanitizer import InputSanitizer, SecurityError

__all__ = ["InputSanitizer", "SecurityError"]
