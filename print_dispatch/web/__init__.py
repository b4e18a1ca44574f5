"""
Web module for Print Dispatch.

Exposes blueprints for:
- Print submission: dispatch_bp
- Printer listing with reachability: printers_bp
- Health endpoint: health_bp
"""

from .dispatch import dispatch_bp
from .health import health_bp
from .printers import printers_bp

__all__ = ["dispatch_bp", "health_bp", "printers_bp"]
