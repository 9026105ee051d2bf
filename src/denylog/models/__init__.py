"""
Denylog Data Models

Shared dataclasses for denial reports to avoid circular dependencies.

Philosophy:
- Zero dependencies on other denylog modules
- Self-contained data definitions
- Shared types used across multiple modules
"""

from .report_models import JSONValue, Report, ToolInvocation

__all__ = ["JSONValue", "Report", "ToolInvocation"]
