"""denylog - permission denial reports for assistant runs

Philosophy:
- Ruthless simplicity
- Brick architecture (self-contained modules)
- Security by design (no credentials in logs)
- Fail fast with helpful guidance

denylog scans the transcript of an AI coding assistant run for tool calls
that were blocked by permission settings, and keeps a report of them as a
comment on the triggering issue or pull request. The comment embeds its own
history so repeated runs extend one report.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
