"""
Result type for AI features that degrade instead of failing.

Explanations, chat replies and quotes never raise to the caller.  They return
either ``Ok`` with the service's text or ``Degraded`` with a local fallback,
so a caller (or a test) can tell the two apart without a network.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Ok:
    """Text produced by the AI service."""

    text: str
    degraded = False


@dataclass(frozen=True)
class Degraded:
    """Fallback text used because the AI service failed."""

    text: str
    reason: str = ""
    degraded = True


AiText = Ok | Degraded
