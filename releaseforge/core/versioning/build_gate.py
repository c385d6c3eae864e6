"""Token-driven build gate.

Lets a pipeline skip expensive build stages unless the commit message
asks for them. In ALL mode every required token must appear; in ANY mode
one is enough. A forced build always proceeds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from releaseforge.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class BuildGateResult:
    """Outcome of the build gate."""

    proceed: bool
    matched_tokens: List[str] = field(default_factory=list)
    reason: str = ""


def should_build(
    message: Optional[str],
    required_tokens: Sequence[str],
    any_token: bool = False,
    force: bool = False,
) -> BuildGateResult:
    """Decide whether the build should proceed.

    Args:
        message: Full commit message. None is treated as empty.
        required_tokens: Tokens to look for (case-sensitive substrings).
        any_token: Proceed when at least one token is present.
        force: Proceed regardless of the message.

    Returns:
        BuildGateResult with the matched tokens and a short reason.
    """
    text = message or ""
    tokens = [token for token in required_tokens if token]
    matched = [token for token in tokens if token in text]

    if force:
        result = BuildGateResult(True, matched, "forced")
    elif any_token:
        if matched:
            result = BuildGateResult(True, matched, "matched " + ", ".join(matched))
        else:
            result = BuildGateResult(False, matched, "none of the tokens present")
    else:
        missing = [token for token in tokens if token not in matched]
        if missing:
            result = BuildGateResult(False, matched, "missing " + ", ".join(missing))
        else:
            result = BuildGateResult(True, matched, "all tokens present")

    logger.info(
        "Build gate evaluated",
        proceed=result.proceed,
        mode="any" if any_token else "all",
        reason=result.reason,
    )
    return result
