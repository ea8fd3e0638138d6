"""LLM access — guarded plain, schema-constrained and grounded calls."""

from rightsdossier.llm._llm_call import (
    GroundedCallResult,
    LLMCallResult,
    guarded_grounded_call,
    guarded_llm_call,
)

__all__ = [
    "GroundedCallResult",
    "LLMCallResult",
    "guarded_grounded_call",
    "guarded_llm_call",
]
