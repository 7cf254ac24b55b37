"""Pipeline contracts: fail-fast enforcement of stage invariants.

This package enforces semantic guarantees between consolidation stages.
Contracts fail immediately and loudly when a stage doesn't produce its
promised invariants.

Key principle:
- Pydantic validates config correctness
- Errors in phytomon.errors report bad input rows
- Contracts validate pipeline correctness
"""

from phytomon.contracts.failure import ContractViolation
from phytomon.contracts.invariants import PIPELINE_INVARIANTS, STAGE_REQUIREMENTS
from phytomon.contracts.base import require
from phytomon.contracts.consolidation import assert_consolidated
from phytomon.contracts.wide import assert_wide_matrix

__all__ = [
    "ContractViolation",
    "PIPELINE_INVARIANTS",
    "STAGE_REQUIREMENTS",
    "require",
    "assert_consolidated",
    "assert_wide_matrix",
]
