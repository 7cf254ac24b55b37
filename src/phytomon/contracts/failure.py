"""Failure type for contract violations.

Contracts fail fast, loud, and once. All violations raise the same
exception type, allowing caller to handle pipeline bugs uniformly.
"""


class ContractViolation(RuntimeError):
    """Raised when a pipeline contract is violated.

    This indicates a bug in pipeline logic, not bad input data. It means a
    consolidation stage did not produce the invariants it promised.

    Key distinction:
    - ValidationError: Config error (handled by Pydantic)
    - DataIntegrityError / ConfigurationError: Bad input rows or missing lookups
    - ContractViolation: Pipeline bug (programmer error)
    """
    pass
