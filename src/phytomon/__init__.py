"""`phytomon` - consolidation of phytoplankton monitoring observations.

Subpackages:
- data: Observation records and file loading
- pipeline: Consolidation stages, seasonal subsetting, export
- analysis: Descriptive summaries and community matrices
- schemas: Layered pydantic configuration
- contracts: Fail-fast stage invariants
"""

__version__ = "0.1.0"
