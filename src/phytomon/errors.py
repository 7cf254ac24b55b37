"""Data and configuration errors raised while consolidating observations.

Two families, both fatal for a consolidation run:

- DataIntegrityError: a raw observation row cannot be given unambiguous
  keys (unparseable date, missing species, unknown abundance code,
  unmapped site). The offending row is identified by (date, site,
  species) so it can be fixed in the source table.
- ConfigurationError: the configuration lacks an entry that a specific
  input value needs (e.g. a site known to one lookup table but not the
  other), or the input file does not carry the configured columns.

Pipeline bugs are a separate concern and raise
:class:`phytomon.contracts.ContractViolation`.
"""


class DataIntegrityError(ValueError):
    """Raised when a raw observation row cannot be consolidated.

    Attributes
    ----------
    date, site_id, species : str or None
        Identify the offending raw row.
    """

    def __init__(self, message: str, date=None, site_id=None, species=None):
        self.date = date
        self.site_id = site_id
        self.species = species
        super().__init__(
            f"{message} (date={date!r}, site={site_id!r}, species={species!r})"
        )


class MalformedDateError(DataIntegrityError):
    """Sample date cannot be parsed with the configured date format."""


class UnknownAbundanceCodeError(DataIntegrityError):
    """Abundance category is neither blank nor a recognized code."""


class UnmappedSiteError(DataIntegrityError):
    """Site code is absent from both the region and water body lookups."""


class MissingSpeciesError(DataIntegrityError):
    """Species label is blank or missing."""


class ConfigurationError(ValueError):
    """Configuration is missing an entry required by the input data."""
    pass
