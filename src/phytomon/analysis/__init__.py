"""Descriptive analysis of consolidated tables."""

from .summary import (
    species_by_total_abundance,
    occurrence_frequency,
    species_richness,
    summarize_samples,
    community_matrix,
    dissimilarity_matrix,
)

__all__ = [
    'species_by_total_abundance',
    'occurrence_frequency',
    'species_richness',
    'summarize_samples',
    'community_matrix',
    'dissimilarity_matrix',
]
