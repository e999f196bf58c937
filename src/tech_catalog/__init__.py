"""Technology catalog: scored technologies and pairwise compatibility data."""

from tech_catalog.catalog import (
    DATA_VERSION,
    CatalogLoadError,
    CatalogValidator,
    TechnologyCatalog,
    data_version,
    load_catalog,
    load_matrix,
)
from tech_catalog.matrix import CompatibilityMatrix, compatibility_verdict
from tech_catalog.schema import (
    DIMENSION_LABELS,
    SCORE_DIMENSIONS,
    Category,
    Context,
    DataVersion,
    Scores,
    Technology,
)

__all__ = [
    "DATA_VERSION",
    "CatalogLoadError",
    "CatalogValidator",
    "TechnologyCatalog",
    "data_version",
    "load_catalog",
    "load_matrix",
    "CompatibilityMatrix",
    "compatibility_verdict",
    "DIMENSION_LABELS",
    "SCORE_DIMENSIONS",
    "Category",
    "Context",
    "DataVersion",
    "Scores",
    "Technology",
]
