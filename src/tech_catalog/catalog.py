"""Loading, querying and validating the technology catalog."""

import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from pydantic import ValidationError

from .matrix import CompatibilityMatrix
from .schema import (
    Category,
    CompatibilityMatrixFile,
    Context,
    DataVersion,
    Scores,
    Technology,
    TechnologyScoresFile,
)

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
SCORES_PATH = DATA_DIR / "technology_scores.json"
MATRIX_PATH = DATA_DIR / "compatibility_matrix.json"

# Version of the bundled data files
DATA_VERSION = "2025.12.30"


class CatalogLoadError(Exception):
    """Raised when a catalog or matrix file cannot be read or fails validation."""


class TechnologyCatalog:
    """Read-only collection of scored technologies.

    Iteration order is the order the technologies were supplied in (file
    order for loaded catalogs). Selection ties are broken by this order.
    """

    def __init__(
        self,
        technologies: Iterable[Technology],
        version: str = "",
        description: str = "",
    ):
        self.version = version
        self.description = description
        self.technologies: list[Technology] = list(technologies)
        self._by_id: dict[str, Technology] = {}
        for tech in self.technologies:
            # First entry wins; duplicates are reported by CatalogValidator
            self._by_id.setdefault(tech.id, tech)

    def all_ids(self) -> list[str]:
        return list(self._by_id)

    def get(self, tech_id: str) -> Optional[Technology]:
        """Look up a technology, returning None for unknown IDs."""
        return self._by_id.get(tech_id)

    def exists(self, tech_id: str) -> bool:
        return tech_id in self._by_id

    def by_category(self, category: Union[Category, str]) -> list[Technology]:
        """Technologies in a category, in catalog order."""
        category = Category(category)
        return [tech for tech in self._by_id.values() if tech.category == category]

    def grouped_by_category(self) -> dict[Category, list[Technology]]:
        """All categories in their fixed order, each with its technologies."""
        return {category: self.by_category(category) for category in Category}

    def scores_for(
        self,
        tech_id: str,
        context: Context = Context.DEFAULT,
    ) -> Optional[Scores]:
        tech = self.get(tech_id)
        if tech is None:
            return None
        return tech.scores_for(context)

    def __iter__(self) -> Iterator[Technology]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, tech_id: object) -> bool:
        return tech_id in self._by_id


def _read_json(path: Path) -> dict:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except OSError as e:
        raise CatalogLoadError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogLoadError(f"Invalid JSON in {path}: {e}") from e


def load_catalog(path: Optional[Path] = None) -> TechnologyCatalog:
    """Load and validate a technology scores file.

    Args:
        path: JSON file to load. Defaults to the bundled catalog.

    Raises:
        CatalogLoadError: If the file is unreadable or any score is invalid.
    """
    path = path or SCORES_PATH
    data = _read_json(path)

    try:
        scores_file = TechnologyScoresFile.model_validate(data)
    except ValidationError as e:
        raise CatalogLoadError(f"Invalid technology catalog {path}: {e}") from e

    catalog = TechnologyCatalog(
        scores_file.technologies.values(),
        version=scores_file.version,
        description=scores_file.description,
    )
    logger.info("Loaded %s technologies from %s (version %s)", len(catalog), path, catalog.version)
    return catalog


def load_matrix(path: Optional[Path] = None) -> CompatibilityMatrix:
    """Load and validate a compatibility matrix file.

    Args:
        path: JSON file to load. Defaults to the bundled matrix.

    Raises:
        CatalogLoadError: If the file is unreadable or any score is out of range.
    """
    path = path or MATRIX_PATH
    data = _read_json(path)

    try:
        matrix_file = CompatibilityMatrixFile.model_validate(data)
    except ValidationError as e:
        raise CatalogLoadError(f"Invalid compatibility matrix {path}: {e}") from e

    matrix = CompatibilityMatrix(matrix_file.matrix, version=matrix_file.version)
    logger.info("Loaded %s compatibility entries from %s", len(matrix), path)
    return matrix


def data_version(catalog: TechnologyCatalog, matrix: CompatibilityMatrix) -> DataVersion:
    return DataVersion(scores=catalog.version, compatibility=matrix.version)


class CatalogValidator:
    """Validates catalog entries and matrix references and reports issues."""

    def validate(
        self,
        catalog: TechnologyCatalog,
        matrix: Optional[CompatibilityMatrix] = None,
    ) -> list[str]:
        """Validate the catalog and return a list of issues."""
        issues = []

        # Check for duplicate IDs
        ids = [tech.id for tech in catalog.technologies]
        duplicates = sorted({tech_id for tech_id in ids if ids.count(tech_id) > 1})
        if duplicates:
            issues.append(f"Duplicate technology IDs: {', '.join(duplicates)}")

        for tech in catalog.technologies:
            issues.extend(self._validate_entry(tech))

        if matrix is not None:
            unknown = sorted(tech_id for tech_id in matrix.referenced_ids() if tech_id not in catalog)
            if unknown:
                issues.append(f"Compatibility matrix references unknown technologies: {', '.join(unknown)}")

            # Same-ID lookups always score 100, so a stored self-pair is never read
            for source, target, score in matrix.entries():
                if source == target:
                    issues.append(f"[{source}] Stored self-compatibility {score} is ignored")

        return issues

    def _validate_entry(self, tech: Technology) -> list[str]:
        """Validate a single entry."""
        issues = []
        prefix = f"[{tech.id}]"

        if not tech.name:
            issues.append(f"{prefix} Missing name")

        if not tech.url.startswith("https://"):
            issues.append(f"{prefix} URL is not https: {tech.url}")

        for context in Context:
            if context not in tech.scores:
                issues.append(f"{prefix} No '{context.value}' score set (falls back to default)")

        return issues
