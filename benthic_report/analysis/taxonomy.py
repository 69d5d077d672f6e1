"""
Resolution of benthic attributes to their top-level category.
"""
import pandas as pd
from typing import Dict, List, Optional


class CycleError(ValueError):
    """Raised when following parent links never reaches a root."""

    def __init__(self, path: List[str]):
        self.path = path
        super().__init__(
            "Taxonomy contains a cycle: " + " -> ".join(str(p) for p in path)
        )


def build_parent_lookup(
    taxonomy: pd.DataFrame,
    name_column: str = 'name',
    parent_column: str = 'parent'
) -> Dict[str, Optional[str]]:
    """
    Build a child -> parent mapping from a taxonomy table.

    Parameters
    ----------
    taxonomy : pd.DataFrame
        One row per taxonomy entry; a missing parent marks a root
    name_column : str
        Column holding the entry name
    parent_column : str
        Column holding the parent name

    Returns
    -------
    parents : Dict[str, Optional[str]]
        Parent of every entry, None for roots
    """
    parents = {}
    for name, parent in zip(taxonomy[name_column], taxonomy[parent_column]):
        parent = None if pd.isna(parent) else parent
        if name in parents and parents[name] != parent:
            raise ValueError(
                f"Taxonomy lists more than one parent for '{name}': "
                f"'{parents[name]}' and '{parent}'"
            )
        parents[name] = parent
    return parents


def resolve_top_level(label: str, parents: Dict[str, Optional[str]]) -> str:
    """
    Follow parent links from a label up to its root category.

    A label missing from the lookup, or one without a parent, is its own
    top-level category.

    Parameters
    ----------
    label : str
        Benthic attribute name
    parents : Dict[str, Optional[str]]
        Child -> parent mapping

    Returns
    -------
    tlc : str
        Name of the root reached

    Raises
    ------
    CycleError
        If the chain of parents revisits a label
    """
    path = [label]
    seen = {label}
    current = label
    while parents.get(current) is not None:
        current = parents[current]
        path.append(current)
        if current in seen:
            raise CycleError(path)
        seen.add(current)
    return current


class TaxonomyResolver:
    """Memoising top-level category resolver over a fixed taxonomy."""

    def __init__(self, taxonomy: pd.DataFrame, logger=None):
        self.parents = build_parent_lookup(taxonomy)
        self.logger = logger
        self._cache: Dict[str, str] = {}

    def resolve(self, label: str) -> str:
        """Resolve a label, caching the result for every label on its path."""
        if label in self._cache:
            return self._cache[label]

        path = []
        seen = set()
        current = label
        while current not in self._cache and self.parents.get(current) is not None:
            if current in seen:
                raise CycleError(path + [current])
            seen.add(current)
            path.append(current)
            current = self.parents[current]

        root = self._cache.get(current, current)
        for node in path + [current]:
            self._cache[node] = root
        return root

    def validate(self) -> None:
        """
        Resolve every entry of the taxonomy once.

        Raises CycleError on the first cycle found, so a broken
        taxonomy is reported before any metrics are reshaped.
        """
        for name in self.parents:
            self.resolve(name)

        if self.logger:
            roots = sorted(set(self._cache.values()))
            self.logger.info(
                f"Taxonomy: {len(self.parents)} entries, {len(roots)} top-level categories"
            )

    def top_level_categories(self) -> List[str]:
        """Return the sorted names of all root categories."""
        return sorted({self.resolve(name) for name in self.parents})
