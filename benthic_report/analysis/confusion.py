"""
Confusion matrices of user-assigned versus classifier-assigned labels.
"""
import pandas as pd
from typing import Dict, Iterable, List


def mark_unknown_labels(
    assignments: pd.DataFrame,
    field: str,
    known_labels: Iterable[str],
    marker: str = "*",
    logger=None
) -> pd.DataFrame:
    """
    Append a marker to user labels the classifier was never trained on.

    Rows are kept, only their label changes.

    Parameters
    ----------
    assignments : pd.DataFrame
        User-testing results
    field : str
        Column holding the user-assigned label
    known_labels : Iterable[str]
        Labels the classifier can predict
    marker : str
        Text appended to unknown labels
    logger : Optional
        Logger instance

    Returns
    -------
    marked : pd.DataFrame
        Copy of assignments with unknown labels in `field` marked
    """
    marked = assignments.copy()
    unknown = ~marked[field].isin(list(known_labels))
    marked.loc[unknown, field] = marked.loc[unknown, field] + marker

    if logger and unknown.any():
        labels = sorted(assignments.loc[unknown, field].unique())
        logger.info(f"  {int(unknown.sum())} rows with '{field}' outside the model labels: {labels}")

    return marked


def build_confusion_matrix(assignments: pd.DataFrame, row_field: str, col_field: str) -> pd.DataFrame:
    """
    Count co-occurrences of two label fields over a dense, square label set.

    The label set is the union of both fields, sorted alphabetically, so
    labels seen on only one side still get a full row and column.
    Unobserved combinations are included with a count of zero.

    Parameters
    ----------
    assignments : pd.DataFrame
        Table holding both label fields
    row_field : str
        Field used for rows (user label)
    col_field : str
        Field used for columns (classifier label)

    Returns
    -------
    cells : pd.DataFrame
        Columns `row_field`, `col_field` and 'count', one row per label
        pair, ordered by row label then column label
    """
    labels = sorted(set(assignments[row_field]) | set(assignments[col_field]))

    counts = assignments.groupby([row_field, col_field]).size()
    full_index = pd.MultiIndex.from_product([labels, labels], names=[row_field, col_field])

    cells = counts.reindex(full_index, fill_value=0).rename('count').reset_index()
    cells['count'] = cells['count'].astype(int)
    return cells


def confusion_to_matrix(cells: pd.DataFrame, row_field: str, col_field: str) -> pd.DataFrame:
    """Pivot dense confusion cells into a square label x label frame."""
    labels = sorted(set(cells[row_field]) | set(cells[col_field]))
    matrix = cells.pivot(index=row_field, columns=col_field, values='count')
    return matrix.reindex(index=labels, columns=labels, fill_value=0).astype(int)


def build_confusion_matrices(
    assignments: pd.DataFrame,
    known_ba: List[str],
    known_tlc: List[str],
    marker: str = "*",
    logger=None
) -> Dict[str, pd.DataFrame]:
    """
    Build the fine-grained and top-level confusion matrices.

    Parameters
    ----------
    assignments : pd.DataFrame
        Columns 'ba_user', 'ba_classifier', 'tlc_user', 'tlc_classifier'
    known_ba : List[str]
        Benthic attributes the classifier predicts
    known_tlc : List[str]
        Top-level categories of those attributes
    marker : str
        Text appended to user labels outside the known sets
    logger : Optional
        Logger instance

    Returns
    -------
    matrices : Dict[str, pd.DataFrame]
        Dense confusion cells keyed by 'ba' and 'tlc'
    """
    marked = mark_unknown_labels(assignments, 'ba_user', known_ba, marker, logger)
    marked = mark_unknown_labels(marked, 'tlc_user', known_tlc, marker, logger)

    matrices = {
        'ba': build_confusion_matrix(marked, 'ba_user', 'ba_classifier'),
        'tlc': build_confusion_matrix(marked, 'tlc_user', 'tlc_classifier'),
    }

    if logger:
        for level, cells in matrices.items():
            n_labels = cells['ba_user' if level == 'ba' else 'tlc_user'].nunique()
            logger.info(f"  {level}: {n_labels} x {n_labels} matrix, {int(cells['count'].sum())} records")

    return matrices
