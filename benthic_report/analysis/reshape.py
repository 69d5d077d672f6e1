"""
Reshaping of classifier metrics for charting.
"""
import pandas as pd
from typing import List, Optional, Tuple

from .taxonomy import TaxonomyResolver


# Rows of a classification report that do not describe a single label
AGGREGATE_ROWS = ['accuracy', 'macro avg', 'weighted avg', 'micro avg', 'samples avg']

MORPHOLOGY_SUFFIXES = [
    'Branching',
    'Foliose',
    'Encrusting',
    'Plates or tables',
    'Massive',
    'Digitate',
]

OVERALL = 'Overall'
LABEL_GROUP = 'Label'

METRIC_COLUMNS = ['precision', 'recall', 'f1']
ID_COLUMNS = ['group', 'label_id', 'label', 'ba', 'tlc']


def drop_aggregate_rows(label_metrics: pd.DataFrame, logger=None) -> pd.DataFrame:
    """Remove 'accuracy', 'macro avg' and similar summary rows."""
    mask = label_metrics['label_id'].isin(AGGREGATE_ROWS)
    if logger and mask.any():
        logger.info(f"  Dropping {int(mask.sum())} aggregate rows: {label_metrics.loc[mask, 'label_id'].tolist()}")
    return label_metrics.loc[~mask].reset_index(drop=True)


def attach_label_names(label_metrics: pd.DataFrame, label_map: pd.DataFrame, logger=None) -> pd.DataFrame:
    """
    Left-join display names onto per-label metrics.

    Ids without a name keep a missing 'label'; row order is preserved.

    Parameters
    ----------
    label_metrics : pd.DataFrame
        Per-label metrics with a 'label_id' column
    label_map : pd.DataFrame
        Columns 'label_id' and 'label'
    logger : Optional
        Logger instance

    Returns
    -------
    named : pd.DataFrame
        label_metrics with a 'label' column
    """
    named = label_metrics.merge(label_map[['label_id', 'label']], on='label_id', how='left')

    n_unnamed = int(named['label'].isna().sum())
    if logger and n_unnamed > 0:
        logger.warning(f"  {n_unnamed} labels have no display name and stay unresolved")

    return named


def strip_morphology(label, suffixes: Optional[List[str]] = None):
    """
    Derive the benthic attribute name from a display label.

    Each suffix is removed only as the literal text " - <suffix>", case
    sensitive, so "Acropora - Branching" becomes "Acropora" and
    "Acropora" is returned unchanged. Missing labels pass through.
    """
    if pd.isna(label):
        return label

    if suffixes is None:
        suffixes = MORPHOLOGY_SUFFIXES

    for suffix in suffixes:
        label = label.replace(f" - {suffix}", "")
    return label


def annotate_categories(
    named: pd.DataFrame,
    resolver: TaxonomyResolver,
    suffixes: Optional[List[str]] = None
) -> pd.DataFrame:
    """
    Add the benthic attribute ('ba') and top-level category ('tlc') columns.

    Each distinct ba is resolved once. Rows with a missing label get a
    missing ba and tlc.
    """
    annotated = named.copy()
    annotated['ba'] = annotated['label'].map(lambda label: strip_morphology(label, suffixes))

    tlc_lookup = {ba: resolver.resolve(ba) for ba in annotated['ba'].dropna().unique()}
    annotated['tlc'] = annotated['ba'].map(tlc_lookup)
    return annotated


def order_labels_by_f1(annotated: pd.DataFrame) -> List[str]:
    """
    Labels sorted by ascending F1.

    Ties keep input order (stable sort). Missing labels are left out and
    a label repeated across ids appears once, at its first position.
    """
    ordered = annotated.sort_values('f1', kind='stable')
    return list(dict.fromkeys(ordered['label'].dropna()))


def order_categories_by_max_f1(annotated: pd.DataFrame) -> List[str]:
    """
    Top-level categories sorted by their best constituent F1, highest first.

    Ties are broken by category name, ascending. Categories whose labels
    all lack an F1 sort last.
    """
    best = annotated.dropna(subset=['tlc']).groupby('tlc')['f1'].max()
    best = best.fillna(float('-inf'))
    return [tlc for tlc, _ in sorted(best.items(), key=lambda item: (-item[1], item[0]))]


def to_long_format(overall: pd.DataFrame, annotated: pd.DataFrame) -> pd.DataFrame:
    """
    Stack the Overall row and per-label rows into one row per (label, metric).

    Parameters
    ----------
    overall : pd.DataFrame
        Single row with 'precision', 'recall' and 'f1'
    annotated : pd.DataFrame
        Per-label metrics with 'label_id', 'label', 'ba' and 'tlc'

    Returns
    -------
    metrics_long : pd.DataFrame
        Columns 'group', 'label_id', 'label', 'ba', 'tlc', 'metric',
        'value'; Overall first, then labels in input order, metrics in
        precision, recall, f1 order
    """
    overall_rows = overall[METRIC_COLUMNS].assign(
        group=OVERALL, label_id=None, label=OVERALL, ba=OVERALL, tlc=OVERALL
    )
    label_rows = annotated.assign(group=LABEL_GROUP)

    wide = pd.concat(
        [overall_rows[ID_COLUMNS + METRIC_COLUMNS], label_rows[ID_COLUMNS + METRIC_COLUMNS]],
        ignore_index=True,
    )
    wide['_row'] = range(len(wide))

    metrics_long = wide.melt(
        id_vars=ID_COLUMNS + ['_row'],
        value_vars=METRIC_COLUMNS,
        var_name='metric',
        value_name='value',
    )
    metrics_long['_metric'] = metrics_long['metric'].map({m: i for i, m in enumerate(METRIC_COLUMNS)})
    metrics_long = metrics_long.sort_values(['_row', '_metric'], kind='stable')
    return metrics_long.drop(columns=['_row', '_metric']).reset_index(drop=True)


def reshape_metrics(
    overall: pd.DataFrame,
    label_metrics: pd.DataFrame,
    label_map: pd.DataFrame,
    resolver: TaxonomyResolver,
    suffixes: Optional[List[str]] = None,
    logger=None
) -> Tuple[pd.DataFrame, List[str], List[str]]:
    """
    Join, annotate and pivot metrics for the bar charts.

    Parameters
    ----------
    overall : pd.DataFrame
        Single wide row of overall metrics
    label_metrics : pd.DataFrame
        Per-label metrics, possibly including aggregate rows
    label_map : pd.DataFrame
        Label id -> display name
    resolver : TaxonomyResolver
        Resolver over the taxonomy table
    suffixes : Optional[List[str]]
        Morphology suffixes stripped to derive the benthic attribute
    logger : Optional
        Logger instance

    Returns
    -------
    metrics_long : pd.DataFrame
        Long-format table, see to_long_format
    label_order : List[str]
        Labels by ascending F1
    category_order : List[str]
        Top-level categories by descending best F1
    """
    per_label = drop_aggregate_rows(label_metrics, logger)
    named = attach_label_names(per_label, label_map, logger)
    annotated = annotate_categories(named, resolver, suffixes)

    label_order = order_labels_by_f1(annotated)
    category_order = order_categories_by_max_f1(annotated)
    metrics_long = to_long_format(overall, annotated)

    if logger:
        logger.info(
            f"  {len(annotated)} labels across {len(category_order)} top-level categories"
        )

    return metrics_long, label_order, category_order
