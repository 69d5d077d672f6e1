"""
Taxonomy resolution, reshaping, aggregation and visualization.
"""
from .taxonomy import (
    CycleError,
    TaxonomyResolver,
    build_parent_lookup,
    resolve_top_level,
)
from .reshape import (
    AGGREGATE_ROWS,
    MORPHOLOGY_SUFFIXES,
    OVERALL,
    drop_aggregate_rows,
    attach_label_names,
    strip_morphology,
    annotate_categories,
    order_labels_by_f1,
    order_categories_by_max_f1,
    to_long_format,
    reshape_metrics,
)
from .confusion import (
    mark_unknown_labels,
    build_confusion_matrix,
    confusion_to_matrix,
    build_confusion_matrices,
)
from .visualization import (
    plot_metric_bars,
    plot_metric_bars_interactive,
    plot_confusion_heatmap,
    plot_confusion_heatmap_interactive,
)

__all__ = [
    'CycleError',
    'TaxonomyResolver',
    'build_parent_lookup',
    'resolve_top_level',
    'AGGREGATE_ROWS',
    'MORPHOLOGY_SUFFIXES',
    'OVERALL',
    'drop_aggregate_rows',
    'attach_label_names',
    'strip_morphology',
    'annotate_categories',
    'order_labels_by_f1',
    'order_categories_by_max_f1',
    'to_long_format',
    'reshape_metrics',
    'mark_unknown_labels',
    'build_confusion_matrix',
    'confusion_to_matrix',
    'build_confusion_matrices',
    'plot_metric_bars',
    'plot_metric_bars_interactive',
    'plot_confusion_heatmap',
    'plot_confusion_heatmap_interactive',
]
