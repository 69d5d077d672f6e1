"""
Loading of classifier report inputs.

Every loader returns a table with canonical column names so the rest of
the package never sees the column names configured for the raw files.
"""
import pandas as pd
from pathlib import Path
from typing import Dict, Any

from .validator import DataValidator


# Raw overall metric name -> canonical column
OVERALL_METRICS = {
    'precision': 'precision',
    'recall': 'recall',
    'f1_score': 'f1',
}

METRIC_COLUMNS = ['precision', 'recall', 'f1']

ASSIGNMENT_FIELDS = ['ba_user', 'ba_classifier', 'tlc_user', 'tlc_classifier']


class ReportInputLoader:
    """Load and validate the tables a classifier report is built from."""

    def __init__(self, config: Dict[str, Any], logger=None):
        self.config = config
        self.logger = logger
        self.inputs = {key: Path(path) for key, path in config['inputs'].items()}
        self.columns = config.get('columns', {})

    def _read_csv(self, key: str, **kwargs) -> pd.DataFrame:
        path = self.inputs[key]
        if not path.exists():
            raise FileNotFoundError(f"Input file not found for '{key}': {path}")

        with open(path, 'r', encoding='utf-8') as f:
            df = pd.read_csv(f, **kwargs)

        if self.logger:
            self.logger.info(f"Loaded {key} from {path} ({len(df)} rows)")

        DataValidator.validate_not_empty(df, key)
        return df

    def load_overall_metrics(self) -> pd.DataFrame:
        """
        Load the overall metrics table and pivot it into one wide row.

        The raw table has one row per metric ('precision', 'recall',
        'f1_score') and a value column.

        Returns
        -------
        overall : pd.DataFrame
            Single row with 'precision', 'recall' and 'f1' columns
        """
        metric_col = self.columns['overall_metric']
        value_col = self.columns['overall_value']

        df = self._read_csv('overall_metrics')
        DataValidator.validate_columns(df, [metric_col, value_col], 'overall metrics')

        names = df[metric_col].astype(str).str.strip()
        values = pd.Series(df[value_col].values, index=names.values)
        DataValidator.validate_overall_metrics(values, list(OVERALL_METRICS), 'overall metrics')

        values = values[list(OVERALL_METRICS)].rename(index=OVERALL_METRICS)
        overall = values.to_frame().T.reset_index(drop=True)
        overall[METRIC_COLUMNS] = overall[METRIC_COLUMNS].apply(pd.to_numeric, errors='coerce')
        DataValidator.validate_metric_range(overall, METRIC_COLUMNS, 'overall metrics')
        return overall

    def load_label_metrics(self) -> pd.DataFrame:
        """
        Load the per-label metrics table.

        Accepts a classification report written straight from pandas,
        where the label ids sit in an unnamed first column and F1 is
        called 'f1-score'. Aggregate rows are kept; they are dropped by
        the reshaper.

        Returns
        -------
        label_metrics : pd.DataFrame
            Columns 'label_id', 'precision', 'recall', 'f1' plus any
            extra columns of the input (e.g. 'support'), in input order
        """
        id_col = self.columns['label_id']

        # Ids are opaque text; read everything as text so "007" stays "007"
        df = self._read_csv('label_metrics', dtype=str)
        if id_col not in df.columns and 'Unnamed: 0' in df.columns:
            df = df.rename(columns={'Unnamed: 0': id_col})
        df = df.rename(columns={id_col: 'label_id', 'f1-score': 'f1', 'f1_score': 'f1'})

        DataValidator.validate_columns(df, ['label_id'] + METRIC_COLUMNS, 'per-label metrics')
        DataValidator.validate_metric_range(df, METRIC_COLUMNS, 'per-label metrics')

        df['label_id'] = df['label_id'].astype(str).str.strip()
        df[METRIC_COLUMNS] = df[METRIC_COLUMNS].apply(pd.to_numeric, errors='coerce')
        if 'support' in df.columns:
            df['support'] = pd.to_numeric(df['support'], errors='coerce')
        return df.reset_index(drop=True)

    def load_label_map(self) -> pd.DataFrame:
        """Load the label id -> display name table as columns 'label_id', 'label'."""
        id_col = self.columns['label_map_id']
        name_col = self.columns['label_map_name']

        df = self._read_csv('label_map', dtype=str)
        DataValidator.validate_columns(df, [id_col, name_col], 'label map')

        df = df[[id_col, name_col]].rename(columns={id_col: 'label_id', name_col: 'label'})
        df['label_id'] = df['label_id'].str.strip()
        df['label'] = df['label'].str.strip().replace('', pd.NA)
        DataValidator.validate_no_missing(df, ['label_id'], 'label map')
        DataValidator.validate_unique(df, 'label_id', 'label map')
        return df

    def load_taxonomy(self) -> pd.DataFrame:
        """
        Load the benthic attribute taxonomy as columns 'name', 'parent'.

        A blank parent marks a top-level category. When
        ``columns.taxonomy_id`` is configured the parent column holds ids
        of other rows, which are translated to names here.

        Returns
        -------
        taxonomy : pd.DataFrame
            One row per child with its parent name (missing for roots)
        """
        name_col = self.columns['taxonomy_name']
        parent_col = self.columns['taxonomy_parent']
        id_col = self.columns.get('taxonomy_id')

        required = [name_col, parent_col] + ([id_col] if id_col else [])

        df = self._read_csv('taxonomy', dtype=str)
        DataValidator.validate_columns(df, required, 'taxonomy')

        if id_col:
            id_to_name = dict(zip(df[id_col], df[name_col]))
            unmatched = df[parent_col].notna() & ~df[parent_col].isin(list(id_to_name))
            if unmatched.any() and self.logger:
                self.logger.warning(
                    f"  {int(unmatched.sum())} taxonomy parents reference unknown ids; "
                    "they are kept as top-level categories"
                )
            df[parent_col] = df[parent_col].map(lambda p: id_to_name.get(p, p))

        taxonomy = df[[name_col, parent_col]].rename(columns={name_col: 'name', parent_col: 'parent'})
        taxonomy['name'] = taxonomy['name'].str.strip()
        taxonomy['parent'] = taxonomy['parent'].str.strip().replace('', pd.NA)

        DataValidator.validate_no_missing(taxonomy, ['name'], 'taxonomy')
        DataValidator.validate_single_parent(taxonomy, 'taxonomy')
        return taxonomy.drop_duplicates().reset_index(drop=True)

    def load_user_assignments(self) -> pd.DataFrame:
        """Load user-testing results with the four label fields."""
        raw_fields = [self.columns[field] for field in ASSIGNMENT_FIELDS]

        df = self._read_csv('user_assignments', dtype=str)
        DataValidator.validate_columns(df, raw_fields, 'user assignments')

        df = df[raw_fields].rename(columns=dict(zip(raw_fields, ASSIGNMENT_FIELDS)))
        for field in ASSIGNMENT_FIELDS:
            df[field] = df[field].str.strip().replace('', pd.NA)
        DataValidator.validate_no_missing(df, ASSIGNMENT_FIELDS, 'user assignments')
        return df

    def load_all(self) -> Dict[str, pd.DataFrame]:
        """
        Load every input table.

        Any missing or malformed file raises before anything is returned.

        Returns
        -------
        inputs : Dict[str, pd.DataFrame]
            Tables keyed by input name
        """
        inputs = {
            'overall_metrics': self.load_overall_metrics(),
            'label_metrics': self.load_label_metrics(),
            'label_map': self.load_label_map(),
            'taxonomy': self.load_taxonomy(),
            'user_assignments': self.load_user_assignments(),
        }
        DataValidator.check_data_quality(
            inputs, self.logger, suffixes=self.config.get('morphology_suffixes')
        )
        return inputs
