"""
Input table validation utilities.
"""
import pandas as pd
from typing import Dict, List, Optional

from ..analysis.reshape import AGGREGATE_ROWS, strip_morphology


class DataValidator:
    """Validate report input tables before any processing."""

    @staticmethod
    def validate_columns(df: pd.DataFrame, required: List[str], name: str = "table") -> None:
        """
        Check that all required columns are present.

        Parameters
        ----------
        df : pd.DataFrame
            Table to validate
        required : List[str]
            Column names that must be present
        name : str
            Name for error messages
        """
        missing = [c for c in required if c not in df.columns]
        if missing:
            raise ValueError(
                f"{name} missing required columns {missing}. "
                f"Available columns: {list(df.columns)}"
            )

    @staticmethod
    def validate_not_empty(df: pd.DataFrame, name: str = "table") -> None:
        if df.empty:
            raise ValueError(f"{name} has no rows")

    @staticmethod
    def validate_overall_metrics(values: pd.Series, expected: List[str], name: str = "overall metrics") -> None:
        """
        Check that the overall metrics table names every expected metric once.

        Parameters
        ----------
        values : pd.Series
            Metric values indexed by metric name
        expected : List[str]
            Metric names that must be present
        name : str
            Name for error messages
        """
        missing = [m for m in expected if m not in values.index]
        if missing:
            raise ValueError(
                f"{name} missing metrics {missing}. Found: {list(values.index)}"
            )

        duplicated = values.index[values.index.duplicated()].unique().tolist()
        if duplicated:
            raise ValueError(f"{name} lists metrics more than once: {duplicated}")

    @staticmethod
    def validate_unique(df: pd.DataFrame, column: str, name: str = "table") -> None:
        """Check that a key column has no duplicate values."""
        duplicated = df.loc[df[column].duplicated(), column].unique().tolist()
        if duplicated:
            raise ValueError(
                f"{name} has duplicate values in '{column}': {sorted(map(str, duplicated))}"
            )

    @staticmethod
    def validate_single_parent(taxonomy: pd.DataFrame, name: str = "taxonomy") -> None:
        """
        Check that every child names at most one parent.

        Repeated identical edges are tolerated; a child listed with two
        different parents is not.

        Parameters
        ----------
        taxonomy : pd.DataFrame
            Table with 'name' and 'parent' columns
        name : str
            Name for error messages
        """
        edges = taxonomy[['name', 'parent']].drop_duplicates()
        counts = edges.groupby('name', dropna=False).size()
        conflicting = counts[counts > 1].index.tolist()
        if conflicting:
            raise ValueError(
                f"{name} lists more than one parent for: {sorted(map(str, conflicting))}"
            )

    @staticmethod
    def validate_no_missing(df: pd.DataFrame, columns: List[str], name: str = "table") -> None:
        """Check that the given columns contain no missing values."""
        for column in columns:
            n_na = int(df[column].isna().sum())
            if n_na > 0:
                raise ValueError(f"{name} has {n_na} rows with missing '{column}'")

    @staticmethod
    def validate_metric_range(df: pd.DataFrame, columns: List[str], name: str = "table") -> None:
        """
        Check that metric values are numeric and lie in [0, 1].

        Missing values are not checked here.

        Parameters
        ----------
        df : pd.DataFrame
            Table to validate
        columns : List[str]
            Metric columns
        name : str
            Name for error messages
        """
        for column in columns:
            values = pd.to_numeric(df[column], errors='coerce')
            n_bad = int((values.isna() & df[column].notna()).sum())
            if n_bad > 0:
                raise ValueError(f"{name} has {n_bad} non-numeric values in '{column}'")

            out_of_range = values[(values < 0) | (values > 1)]
            if not out_of_range.empty:
                raise ValueError(
                    f"{name} has {len(out_of_range)} values of '{column}' outside [0, 1]"
                )

    @staticmethod
    def check_data_quality(
        inputs: Dict[str, pd.DataFrame],
        logger=None,
        suffixes: Optional[List[str]] = None,
    ) -> None:
        """
        Log warnings about inputs that are valid but likely to surprise.

        Parameters
        ----------
        inputs : Dict[str, pd.DataFrame]
            Tables returned by ReportInputLoader.load_all
        logger : Optional
            Logger instance
        suffixes : List[str], optional
            Morphology suffixes stripped from display names to get the
            model's benthic attributes
        """
        if logger is None:
            return

        label_metrics = inputs['label_metrics']
        label_map = inputs['label_map']

        label_ids = set(label_metrics['label_id']) - set(AGGREGATE_ROWS)
        unnamed = label_ids - set(label_map['label_id'])
        if unnamed:
            logger.warning(
                f"{len(unnamed)} label ids in per-label metrics have no display name: "
                f"{sorted(unnamed)}"
            )

        taxonomy = inputs['taxonomy']
        n_roots = int(taxonomy['parent'].isna().sum())
        if n_roots == 0:
            logger.warning("Taxonomy has no root categories (every entry names a parent)")

        named = label_map[label_map['label_id'].isin(label_ids)]
        model_ba = {strip_morphology(label, suffixes) for label in named['label'].dropna()}
        user_ba = inputs['user_assignments']['ba_user']
        unknown = user_ba[~user_ba.isin(model_ba)]
        if not unknown.empty:
            logger.warning(
                f"{len(unknown)} assignments have a user benthic attribute the model does not "
                f"predict: {sorted(unknown.unique())}"
            )
