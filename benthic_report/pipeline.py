"""
Main pipeline orchestration for classifier performance reports.
"""
import time
import json
from pathlib import Path
from typing import Dict, Any

from .utils import (
    load_report_config,
    setup_logger,
    get_git_commit,
    get_git_status,
    get_environment_info,
    compute_config_hash,
    save_yaml,
)
from .data import ReportInputLoader
from .analysis import (
    OVERALL,
    TaxonomyResolver,
    reshape_metrics,
    build_confusion_matrices,
    plot_metric_bars,
    plot_metric_bars_interactive,
    plot_confusion_heatmap,
    plot_confusion_heatmap_interactive,
)


CONFUSION_FIELDS = {
    'ba': ('ba_user', 'ba_classifier', "Benthic attributes"),
    'tlc': ('tlc_user', 'tlc_classifier', "Top-level categories"),
}


class ClassifierReportPipeline:
    """Load classifier results, reshape them and render the report charts."""

    def __init__(self, config_path: Path):
        """
        Initialize pipeline with report configuration.

        Parameters
        ----------
        config_path : Path
            Path to report YAML config
        """
        self.config = load_report_config(Path(config_path))
        self.report_name = self.config['name']

        # Fixed per report name so reruns overwrite the same artifacts
        output_config = self.config['output']
        self.save_dir = Path(output_config['save_dir']) / self.report_name
        self.save_dir.mkdir(parents=True, exist_ok=True)

        self.logger = setup_logger('benthic_report', self.save_dir)
        self.logger.section("Classifier Performance Report")
        self.logger.info(f"Report: {self.report_name}")
        self.logger.info(f"Output directory: {self.save_dir}")

        config_snapshot_path = self.save_dir / "config.yaml"
        save_yaml(self.config, config_snapshot_path)
        self.logger.info(f"Configuration saved to {config_snapshot_path}")

        self._log_reproducibility_info()

        self.inputs: Dict[str, Any] = {}
        self.resolver = None
        self.metrics_long = None
        self.label_order = []
        self.category_order = []
        self.confusion = {}
        self.artifacts = []

    def _log_reproducibility_info(self):
        """Log and save provenance information."""
        git_commit = get_git_commit()
        git_status = get_git_status()

        if git_commit:
            self.logger.info(f"Git commit: {git_commit}")
            if git_status == 'dirty':
                self.logger.warning("Git repository has uncommitted changes")

        env_info = get_environment_info()
        self.logger.info(f"Python version: {env_info['python_version']}")

        config_hash = compute_config_hash(self.config)
        self.logger.info(f"Config hash: {config_hash}")

        repro_info = {
            'git_commit': git_commit,
            'git_status': git_status,
            'config_hash': config_hash,
            'environment': env_info,
        }

        with open(self.save_dir / "reproducibility.json", 'w') as f:
            json.dump(repro_info, f, indent=2)

    def load_inputs(self):
        """Load and validate every input table."""
        loader = ReportInputLoader(self.config, self.logger)
        self.inputs = loader.load_all()

        self.resolver = TaxonomyResolver(self.inputs['taxonomy'], self.logger)
        self.resolver.validate()

    def reshape_metrics(self):
        """Join names and categories onto the metrics and compute orderings."""
        self.metrics_long, self.label_order, self.category_order = reshape_metrics(
            self.inputs['overall_metrics'],
            self.inputs['label_metrics'],
            self.inputs['label_map'],
            self.resolver,
            suffixes=self.config['morphology_suffixes'],
            logger=self.logger,
        )
        self.logger.info(f"Category order: {self.category_order}")

    def build_confusion_matrices(self):
        """Count user versus classifier labels at both granularities."""
        labels = self.metrics_long[self.metrics_long['group'] != OVERALL]
        known_ba = sorted(labels['ba'].dropna().unique())
        known_tlc = sorted(labels['tlc'].dropna().unique())

        self.confusion = build_confusion_matrices(
            self.inputs['user_assignments'],
            known_ba,
            known_tlc,
            marker=self.config['unknown_marker'],
            logger=self.logger,
        )

    def save_tables(self):
        """Write the reshaped tables next to the charts."""
        tables = {'metrics_long.csv': self.metrics_long}
        for level, cells in self.confusion.items():
            tables[f"confusion_{level}.csv"] = cells

        for filename, table in tables.items():
            path = self.save_dir / filename
            table.to_csv(path, index=False)
            self.artifacts.append(path)
            self.logger.info(f"Table saved to {path}")

    def render_charts(self):
        """Render static and interactive charts."""
        output_config = self.config['output']
        dpi = output_config.get('dpi', 300)
        interactive = output_config.get('interactive', True)

        bar_figsize = output_config['bar_chart'].get('figsize')
        bar_title = f"Classifier performance: {self.report_name}"

        path = self.save_dir / "metric_bars.png"
        plot_metric_bars(
            self.metrics_long,
            self.label_order,
            self.category_order,
            path,
            title=bar_title,
            figsize=tuple(bar_figsize) if bar_figsize else None,
            dpi=dpi,
        )
        self._record(path)

        if interactive:
            path = self.save_dir / "metric_bars.html"
            plot_metric_bars_interactive(
                self.metrics_long, self.label_order, self.category_order, path, title=bar_title
            )
            self._record(path)

        cm_config = output_config['confusion_matrix']
        for level, (row_field, col_field, description) in CONFUSION_FIELDS.items():
            cells = self.confusion[level]
            title = f"{description}: user vs classifier"

            path = self.save_dir / f"confusion_{level}.png"
            plot_confusion_heatmap(
                cells,
                row_field,
                col_field,
                path,
                title=title,
                figsize=tuple(cm_config['figsize']),
                colors=cm_config['colors'],
                dpi=dpi,
            )
            self._record(path)

            if interactive:
                path = self.save_dir / f"confusion_{level}.html"
                plot_confusion_heatmap_interactive(
                    cells, row_field, col_field, path, title=title, colors=cm_config['colors']
                )
                self._record(path)

    def _record(self, path: Path):
        self.artifacts.append(path)
        self.logger.info(f"Chart saved to {path}")

    def run(self):
        """Run the complete pipeline."""
        start_time = time.time()

        try:
            with self.logger.step("STEP 1: Loading Inputs"):
                self.load_inputs()
            with self.logger.step("STEP 2: Reshaping Metrics"):
                self.reshape_metrics()
            with self.logger.step("STEP 3: Building Confusion Matrices"):
                self.build_confusion_matrices()
            if self.config['output'].get('save_tables', True):
                with self.logger.step("STEP 4: Saving Tables"):
                    self.save_tables()
            with self.logger.step("STEP 5: Rendering Charts"):
                self.render_charts()

            elapsed = time.time() - start_time
            self.logger.section("REPORT COMPLETE")
            self.logger.info(f"{len(self.artifacts)} artifacts written")
            if self.logger.n_warnings:
                self.logger.info(f"{self.logger.n_warnings} warnings logged, see {self.logger.log_file}")
            self.logger.info(f"Total time: {elapsed:.2f} seconds")

            return self.artifacts

        except Exception as e:
            self.logger.error(f"Pipeline failed: {str(e)}")
            raise

        finally:
            self.logger.close()
