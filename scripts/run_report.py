#!/usr/bin/env python
"""
CLI entry point for rendering a classifier performance report.
"""
import argparse
import sys
from pathlib import Path

# Add the repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from benthic_report.pipeline import ClassifierReportPipeline


def main():
    parser = argparse.ArgumentParser(
        description="Render charts of classifier performance and user-testing results",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Render the report described by a config file
  python scripts/run_report.py --config configs/report.yaml
        """
    )

    parser.add_argument(
        '--config',
        type=str,
        required=True,
        help='Path to report configuration YAML file'
    )

    args = parser.parse_args()

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Error: Config file not found: {config_path}")
        sys.exit(1)

    print(f"Rendering report from config: {config_path}")
    pipeline = ClassifierReportPipeline(config_path)
    pipeline.run()

    print(f"\nReport complete! Charts saved to: {pipeline.save_dir}")


if __name__ == "__main__":
    main()
