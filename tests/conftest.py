"""
Shared fixtures: small report inputs written to a temporary directory.
"""
import matplotlib
matplotlib.use("Agg")

import pytest
import yaml
from pathlib import Path


OVERALL_METRICS_CSV = """metric,value
precision,0.8
recall,0.75
f1_score,0.77
"""

LABEL_METRICS_CSV = """label_id,precision,recall,f1-score,support
id-acro-br,0.9,0.8,0.85,40
id-acro-tab,0.6,0.5,0.55,12
id-porites,0.7,0.9,0.79,30
id-sand,0.95,0.95,0.95,80
id-turf,0.5,0.6,0.55,25
id-cca,0.4,0.3,0.35,10
id-missing,0.2,0.2,0.2,3
accuracy,0.81,0.81,0.81,200
macro avg,0.61,0.61,0.61,200
weighted avg,0.8,0.81,0.8,200
"""

LABEL_MAP_CSV = """id,name
id-acro-br,Acropora - Branching
id-acro-tab,Acropora - Plates or tables
id-porites,Porites - Massive
id-sand,Sand
id-turf,Turf algae
id-cca,Crustose coralline algae
"""

TAXONOMY_CSV = """name,parent
Hard coral,
Acroporidae,Hard coral
Acropora,Acroporidae
Porites,Hard coral
Sand,
Algae,
Turf algae,Algae
"""

USER_ASSIGNMENTS_CSV = """ba_user,ba_classifier,tlc_user,tlc_classifier
Acropora,Acropora,Hard coral,Hard coral
Acropora,Porites,Hard coral,Hard coral
Porites,Porites,Hard coral,Hard coral
Sand,Sand,Sand,Sand
Foo,Acropora,Foo,Hard coral
Turf algae,Sand,Algae,Sand
"""

DEFAULT_FILES = {
    'overall_metrics': ('overall_metrics.csv', OVERALL_METRICS_CSV),
    'label_metrics': ('label_metrics.csv', LABEL_METRICS_CSV),
    'label_map': ('labels.csv', LABEL_MAP_CSV),
    'taxonomy': ('benthic_attributes.csv', TAXONOMY_CSV),
    'user_assignments': ('user_testing.csv', USER_ASSIGNMENTS_CSV),
}


@pytest.fixture
def write_inputs(tmp_path):
    """Return a function writing the input CSVs, with optional replacements."""
    def _write(**overrides):
        data_dir = tmp_path / "data"
        data_dir.mkdir(exist_ok=True)
        paths = {}
        for key, (filename, content) in DEFAULT_FILES.items():
            path = data_dir / filename
            path.write_text(overrides.get(key, content))
            paths[key] = str(path)
        return paths
    return _write


@pytest.fixture
def input_paths(write_inputs):
    """Paths of the default input CSVs."""
    return write_inputs()


@pytest.fixture
def report_config(tmp_path, input_paths):
    """Minimal report config dict pointing at the default inputs."""
    return {
        'name': 'test_report',
        'inputs': input_paths,
        'output': {
            'save_dir': str(tmp_path / "results"),
            'dpi': 50,
        },
    }


@pytest.fixture
def report_config_path(tmp_path, report_config):
    """Report config written to YAML."""
    config_path = tmp_path / "report.yaml"
    with open(config_path, 'w') as f:
        yaml.dump(report_config, f)
    return config_path


@pytest.fixture
def loader_config(input_paths):
    """Resolved config as the loader receives it."""
    from benthic_report.utils import DEFAULT_CONFIG
    config = dict(DEFAULT_CONFIG)
    config['inputs'] = input_paths
    return config
