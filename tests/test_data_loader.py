"""
Tests for loading and validating report inputs.
"""
import pytest
import pandas as pd
from pathlib import Path

from benthic_report.analysis import attach_label_names
from benthic_report.data import ReportInputLoader, DataValidator


def _loader(config, paths):
    config = dict(config)
    config['inputs'] = paths
    return ReportInputLoader(config)


def test_loader_initialization(loader_config):
    loader = ReportInputLoader(loader_config)
    assert set(loader.inputs) == set(loader_config['inputs'])
    assert isinstance(loader.inputs['taxonomy'], Path)


def test_overall_metrics_pivoted_to_one_row(loader_config):
    overall = ReportInputLoader(loader_config).load_overall_metrics()

    assert len(overall) == 1
    assert list(overall.columns) == ['precision', 'recall', 'f1']
    assert overall.loc[0, 'f1'] == pytest.approx(0.77)


def test_overall_metrics_missing_metric(loader_config, write_inputs):
    paths = write_inputs(overall_metrics="metric,value\nprecision,0.8\nrecall,0.7\n")
    with pytest.raises(ValueError, match="f1_score"):
        _loader(loader_config, paths).load_overall_metrics()


def test_label_metrics_keep_aggregate_rows(loader_config):
    label_metrics = ReportInputLoader(loader_config).load_label_metrics()

    assert 'f1' in label_metrics.columns
    assert 'f1-score' not in label_metrics.columns
    assert label_metrics['label_id'].tolist()[0] == 'id-acro-br'
    assert 'macro avg' in label_metrics['label_id'].tolist()


def test_label_metrics_from_unnamed_index_column(loader_config, write_inputs):
    csv = (
        ",precision,recall,f1-score,support\n"
        "id-a,0.5,0.5,0.5,10\n"
        "accuracy,0.5,0.5,0.5,10\n"
    )
    paths = write_inputs(label_metrics=csv)
    label_metrics = _loader(loader_config, paths).load_label_metrics()
    assert label_metrics['label_id'].tolist() == ['id-a', 'accuracy']


def test_label_metrics_out_of_range(loader_config, write_inputs):
    csv = "label_id,precision,recall,f1-score\nid-a,1.5,0.5,0.5\n"
    paths = write_inputs(label_metrics=csv)
    with pytest.raises(ValueError, match="outside"):
        _loader(loader_config, paths).load_label_metrics()


def test_label_map_columns(loader_config):
    label_map = ReportInputLoader(loader_config).load_label_map()
    assert list(label_map.columns) == ['label_id', 'label']
    assert len(label_map) == 6


def test_label_map_duplicate_ids(loader_config, write_inputs):
    paths = write_inputs(label_map="id,name\nid-a,Sand\nid-a,Rubble\n")
    with pytest.raises(ValueError, match="duplicate"):
        _loader(loader_config, paths).load_label_map()


def test_taxonomy_blank_parent_is_root(loader_config):
    taxonomy = ReportInputLoader(loader_config).load_taxonomy()
    roots = taxonomy.loc[taxonomy['parent'].isna(), 'name'].tolist()
    assert sorted(roots) == ['Algae', 'Hard coral', 'Sand']


def test_taxonomy_parent_ids_translated(loader_config, write_inputs):
    csv = (
        "id,name,parent\n"
        "1,Hard coral,\n"
        "2,Acroporidae,1\n"
        "3,Acropora,2\n"
    )
    paths = write_inputs(taxonomy=csv)
    config = dict(loader_config)
    config['columns'] = dict(loader_config['columns'], taxonomy_id='id')

    taxonomy = _loader(config, paths).load_taxonomy().set_index('name')
    assert taxonomy.loc['Acropora', 'parent'] == 'Acroporidae'
    assert taxonomy.loc['Acroporidae', 'parent'] == 'Hard coral'
    assert pd.isna(taxonomy.loc['Hard coral', 'parent'])


def test_taxonomy_conflicting_parents(loader_config, write_inputs):
    paths = write_inputs(taxonomy="name,parent\nAcropora,Hard coral\nAcropora,Soft coral\n")
    with pytest.raises(ValueError, match="more than one parent"):
        _loader(loader_config, paths).load_taxonomy()


def test_user_assignments_missing_value(loader_config, write_inputs):
    csv = "ba_user,ba_classifier,tlc_user,tlc_classifier\nSand,,Sand,Sand\n"
    paths = write_inputs(user_assignments=csv)
    with pytest.raises(ValueError, match="ba_classifier"):
        _loader(loader_config, paths).load_user_assignments()


def test_missing_column(loader_config, write_inputs):
    paths = write_inputs(user_assignments="ba_user,ba_classifier\nSand,Sand\n")
    with pytest.raises(ValueError, match="missing required columns"):
        _loader(loader_config, paths).load_user_assignments()


def test_missing_file(loader_config, tmp_path):
    paths = dict(loader_config['inputs'])
    paths['label_map'] = str(tmp_path / "nope.csv")
    with pytest.raises(FileNotFoundError):
        _loader(loader_config, paths).load_all()


def test_load_all(loader_config):
    inputs = ReportInputLoader(loader_config).load_all()
    assert set(inputs) == {
        'overall_metrics', 'label_metrics', 'label_map', 'taxonomy', 'user_assignments'
    }
    assert len(inputs['user_assignments']) == 6


def test_validator_empty_table():
    with pytest.raises(ValueError):
        DataValidator.validate_not_empty(pd.DataFrame({'a': []}), "test")


def test_validator_metric_range_ignores_missing():
    df = pd.DataFrame({'f1': [0.5, None, 1.0, 0.0]})
    DataValidator.validate_metric_range(df, ['f1'], "test")


def test_validator_non_numeric_metric():
    df = pd.DataFrame({'f1': ['0.5', 'high']})
    with pytest.raises(ValueError, match="non-numeric"):
        DataValidator.validate_metric_range(df, ['f1'], "test")


class RecordingLogger:
    def __init__(self):
        self.warnings = []

    def info(self, message):
        pass

    def warning(self, message):
        self.warnings.append(message)


@pytest.mark.parametrize("header", ["label_id", ""])
def test_label_metrics_keep_zero_padded_ids(loader_config, write_inputs, header):
    paths = write_inputs(
        label_metrics=(
            f"{header},precision,recall,f1-score,support\n"
            "007,0.9,0.8,0.85,40\n"
            "012,0.95,0.95,0.95,80\n"
        ),
        label_map="id,name\n007,Acropora - Branching\n012,Sand\n",
    )
    loader = _loader(loader_config, paths)
    label_metrics = loader.load_label_metrics()

    assert label_metrics['label_id'].tolist() == ['007', '012']
    assert pd.api.types.is_numeric_dtype(label_metrics['f1'])
    assert pd.api.types.is_numeric_dtype(label_metrics['support'])

    named = attach_label_names(label_metrics, loader.load_label_map())
    assert named['label'].tolist() == ['Acropora - Branching', 'Sand']


def test_label_names_are_stripped(loader_config, write_inputs):
    paths = write_inputs(label_map="id,name\nid-a, Acropora - Branching \nid-b,  \n")
    label_map = _loader(loader_config, paths).load_label_map()

    assert label_map.loc[0, 'label'] == 'Acropora - Branching'
    assert pd.isna(label_map.loc[1, 'label'])


def test_user_assignments_are_stripped(loader_config, write_inputs):
    csv = "ba_user,ba_classifier,tlc_user,tlc_classifier\n Sand ,Sand , Sand,Sand\n"
    paths = write_inputs(user_assignments=csv)
    assignments = _loader(loader_config, paths).load_user_assignments()
    assert assignments.iloc[0].tolist() == ['Sand'] * 4


def test_user_assignments_blank_value(loader_config, write_inputs):
    csv = "ba_user,ba_classifier,tlc_user,tlc_classifier\nSand,  ,Sand,Sand\n"
    paths = write_inputs(user_assignments=csv)
    with pytest.raises(ValueError, match="ba_classifier"):
        _loader(loader_config, paths).load_user_assignments()


def test_data_quality_warns_on_unknown_user_labels(loader_config):
    logger = RecordingLogger()
    ReportInputLoader(loader_config, logger).load_all()

    unnamed = [m for m in logger.warnings if "no display name" in m]
    assert len(unnamed) == 1 and "id-missing" in unnamed[0]

    unknown = [m for m in logger.warnings if "does not predict" in m]
    assert len(unknown) == 1
    assert "['Foo']" in unknown[0]


def test_data_quality_quiet_for_known_user_labels(loader_config, write_inputs):
    csv = (
        "ba_user,ba_classifier,tlc_user,tlc_classifier\n"
        "Acropora,Porites,Hard coral,Hard coral\n"
        "Turf algae,Sand,Algae,Sand\n"
    )
    logger = RecordingLogger()
    ReportInputLoader(dict(loader_config, inputs=write_inputs(user_assignments=csv)), logger).load_all()
    assert not [m for m in logger.warnings if "does not predict" in m]
