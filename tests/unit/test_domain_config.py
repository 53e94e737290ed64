# tests/unit/test_domain_config.py
import pytest

from fshelpers.domain import (
    ConfigurationError,
    GeneratorConfig,
    Operation,
    OperationWeights,
    PipelineConfig,
    parse_duration,
)


@pytest.mark.parametrize(
    "text, seconds",
    [
        ("0", 0.0),
        ("90s", 90.0),
        ("10m", 600.0),
        ("1h30m", 5400.0),
        ("1.5m", 90.0),
        ("250ms", 0.25),
        ("2h45m30s", 9930.0),
    ],
)
def test_parse_duration_accepts_go_style_strings(text, seconds):
    assert parse_duration(text) == pytest.approx(seconds)


@pytest.mark.parametrize("text", ["", "abc", "10", "5x", "-1s", "1h 30m", "s"])
def test_parse_duration_rejects_malformed(text):
    with pytest.raises(ConfigurationError):
        parse_duration(text)


def test_weights_default_to_all_operations():
    ops, weights = OperationWeights().as_pairs()
    assert ops == list(Operation)
    assert weights == [1.0, 1.0, 1.0, 1.0]


def test_weights_only_selects_a_single_operation():
    w = OperationWeights.only(Operation.RANGE_READ)
    assert (w.verify, w.range, w.rangewrite, w.write) == (0.0, 1.0, 0.0, 0.0)


def test_weights_parse_keeps_defaults_for_omitted_names():
    w = OperationWeights.parse("verify=3, write=0")
    assert w.verify == 3.0
    assert w.write == 0.0
    assert w.range == 1.0
    assert OperationWeights.parse(None) == OperationWeights()


@pytest.mark.parametrize("text", ["bogus=1", "verify", "verify=x", "verify=0,range=0,rangewrite=0,write=0", "write=-1"])
def test_weights_parse_rejects_bad_input(text):
    with pytest.raises(ConfigurationError):
        OperationWeights.parse(text)


def test_pipeline_config_validation():
    cfg = PipelineConfig(root="/tmp", workers=3)
    assert cfg.worker_queue_capacity == 6
    with pytest.raises(ConfigurationError):
        PipelineConfig(root="/tmp", workers=0)
    with pytest.raises(ConfigurationError):
        PipelineConfig(root="/tmp", duration=-1.0)
    with pytest.raises(ConfigurationError):
        PipelineConfig(root="/tmp", admit_probability=0.0)
    with pytest.raises(ConfigurationError):
        PipelineConfig(root="/tmp", max_replicas=0)
    with pytest.raises(ConfigurationError):
        PipelineConfig(root="/tmp", range_fraction=(0.6, 0.1))


def test_generator_config_validation():
    GeneratorConfig(root="/tmp", percent=0)
    GeneratorConfig(root="/tmp", percent=100)
    with pytest.raises(ConfigurationError):
        GeneratorConfig(root="/tmp", percent=101)
    with pytest.raises(ConfigurationError):
        GeneratorConfig(root="/tmp", percent=-1)
    with pytest.raises(ConfigurationError):
        GeneratorConfig(root="/tmp", writers=0)
    with pytest.raises(ConfigurationError):
        GeneratorConfig(root="/tmp", min_size=10, max_size=5)
    with pytest.raises(ConfigurationError):
        GeneratorConfig(root="/tmp", budget=-5)
