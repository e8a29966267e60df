"""Tests for the batch pipeline"""

import pytest
from latsearch.config import LatticeConfig
from latsearch.errors import (
    DegenerateInputError,
    FileAccessError,
    MalformedInputError,
    OutputPathConflictError
)
from latsearch.integration.pipeline import LatticePipeline, RunSummary, UtteranceResult
from latsearch.lattice.graph import Lattice

@pytest.fixture
def pipeline(lattice_inputs):
    """Create a LatticePipeline writing to a fresh output directory"""
    return LatticePipeline(
        lm_scale=1.0,
        output_dir=lattice_inputs['output_dir'],
        config=LatticeConfig(show_progress=False)
    )

class TestLatticeList:
    """Tests for reading lattice lists"""

    def test_pairs(self, lattice_inputs):
        units = LatticePipeline.read_lattice_list(lattice_inputs['list_path'])
        assert units == lattice_inputs['pairs']

    def test_odd_token_count(self, tmp_path):
        path = tmp_path / "bad.list"
        path.write_text("a.lattice a.ref\nb.lattice\n")
        with pytest.raises(MalformedInputError):
            LatticePipeline.read_lattice_list(path)

    def test_missing_list(self, tmp_path):
        with pytest.raises(FileAccessError):
            LatticePipeline.read_lattice_list(tmp_path / "missing.list")

class TestProcess:
    """Tests for processing single utterances"""

    def test_hello_world(self, pipeline, lattice_inputs):
        lattice_path, reference_path = lattice_inputs['pairs'][0]
        result = pipeline.process(lattice_path, reference_path)

        assert isinstance(result, UtteranceResult)
        assert result.utterance_id == "utt1"
        assert result.reference == ["hello", "world"]
        assert result.hypothesis.hypothesis_string() == "hello world "
        assert result.wer == 0.0
        assert result.path_count == 1
        assert result.density == pytest.approx(2.0)
        assert result.words_at_time == {"world"}

    def test_branching(self, pipeline, lattice_inputs):
        lattice_path, reference_path = lattice_inputs['pairs'][1]
        result = pipeline.process(lattice_path, reference_path)

        assert result.hypothesis.words == ["i", "go"]
        assert result.wer == pytest.approx(0.6)
        assert result.path_count == 6
        assert result.hits == {"-silence-": "0.25 2.25", "i": "0.50 0.75"}

    def test_output_files(self, pipeline, lattice_inputs):
        lattice_path, reference_path = lattice_inputs['pairs'][1]
        result = pipeline.process(lattice_path, reference_path)
        outputs = result.output_paths

        assert outputs['words'].read_text() == "-silence-\ngoing_to\ni\n"
        assert outputs['dot'].read_text().count("->") == 8

        restored = Lattice.from_file(outputs['lattice'])
        original = Lattice.from_file(lattice_path)
        assert restored.to_string() == original.to_string()

    def test_custom_query(self, lattice_inputs):
        pipeline = LatticePipeline(
            lm_scale=0.0,
            output_dir=lattice_inputs['output_dir'],
            config=LatticeConfig(query_time=3.0, hit_words=["store"], show_progress=False)
        )
        result = pipeline.process(*lattice_inputs['pairs'][1])

        assert result.hypothesis.words == ["i", "go", "the", "store"]
        assert result.words_at_time == {"-silence-", "store"}
        assert result.hits == {"store": "2.50"}

    def test_output_conflict(self, lattice_inputs):
        pipeline = LatticePipeline(
            lm_scale=1.0,
            output_dir=lattice_inputs['input_dir'],
            config=LatticeConfig(show_progress=False)
        )
        with pytest.raises(OutputPathConflictError) as excinfo:
            pipeline.process(*lattice_inputs['pairs'][0])

        assert excinfo.value.exit_code == 5
        assert not (lattice_inputs['input_dir'] / "utt1.dot").exists()
        assert not (lattice_inputs['input_dir'] / "utt1.wordsAtTime").exists()

    def test_empty_reference(self, pipeline, lattice_inputs):
        lattice_path, reference_path = lattice_inputs['pairs'][0]
        reference_path.write_text("\n")
        with pytest.raises(DegenerateInputError):
            pipeline.process(lattice_path, reference_path)

    def test_negative_lm_scale(self, tmp_path):
        with pytest.raises(ValueError):
            LatticePipeline(lm_scale=-1.0, output_dir=tmp_path)

class TestRun:
    """Tests for whole runs"""

    def test_run(self, pipeline, lattice_inputs):
        summary = pipeline.run(lattice_inputs['list_path'])

        assert isinstance(summary, RunSummary)
        assert [r.utterance_id for r in summary.results] == ["utt1", "utt2"]
        assert summary.average_wer == pytest.approx(0.3)
        for name in ("utt1", "utt2"):
            for suffix in (".wordsAtTime", ".dot", ".lattice"):
                assert (lattice_inputs['output_dir'] / f"{name}{suffix}").exists()

    def test_empty_list(self, pipeline, tmp_path):
        path = tmp_path / "empty.list"
        path.write_text("")
        with pytest.raises(DegenerateInputError):
            pipeline.run(path)

    def test_stops_at_first_error(self, pipeline, lattice_inputs):
        first_lattice, first_reference = lattice_inputs['pairs'][0]
        first_lattice.write_text("id broken start")
        with pytest.raises(MalformedInputError):
            pipeline.run(lattice_inputs['list_path'])
        assert not (lattice_inputs['output_dir'] / "utt2.lattice").exists()

    def test_output_overwrites_later_input(self, pipeline, lattice_inputs, branching_text):
        output_dir = lattice_inputs['output_dir']
        output_dir.mkdir()
        later_lattice = output_dir / "utt1.lattice"
        later_lattice.write_text(branching_text)

        first_lattice, first_reference = lattice_inputs['pairs'][0]
        _, second_reference = lattice_inputs['pairs'][1]
        list_path = lattice_inputs['input_dir'] / "crossed.list"
        list_path.write_text(
            f"{first_lattice} {first_reference}\n{later_lattice} {second_reference}\n"
        )

        with pytest.raises(OutputPathConflictError):
            pipeline.run(list_path)
        assert later_lattice.read_text() == branching_text
        assert not (output_dir / "utt1.dot").exists()

    def test_reference_text_is_raw(self, pipeline, lattice_inputs):
        lattice_path, reference_path = lattice_inputs['pairs'][0]
        reference_path.write_text("hello    world\n")
        result = pipeline.process(lattice_path, reference_path)
        assert result.reference_text == "hello    world"
        assert result.reference == ["hello", "world"]
