"""
Integration Layer for latsearch

This module drives lattice processing over a list of utterances:
- Lattice list parsing
- Per-utterance decoding, scoring and statistics
- Output file generation (word sets, DOT graphs, round-tripped lattices)
- Run-level WER averaging
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Set, Tuple, Union

from tqdm import tqdm

from ..config import LatticeConfig
from ..decoder.hypothesis import Hypothesis
from ..decoder.wer import read_reference_line, word_error_rate
from ..errors import (
    DegenerateInputError,
    FileAccessError,
    MalformedInputError,
    OutputPathConflictError
)
from ..files import read_text, write_text
from ..lattice.graph import Lattice

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

class UtteranceResult(NamedTuple):
    """Container for the results of one lattice"""
    utterance_id: str
    reference: List[str]
    reference_text: str
    hypothesis: Hypothesis
    wer: float
    path_count: int
    density: float
    words_at_time: Set[str]
    hits: Dict[str, str]
    output_paths: Dict[str, Path]

class RunSummary(NamedTuple):
    """Container for the results of a whole run"""
    results: List[UtteranceResult]
    average_wer: float

class LatticePipeline:
    def __init__(
        self,
        lm_scale: float,
        output_dir: PathLike,
        config: Optional[LatticeConfig] = None
    ):
        """
        Initialize the pipeline

        Args:
            lm_scale: Language model weight shared by every lattice in the run
            output_dir: Directory receiving the per-utterance output files
            config: Reserved tokens and query settings
        """
        if lm_scale < 0:
            raise ValueError(f"lm_scale must be non-negative, got {lm_scale}")
        self.lm_scale = lm_scale
        self.output_dir = Path(output_dir)
        self.config = config or LatticeConfig()

    @staticmethod
    def read_lattice_list(path: PathLike) -> List[Tuple[Path, Path]]:
        """
        Read (lattice file, reference file) pairs

        Args:
            path: Text file with whitespace-separated pairs, one per line

        Returns:
            List of (lattice path, reference path)
        """
        tokens = read_text(path).split()
        if len(tokens) % 2 != 0:
            raise MalformedInputError(path, "expected pairs of lattice and reference files")
        return [
            (Path(tokens[i]), Path(tokens[i + 1]))
            for i in range(0, len(tokens), 2)
        ]

    def output_paths(self, utterance_id: str) -> Dict[str, Path]:
        """Output files written for an utterance"""
        return {
            'words': self.output_dir / f"{utterance_id}.wordsAtTime",
            'dot': self.output_dir / f"{utterance_id}.dot",
            'lattice': self.output_dir / f"{utterance_id}.lattice"
        }

    @staticmethod
    def _check_conflicts(outputs: Iterable[Path], inputs: Iterable[Path]) -> None:
        resolved_inputs = {Path(p).resolve(): Path(p) for p in inputs}
        for output in outputs:
            original = resolved_inputs.get(output.resolve())
            if original is not None:
                raise OutputPathConflictError(output, original)

    def _prepare_output_dir(self) -> None:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise FileAccessError(self.output_dir, mode="writing") from err

    def process(
        self,
        lattice_path: PathLike,
        reference_path: PathLike,
        other_inputs: Iterable[PathLike] = ()
    ) -> UtteranceResult:
        """
        Decode one lattice, score it and write its output files

        Args:
            lattice_path: Lattice file to process
            reference_path: Reference transcript for WER
            other_inputs: Further input files the outputs must not overwrite

        Returns:
            UtteranceResult with hypothesis, statistics and output paths
        """
        config = self.config
        lattice = Lattice.from_file(
            lattice_path,
            silence_token=config.silence_token,
            word_delimiter=config.word_delimiter
        )
        reference_text = read_reference_line(reference_path)
        reference = reference_text.split()

        outputs = self.output_paths(lattice.utterance_id)
        inputs = [Path(lattice_path), Path(reference_path)]
        inputs.extend(Path(p) for p in other_inputs)
        self._check_conflicts(outputs.values(), inputs)

        hypothesis = lattice.decode(self.lm_scale)
        wer = word_error_rate(hypothesis.words, reference)
        path_count = lattice.count_all_paths()
        density = lattice.lattice_density()
        words_at_time = lattice.unique_words_at_time(config.query_time)
        hits = {word: lattice.format_sorted_hits(word) for word in config.hit_words}

        self._prepare_output_dir()
        write_text(outputs['words'], "".join(f"{word}\n" for word in sorted(words_at_time)))
        lattice.write_as_dot(outputs['dot'])
        lattice.save_as_file(outputs['lattice'])

        logger.info(
            "Processed %s: WER %.3f, %d paths",
            lattice.utterance_id, wer, path_count
        )

        return UtteranceResult(
            utterance_id=lattice.utterance_id,
            reference=reference,
            reference_text=reference_text,
            hypothesis=hypothesis,
            wer=wer,
            path_count=path_count,
            density=density,
            words_at_time=words_at_time,
            hits=hits,
            output_paths=outputs
        )

    def iter_process(
        self,
        units: List[Tuple[Path, Path]]
    ) -> Iterator[UtteranceResult]:
        """
        Process each (lattice, reference) pair in order

        No output may overwrite any input of the run, including inputs of
        units that come later in the list.
        """
        all_inputs = [path for unit in units for path in unit]
        for lattice_path, reference_path in tqdm(
            units,
            desc="Lattices",
            unit="lattice",
            disable=not self.config.show_progress
        ):
            yield self.process(lattice_path, reference_path, other_inputs=all_inputs)

    @staticmethod
    def summarize(results: List[UtteranceResult]) -> RunSummary:
        """
        Average WER over processed utterances

        Raises:
            DegenerateInputError: If nothing was processed
        """
        if not results:
            raise DegenerateInputError("no lattices were processed; average WER is undefined")
        average = sum(result.wer for result in results) / len(results)
        return RunSummary(results=list(results), average_wer=average)

    def run(self, list_path: PathLike) -> RunSummary:
        """
        Process every pair listed in a lattice list file

        Args:
            list_path: Lattice list file

        Returns:
            RunSummary with per-utterance results and the average WER
        """
        units = self.read_lattice_list(list_path)
        logger.info("Processing %d lattices with lm_scale %s", len(units), self.lm_scale)
        return self.summarize(list(self.iter_process(units)))
