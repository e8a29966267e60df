"""
Main module for latsearch

Command line entry point: decodes every lattice named in a lattice list,
prints a per-utterance report and the average word error rate.

Usage:
    latsearch LATTICE_LIST LM_SCALE OUTPUT_DIR
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_HIT_WORDS, DEFAULT_QUERY_TIME, LatticeConfig
from .errors import LatticeError
from .integration.pipeline import LatticePipeline, UtteranceResult

logger = logging.getLogger(__name__)

def non_negative_float(value: str) -> float:
    """argparse type for the language model scale"""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {value}")
    return number

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="latsearch",
        description="Decode speech recognition lattices and report WER and lattice statistics"
    )
    parser.add_argument('lattice_list', type=Path,
                        help='File with one "<lattice file> <reference file>" pair per line')
    parser.add_argument('lm_scale', type=non_negative_float,
                        help='Weight of the language model score relative to the acoustic score')
    parser.add_argument('output_dir', type=Path,
                        help='Directory for .wordsAtTime, .dot and .lattice outputs')
    parser.add_argument('--query-time', type=float, default=DEFAULT_QUERY_TIME,
                        help='Time in seconds for the words-at-time output (default: %(default)s)')
    parser.add_argument('--hit-word', dest='hit_words', action='append', default=None,
                        help='Word whose sorted locations are reported; repeatable '
                             f'(default: {" ".join(DEFAULT_HIT_WORDS)})')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging verbosity (default: %(default)s)')
    parser.add_argument('--no-progress', action='store_true',
                        help='Disable the progress bar')
    return parser

def format_result(result: UtteranceResult) -> str:
    """Render the report block for one utterance"""
    lines = [
        "",
        f"Utterance {result.utterance_id}",
        f"Reference: {result.reference_text}",
        f"Hypothesis: {result.hypothesis.hypothesis_string()}",
        f"WER : {result.wer:.3f}",
        f"Number of unique paths: {result.path_count}",
        f"Lattice density: {result.density:.3f}",
    ]
    for word, hits in result.hits.items():
        lines.append(f"Locations of {word}: {hits}")
    return "\n".join(lines)

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s"
    )

    config = LatticeConfig(
        query_time=args.query_time,
        show_progress=not args.no_progress
    )
    if args.hit_words:
        config.hit_words = args.hit_words

    pipeline = LatticePipeline(args.lm_scale, args.output_dir, config)

    try:
        units = pipeline.read_lattice_list(args.lattice_list)
        results = []
        for result in pipeline.iter_process(units):
            print(format_result(result))
            results.append(result)
        summary = pipeline.summarize(results)
    except LatticeError as err:
        logger.debug("Run aborted", exc_info=True)
        print(f"Error: {err}", file=sys.stderr)
        return err.exit_code

    print(f"Avg WER = {summary.average_wer}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
