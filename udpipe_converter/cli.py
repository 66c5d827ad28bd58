"""Command-line interface for the UDPipe Converter.

WHY: Users need a simple way to turn text files (or existing CONLL-U
files) into tidy token tables from the terminal. The CLI wires together
the whole pipeline (input validation, UDPipe annotation, reshaping,
pluggable formatter output, and file saving) behind a single command.

HOW: Uses argparse to accept input files, the model or service
selection, output format selection, and output directory. All .txt
inputs are annotated in one batch (doc_id = file stem); .conllu inputs
are reshaped as they are. Status messages go to stderr; output files
are saved next to the first input (or to --output-dir).

RULES:
- Positional arguments: one or more .txt or .conllu files
- --model defaults to UDPIPE_MODEL_PATH; --service uses the REST service
- The model path is passed to the engine as given (after ~ expansion);
  a relative path is rejected there
- --formats: comma-separated formatter keys (default: all registered)
- --isolate-documents: a malformed line drops only its own document
- Output naming: {name}{suffix}, numeric suffix for conflicts (-tokens-2.tsv)
- Status output goes to stderr (not stdout)
- Errors print "Error: ..." and exit with status 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from udpipe_converter.config import LOG_FORMAT, UDPIPE_SERVICE_MODEL, load_model_path
from udpipe_converter.core.ir import AnnotatedToken
from udpipe_converter.core.reshaper import reshape_conllu, reshape_documents
from udpipe_converter.engine.local import annotate, load_model
from udpipe_converter.engine.models import AnnotationResult
from udpipe_converter.engine.service import UDPipeServiceClient
from udpipe_converter.formatters import FORMATTERS
from udpipe_converter.formatters.base import FormatterOutput

TEXT_SUFFIXES = frozenset({".txt"})
CONLLU_SUFFIXES = frozenset({".conllu", ".conll"})


def _status(msg: str) -> None:
    """Print a status message to stderr, flushed immediately."""
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    WHY: Users may run the converter multiple times on the same input.
    Overwriting previous output would lose work.

    RULES:
    - First attempt: {stem}{suffix} (e.g. corpus-tokens.tsv)
    - Conflict: counter inserted before the extension (corpus-tokens-2.tsv)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Write one formatter output as UTF-8 text and return its path."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _annotate_texts(
    args: argparse.Namespace,
    texts: List[str],
    doc_ids: List[str],
) -> AnnotationResult:
    """Annotate the batch with the REST service or the local model."""
    if args.service:
        _status("Annotating {} document(s) with UDPipe service model '{}'...".format(
            len(texts), args.service_model,
        ))
        with UDPipeServiceClient(model=args.service_model) as client:
            return client.annotate(texts, doc_ids)

    model_path = Path(args.model or load_model_path()).expanduser()
    _status("Loading model {}...".format(model_path))
    handle = load_model(str(model_path))
    _status("Annotating {} document(s)...".format(len(texts)))
    return annotate(handle, texts, doc_ids)


def _reshape(conllu: str, isolate_documents: bool) -> List[AnnotatedToken]:
    if not isolate_documents:
        return reshape_conllu(conllu)

    tokens: List[AnnotatedToken] = []
    for document in reshape_documents(conllu):
        if document.error is not None:
            _status("  Warning: skipped document {}: {}".format(document.doc_id, document.error))
            continue
        tokens.extend(document.rows)
    return tokens


def _run_pipeline(args: argparse.Namespace) -> None:
    """Execute the full annotate → reshape → format pipeline.

    RULES:
    - Validate all inputs, the output directory and format keys first
    - Per-document annotation errors are reported, not fatal
    - Each CONLL-U blob is reshaped separately so context never leaks
      from one input into the next
    """
    input_paths = [Path(p).resolve() for p in args.input_files]
    for path in input_paths:
        if not path.is_file():
            _fail("File not found: {}".format(path))
        if path.suffix.lower() not in TEXT_SUFFIXES | CONLLU_SUFFIXES:
            _fail("Unsupported file type '{}'. Supported: {}".format(
                path.suffix, ", ".join(sorted(TEXT_SUFFIXES | CONLLU_SUFFIXES)),
            ))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_paths[0].parent
    if not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    if args.formats:
        format_keys = [f.strip() for f in args.formats.split(",")]
        for key in format_keys:
            if key not in FORMATTERS:
                _fail("Unknown format '{}'. Available formats: {}".format(
                    key, ", ".join(sorted(FORMATTERS.keys())),
                ))
    else:
        format_keys = list(FORMATTERS.keys())

    if args.output_name:
        stem = args.output_name
    elif len(input_paths) == 1:
        stem = input_paths[0].stem
    else:
        stem = "corpus"

    text_paths = [p for p in input_paths if p.suffix.lower() in TEXT_SUFFIXES]
    conllu_paths = [p for p in input_paths if p.suffix.lower() in CONLLU_SUFFIXES]

    try:
        blobs: List[str] = []
        if text_paths:
            texts = [p.read_text(encoding="utf-8") for p in text_paths]
            doc_ids = [p.stem for p in text_paths]
            result = _annotate_texts(args, texts, doc_ids)
            for doc_id, error in zip(result.doc_ids, result.errors):
                if error is not None:
                    _status("  Warning: annotation failed for {}: {}".format(doc_id, error))
            blobs.append(result.conllu)
        for path in conllu_paths:
            _status("Reading {}...".format(path.name))
            blobs.append(path.read_text(encoding="utf-8"))

        _status("Reshaping annotation...")
        tokens: List[AnnotatedToken] = []
        for blob in blobs:
            tokens.extend(_reshape(blob, args.isolate_documents))
        doc_count = len({t.doc_id for t in tokens})
        _status("  {} token rows from {} document(s)".format(len(tokens), doc_count))

        _status("Formatting output...")
        saved_files: List[Path] = []
        for key in format_keys:
            formatter = FORMATTERS[key]()
            _status("  Running {} formatter...".format(formatter.name))
            saved_path = _save_output(formatter.format(tokens), stem, output_dir)
            saved_files.append(saved_path)
            _status("  Saved: {}".format(saved_path.name))
    except (OSError, ValueError) as e:
        # Config errors, request-shape errors, malformed CONLL-U, I/O
        _fail(str(e))

    _status("")
    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="udpipe_converter",
        description="Annotate text files with UDPipe (or read CONLL-U files) and "
                    "produce tidy token tables (TSV, CSV, JSON, sentence listing).",
    )

    parser.add_argument(
        "input_files",
        nargs="+",
        help="Text files (.txt) to annotate and/or CONLL-U files (.conllu) to reshape.",
    )

    parser.add_argument(
        "--model",
        default=None,
        help="Path to a UDPipe model file (default: UDPIPE_MODEL_PATH).",
    )

    parser.add_argument(
        "--service",
        action="store_true",
        help="Annotate with the UDPipe REST service instead of a local model.",
    )

    parser.add_argument(
        "--service-model",
        default=UDPIPE_SERVICE_MODEL,
        help="Model name for the REST service (default: %(default)s).",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as the first input file).",
    )

    parser.add_argument(
        "--output-name",
        default=None,
        help="Stem for output file names (default: input stem, or 'corpus' for several inputs).",
    )

    parser.add_argument(
        "--isolate-documents",
        action="store_true",
        help="Drop only the affected document when a CONLL-U line is malformed.",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )
    _run_pipeline(args)


if __name__ == "__main__":
    main()
