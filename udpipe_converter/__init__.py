"""UDPipe Converter: tidy token tables from UDPipe CONLL-U annotation.

WHY: UDPipe annotates a batch of documents into one long CONLL-U text
blob. Sentence, paragraph and document membership only exists as
ordered comment markers in that blob, so the output is awkward to
analyse directly. This package reshapes it into one flat row per token
with its document, paragraph and sentence context attached.

HOW: Three-stage pipeline: annotate (engine adapters), reshape (core
fold over CONLL-U lines), format (pluggable table formatters). Each
stage is independently testable.

RULES:
- The engine is an external collaborator reached only through
  load_model()/annotate() or the REST service client
- The AnnotatedToken row is the stable contract between reshaping and
  formatting
- Adding a new output format = one new formatter module, no core changes
"""

__version__ = "0.1.0"
