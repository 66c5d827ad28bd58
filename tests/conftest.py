"""Shared test fixtures for the udpipe_converter test suite.

WHY: Most test modules need the same CONLL-U sample: two documents,
several paragraphs, multiword tokens, and comment lines that must be
ignored. Centralizing it here keeps every test reading the same input.

HOW: Data lines are built from field lists joined with tabs so the
fixture text cannot be broken by editor whitespace settings.

RULES:
- SAMPLE_CONLLU has 12 data lines: d1 (2 paragraphs, 3 sentences)
  and d2 (1 paragraph, 1 sentence)
- SCENARIO_CONLLU is the minimal two-token "Hi." document
"""

from typing import List

import pytest

from udpipe_converter.core.reshaper import reshape_conllu


def row(*fields: str) -> str:
    """Join CONLL-U fields with tabs."""
    return "\t".join(fields)


SAMPLE_LINES: List[str] = [
    "# generator = UDPipe 2",
    "# newdoc id = d1",
    "# newpar",
    "# sent_id = 1",
    "# text = Hi.",
    row("1", "Hi", "hi", "INTJ", "UH", "_", "0", "root", "_", "SpaceAfter=No"),
    row("2", ".", ".", "PUNCT", ".", "_", "1", "punct", "_", "_"),
    "",
    "# newpar",
    "# sent_id = 2",
    "# text = It works.",
    "# text_en = It works.",
    row("1", "It", "it", "PRON", "PRP", "Case=Nom|Number=Sing|Person=3", "2", "nsubj", "_", "_"),
    row("2", "works", "work", "VERB", "VBZ", "Mood=Ind|Tense=Pres", "0", "root", "_", "SpaceAfter=No"),
    row("3", ".", ".", "PUNCT", ".", "_", "2", "punct", "_", "_"),
    "",
    "# sent_id = 3",
    "# text = Don't stop.",
    row("1-2", "Don't", "_", "_", "_", "_", "_", "_", "_", "_"),
    row("1", "Do", "do", "AUX", "VBP", "_", "3", "aux", "_", "_"),
    row("2", "n't", "not", "PART", "RB", "_", "3", "advmod", "_", "_"),
    row("3", "stop", "stop", "VERB", "VB", "VerbForm=Inf", "0", "root", "_", "SpaceAfter=No"),
    row("4", ".", ".", "PUNCT", ".", "_", "3", "punct", "_", "_"),
    "",
    "# newdoc id = d2",
    "# newpar",
    "# sent_id = 4",
    "# text = Bye.",
    row("1", "Bye", "bye", "INTJ", "UH", "_", "0", "root", "_", "SpaceAfter=No"),
    row("2", ".", ".", "PUNCT", ".", "_", "1", "punct", "_", "_"),
    "",
    "",
]

SAMPLE_CONLLU = "\n".join(SAMPLE_LINES)

SCENARIO_CONLLU = (
    "# newdoc id = d1\n# newpar\n# sent_id = 1\n# text = Hi.\n"
    "1\tHi\thi\tINTJ\t_\t_\t0\troot\t_\t_\n"
    "2\t.\t.\tPUNCT\t_\t_\t1\tpunct\t_\t_\n"
)


@pytest.fixture
def sample_conllu():
    """The two-document CONLL-U sample."""
    return SAMPLE_CONLLU


@pytest.fixture
def scenario_conllu():
    """The minimal single-sentence document."""
    return SCENARIO_CONLLU


@pytest.fixture
def sample_tokens():
    """SAMPLE_CONLLU reshaped into rows."""
    return reshape_conllu(SAMPLE_CONLLU)


@pytest.fixture
def sample_lines():
    """SAMPLE_CONLLU as a list of lines."""
    return list(SAMPLE_LINES)
