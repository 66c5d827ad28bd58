"""Unit tests for the CONLL-U reshaper.

WHY: The reshaper decides which document, paragraph and sentence every
token belongs to. A wrong carry-forward rule silently mislabels every
following row, so each marker rule is tested on its own and on the
shared two-document sample.

HOW: Tests cover:
  - Line classification (whole-word markers, comments, blank lines)
  - The advance()/fold_context() transition rules
  - Row count, order and context of the reshaped sample
  - Paragraph numbering per document
  - Malformed data lines and lines before the first # newdoc
  - Per-document isolation in reshape_documents()
"""

import logging

import pytest

from udpipe_converter.core.ir import COLUMNS, ParseContext
from udpipe_converter.core.reshaper import (
    LineKind,
    MalformedRowError,
    advance,
    classify_line,
    fold_context,
    iter_tokens,
    reshape_conllu,
    reshape_documents,
    split_fields,
    tokens_to_records,
)


def row(*fields):
    return "\t".join(fields)


class TestClassifyLine:
    """Each line is classified by its prefix."""

    @pytest.mark.parametrize(
        "line, kind",
        [
            ("", LineKind.BLANK),
            ("# newdoc id = d1", LineKind.NEWDOC),
            ("# newdoc", LineKind.NEWDOC),
            ("# newpar", LineKind.NEWPAR),
            ("# newpar id = p1", LineKind.NEWPAR),
            ("# sent_id = 1", LineKind.SENT_ID),
            ("# text = Hi.", LineKind.TEXT),
            ("# text=Hi.", LineKind.TEXT),
            ("# generator = UDPipe 2", LineKind.COMMENT),
            ("# text_en = Hi.", LineKind.COMMENT),
            ("# newpart", LineKind.COMMENT),
            ("# newdocument", LineKind.COMMENT),
            ("1\tHi\thi\tINTJ\t_\t_\t0\troot\t_\t_", LineKind.DATA),
        ],
    )
    def test_classification(self, line, kind):
        assert classify_line(line) is kind

    def test_whitespace_only_line_is_data(self):
        assert classify_line(" ") is LineKind.DATA


class TestAdvance:
    """advance() applies exactly one marker to the context."""

    def test_newdoc_sets_doc_id(self):
        context = advance(ParseContext(), "# newdoc id = d1")
        assert context.doc_id == "d1"
        assert context.paragraph_id == 0

    def test_bare_newdoc_sets_empty_doc_id(self):
        assert advance(ParseContext(), "# newdoc").doc_id == ""

    def test_newdoc_value_is_right_stripped(self):
        assert advance(ParseContext(), "# newdoc id = d1  ").doc_id == "d1"

    def test_newpar_increments_paragraph(self):
        context = fold_context(["# newdoc id = d1", "# newpar", "# newpar"])
        assert context.paragraph_id == 2

    def test_sent_id_and_text_values(self):
        context = fold_context(["# sent_id = s-7", "# text = Hello, world."])
        assert context.sentence_id == "s-7"
        assert context.sentence_text == "Hello, world."

    def test_text_keeps_trailing_whitespace(self):
        assert advance(ParseContext(), "# text = Hi. ").sentence_text == "Hi. "

    def test_blank_and_comment_lines_leave_context_unchanged(self):
        context = fold_context(["# newdoc id = d1", "# newpar", "# sent_id = 1"])
        assert advance(context, "") == context
        assert advance(context, "# generator = UDPipe 2") == context

    def test_data_line_opens_first_paragraph(self):
        context = advance(ParseContext(), row(*["_"] * 10))
        assert context.paragraph_id == 1

    def test_data_line_keeps_open_paragraph(self):
        context = fold_context(["# newpar", "# newpar"])
        assert advance(context, row(*["_"] * 10)).paragraph_id == 2

    def test_new_document_restarts_paragraphs(self):
        context = fold_context(
            ["# newdoc id = d1", "# newpar", "# newpar", "# newdoc id = d2"]
        )
        assert context.doc_id == "d2"
        assert context.paragraph_id == 0

    def test_repeated_doc_id_resumes_its_paragraphs(self):
        context = fold_context(
            [
                "# newdoc id = d1", "# newpar", "# newpar",
                "# newdoc id = d2", "# newpar",
                "# newdoc id = d1", "# newpar",
            ]
        )
        assert context.doc_id == "d1"
        assert context.paragraph_id == 3

    def test_fold_matches_sample_end_state(self, sample_lines):
        context = fold_context(sample_lines)
        assert context.doc_id == "d2"
        assert context.paragraph_id == 1
        assert context.sentence_id == "4"
        assert context.sentence_text == "Bye."


class TestReshapeScenario:
    """The minimal one-sentence document."""

    def test_two_rows_with_context(self, scenario_conllu):
        tokens = reshape_conllu(scenario_conllu)
        assert len(tokens) == 2
        first, second = tokens
        assert (first.doc_id, first.paragraph_id, first.sentence_id, first.sentence_text) == (
            "d1", 1, "1", "Hi.",
        )
        assert first.id == "1"
        assert first.form == "Hi"
        assert first.upostag == "INTJ"
        assert first.deprel == "root"
        assert second.form == "."
        assert second.head == "1"
        assert second.deprel == "punct"

    def test_second_newpar_opens_paragraph_two(self, scenario_conllu):
        more = (
            "\n# newpar\n# sent_id = 2\n# text = Yo.\n"
            "1\tYo\tyo\tINTJ\t_\t_\t0\troot\t_\t_\n"
        )
        tokens = reshape_conllu(scenario_conllu + more)
        assert [t.paragraph_id for t in tokens] == [1, 1, 2]
        assert tokens[-1].sentence_id == "2"
        assert tokens[-1].sentence_text == "Yo."

    def test_empty_input_gives_no_rows(self):
        assert reshape_conllu("") == []

    def test_only_comments_gives_no_rows(self):
        assert reshape_conllu("# newdoc id = d1\n# newpar\n\n") == []

    def test_non_string_input_rejected(self):
        with pytest.raises(TypeError):
            reshape_conllu(b"# newdoc id = d1\n")


class TestReshapeSample:
    """Context and ordering on the two-document sample."""

    def test_one_row_per_data_line(self, sample_conllu, sample_tokens):
        data_lines = [
            line for line in sample_conllu.split("\n")
            if line and not line.startswith("#")
        ]
        assert len(sample_tokens) == len(data_lines) == 12

    def test_rows_round_trip_to_data_lines(self, sample_conllu, sample_tokens):
        data_lines = [
            line for line in sample_conllu.split("\n")
            if line and not line.startswith("#")
        ]
        assert [t.token_line() for t in sample_tokens] == data_lines

    def test_doc_ids(self, sample_tokens):
        assert [t.doc_id for t in sample_tokens] == ["d1"] * 10 + ["d2"] * 2

    def test_paragraph_ids(self, sample_tokens):
        assert [t.paragraph_id for t in sample_tokens] == [1, 1] + [2] * 8 + [1, 1]

    def test_sentence_ids(self, sample_tokens):
        assert [t.sentence_id for t in sample_tokens] == (
            ["1"] * 2 + ["2"] * 3 + ["3"] * 5 + ["4"] * 2
        )

    def test_foreign_text_comment_does_not_replace_text(self, sample_tokens):
        assert sample_tokens[2].sentence_text == "It works."

    def test_multiword_range_kept_as_row(self, sample_tokens):
        mwt = sample_tokens[5]
        assert mwt.id == "1-2"
        assert mwt.form == "Don't"
        assert mwt.lemma == "_"
        assert mwt.sentence_text == "Don't stop."

    def test_paragraph_ids_are_contiguous_within_document(self, sample_tokens):
        by_doc = {}
        for token in sample_tokens:
            by_doc.setdefault(token.doc_id, []).append(token.paragraph_id)
        for paragraphs in by_doc.values():
            assert paragraphs == sorted(paragraphs)
            assert paragraphs[0] == 1
            for previous, current in zip(paragraphs, paragraphs[1:]):
                assert current - previous in (0, 1)

    def test_rows_match_context_at_their_line(self, sample_lines, sample_tokens):
        data_indexes = [
            i for i, line in enumerate(sample_lines)
            if line and not line.startswith("#")
        ]
        for token, index in zip(sample_tokens, data_indexes):
            context = fold_context(sample_lines[: index + 1])
            assert token.doc_id == context.doc_id
            assert token.paragraph_id == context.paragraph_id
            assert token.sentence_id == context.sentence_id
            assert token.sentence_text == context.sentence_text

    def test_reshaping_is_deterministic(self, sample_conllu, sample_tokens):
        assert reshape_conllu(sample_conllu) == sample_tokens

    def test_iter_tokens_is_lazy(self, sample_conllu):
        tokens = iter_tokens(sample_conllu + "\n1\tbad")
        assert next(tokens).form == "Hi"

    def test_records_follow_column_order(self, sample_tokens):
        records = tokens_to_records(sample_tokens)
        assert len(records) == 12
        assert tuple(records[0].keys()) == COLUMNS
        assert records[0]["doc_id"] == "d1"
        assert records[0]["paragraph_id"] == 1

    def test_crlf_lines_keep_carriage_return(self):
        tokens = reshape_conllu(
            "# newdoc id = d1\r\n1\tHi\thi\tINTJ\t_\t_\t0\troot\t_\t_\r\n"
        )
        assert tokens[0].doc_id == "d1"
        assert tokens[0].misc == "_\r"


class TestMalformedRows:
    """Data lines must have exactly 10 tab-separated fields."""

    def test_nine_fields_raises(self):
        conllu = "# newdoc id = d1\n# newpar\n1\tHi\thi\tINTJ\t_\t_\t0\troot\t_\n"
        with pytest.raises(MalformedRowError) as info:
            reshape_conllu(conllu)
        assert info.value.line_index == 2
        assert info.value.doc_id == "d1"
        assert info.value.field_count == 9
        assert info.value.line == "1\tHi\thi\tINTJ\t_\t_\t0\troot\t_"
        assert "index 2" in str(info.value)

    def test_eleven_fields_raises(self):
        with pytest.raises(MalformedRowError) as info:
            reshape_conllu(row(*["_"] * 11))
        assert info.value.field_count == 11
        assert info.value.doc_id is None

    def test_malformed_error_is_value_error(self):
        with pytest.raises(ValueError):
            split_fields("1\tHi")

    def test_split_fields_keeps_empty_columns(self):
        fields = split_fields(row("1", "", "", "X", "_", "_", "0", "root", "_", ""))
        assert len(fields) == 10
        assert fields[1] == ""
        assert fields[9] == ""


class TestRowsBeforeFirstNewdoc:
    """Token lines before any # newdoc are kept with doc_id None."""

    def test_orphan_rows_have_no_doc_id(self, scenario_conllu):
        orphan = "1\tHey\they\tINTJ\t_\t_\t0\troot\t_\t_\n\n"
        tokens = reshape_conllu(orphan + scenario_conllu)
        assert tokens[0].doc_id is None
        assert tokens[0].paragraph_id == 1
        assert tokens[0].sentence_id is None
        assert [t.doc_id for t in tokens[1:]] == ["d1", "d1"]
        assert tokens[1].paragraph_id == 1

    def test_orphan_rows_warn_once(self, caplog):
        conllu = row(*["_"] * 10) + "\n" + row(*["_"] * 10) + "\n"
        with caplog.at_level(logging.WARNING, logger="udpipe_converter.core.reshaper"):
            tokens = reshape_conllu(conllu)
        assert len(tokens) == 2
        warnings = [r for r in caplog.records if "precedes any # newdoc" in r.getMessage()]
        assert len(warnings) == 1

    def test_sentence_context_carries_into_next_document(self):
        conllu = (
            "# newdoc id = a\n# sent_id = 1\n# text = One.\n"
            + row("1", "One", "one", "NUM", "_", "_", "0", "root", "_", "_") + "\n\n"
            + "# newdoc id = b\n"
            + row("1", "Two", "two", "NUM", "_", "_", "0", "root", "_", "_") + "\n"
        )
        tokens = reshape_conllu(conllu)
        assert tokens[1].doc_id == "b"
        assert tokens[1].paragraph_id == 1
        assert tokens[1].sentence_id == "1"
        assert tokens[1].sentence_text == "One."


class TestReshapeDocuments:
    """reshape_documents() confines malformed lines to their document."""

    def test_well_formed_sample(self, sample_conllu, sample_tokens):
        documents = reshape_documents(sample_conllu)
        assert [d.doc_id for d in documents] == ["d1", "d2"]
        assert all(d.error is None for d in documents)
        assert documents[0].rows + documents[1].rows == sample_tokens

    def test_malformed_document_is_dropped(self, sample_conllu):
        broken = sample_conllu.replace(
            "1\tBye\tbye\tINTJ\tUH\t_\t0\troot\t_\tSpaceAfter=No",
            "1\tBye\tbye\tINTJ",
        )
        documents = reshape_documents(broken)
        assert len(documents[0].rows) == 10
        assert documents[0].error is None
        assert documents[1].doc_id == "d2"
        assert documents[1].rows == []
        assert "expected 10" in documents[1].error

    def test_malformed_document_does_not_affect_next(self, sample_conllu):
        broken = sample_conllu.replace("2\t.\t.\tPUNCT\t.\t_\t1\tpunct\t_\t_", "2\t.", 1)
        documents = reshape_documents(broken)
        assert documents[0].rows == []
        assert documents[0].error is not None
        assert [t.form for t in documents[1].rows] == ["Bye", "."]

    def test_document_without_tokens(self):
        documents = reshape_documents("# newdoc id = empty\n\n# newdoc id = d2\n")
        assert [d.doc_id for d in documents] == ["empty", "d2"]
        assert all(d.rows == [] and d.error is None for d in documents)

    def test_leading_orphan_rows_form_their_own_document(self, scenario_conllu):
        documents = reshape_documents(row(*["_"] * 10) + "\n" + scenario_conllu)
        assert documents[0].doc_id is None
        assert len(documents[0].rows) == 1
        assert documents[1].doc_id == "d1"
        assert len(documents[1].rows) == 2
