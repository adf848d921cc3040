"""
Directive engine tests

Tests recognition of inline and block forms, priority ordering, failure
containment and the handling of unprocessed directives.
"""

import pytest

from layoutsyntax.lib.engine import DirectiveEngine, HandlerError
from layoutsyntax.lib.registry import HandlerRegistry
from layoutsyntax.lib.scanner import directives_scan, unprocessed_find, unprocessed_strip
from layoutsyntax.models.directives import DirectiveKind


def engine_make(log, policy="warn"):
    """Engine over an empty registry"""
    return DirectiveEngine(registry=HandlerRegistry(), unprocessed_policy=policy, log=log)


class TestPassThrough:
    """Text without directives is untouched"""

    def test_plain_text(self, recording_log):
        """No :: at all"""
        engine = engine_make(recording_log)
        text = "# Title\n\nSome *markdown*.\n"
        assert engine.process(text) == text

    def test_colons_mid_line(self, recording_log):
        """:: not at a line start is ordinary text"""
        engine = engine_make(recording_log)
        engine.add("b", {"type": "both"}, lambda m: "X")
        text = "std::vector and a::b\n  ::b indented\n"

        assert engine.process(text) == text
        assert recording_log.messages["warning"] == []

    def test_empty_input(self, recording_log):
        """Empty and None input"""
        engine = engine_make(recording_log)
        assert engine.process("") == ""
        assert engine.process(None) == ""


class TestBlockForm:
    """Test ::name ... ::end recognition"""

    def test_capture_boundary(self, recording_log):
        """Args, content, and text after ::end"""
        seen = []
        engine = engine_make(recording_log)
        engine.add("name", lambda m: seen.append(m) or "X")

        result = engine.process("::name a\nline1\n::end\nline2")

        assert result == "X\nline2"
        assert seen[0].args == "a"
        assert seen[0].content == "line1"
        assert seen[0].raw == "::name a\nline1\n::end"
        assert seen[0].kind is DirectiveKind.BLOCK

    def test_shortest_body(self, recording_log):
        """Two blocks in a row are two matches"""
        engine = engine_make(recording_log)
        engine.add("box", lambda m: f"[{m.content}]")

        assert engine.process("::box\none\n::end\n::box\ntwo\n::end") == "[one]\n[two]"

    def test_unterminated_block_left_alone(self, recording_log):
        """No ::end, no match; the line is reported as unprocessed"""
        engine = engine_make(recording_log)
        engine.add("box", lambda m: "X")

        text = "::box\nbody without end"
        assert engine.process(text) == text
        assert recording_log.messages["warning"] == ["Unprocessed directive ::box"]

    def test_name_boundary(self, recording_log):
        """::card does not claim a ::cards block"""
        engine = engine_make(recording_log)
        engine.add("card", lambda m: "CARD")

        text = "::cards 3\nbody\n::end"
        assert engine.process(text) == text

    def test_end_must_be_whole_line(self, recording_log):
        """::endless does not close a block"""
        engine = engine_make(recording_log)
        engine.add("box", lambda m: f"[{m.content}]")

        assert engine.process("::box\n::endless\n::end") == "[::endless]"

    def test_page_data_passed(self, recording_log):
        """Handlers get read-only page data"""
        engine = engine_make(recording_log)
        engine.add("who", lambda m: m.pageData["author"])

        assert engine.process("::who\n::end", {"author": "Ada"}) == "Ada"


class TestInlineForm:
    """Test ::name value recognition"""

    def test_value(self, recording_log):
        """Value is the trimmed rest of the line"""
        engine = engine_make(recording_log)
        engine.add("mark", {"type": "inline"}, lambda m: f"<mark>{m.value}</mark>")

        assert engine.process("before\n::mark  hot  \nafter") == "before\n<mark>hot</mark>\nafter"

    def test_value_required(self, recording_log):
        """A bare ::name line is not an inline match"""
        engine = engine_make(recording_log)
        engine.add("mark", {"type": "inline"}, lambda m: "X")

        assert engine.process("::mark\nnext line") == "::mark\nnext line"

    def test_both_forms(self, recording_log):
        """'both' runs inline first, then block"""
        engine = engine_make(recording_log)
        engine.add("tag", {"type": "both"}, lambda m: f"{m.kind.value}:{m.args}")

        assert engine.process("::tag one\n::tag\nbody\n::end") == "inline:one\nblock:"


class TestPriority:
    """Test handler ordering"""

    def test_lower_priority_runs_first(self, recording_log):
        """Call order follows priority, not registration order"""
        calls = []
        engine = engine_make(recording_log)
        engine.add("late", {"type": "inline", "priority": 20}, lambda m: calls.append("late") or "L")
        engine.add("early", {"type": "inline", "priority": 10}, lambda m: calls.append("early") or "E")

        engine.process("::late x\n::early y")

        assert calls == ["early", "late"]

    def test_later_handler_sees_output(self, recording_log):
        """Output naming a later directive is picked up by it"""
        engine = engine_make(recording_log)
        engine.add("outer", {"type": "inline", "priority": 20}, lambda m: f"<b>{m.value}</b>")
        engine.add("inner", {"type": "inline", "priority": 10}, lambda m: f"::outer {m.value}")

        assert engine.process("::inner deep") == "<b>deep</b>"

    def test_output_not_rematched_by_other_names(self, recording_log):
        """Priority-10 output is not claimed by an unrelated priority-20 handler"""
        engine = engine_make(recording_log)
        engine.add("first", {"type": "inline", "priority": 10}, lambda m: "<p>first</p>")
        engine.add("second", {"type": "inline", "priority": 20}, lambda m: "<p>second</p>")

        assert engine.process("::first a\n::second b") == "<p>first</p>\n<p>second</p>"

    def test_no_self_rescan(self, recording_log):
        """A handler's own output is not matched again in the same pass"""
        engine = engine_make(recording_log)
        engine.add("loop", {"type": "inline"}, lambda m: f"::loop {m.value}!")

        assert engine.process("::loop a") == "::loop a!"


class TestFailureContainment:
    """Test handler errors"""

    def test_raise_keeps_raw(self, recording_log):
        """Failing span is byte-for-byte unchanged, later directives still run"""
        def boom(match):
            raise HandlerError("kaboom")

        engine = engine_make(recording_log)
        engine.add("boom", {"priority": 1}, boom)
        engine.add("fine", {"type": "inline", "priority": 2}, lambda m: "OK")

        text = "::boom  spaced  \nkeep   this\n::end\n::fine x"
        result = engine.process(text)

        assert result == "::boom  spaced  \nkeep   this\n::end\nOK"
        assert recording_log.messages["error"] == ["Error in ::boom handler: kaboom"]

    def test_any_exception(self, recording_log):
        """Arbitrary exceptions are contained too"""
        engine = engine_make(recording_log)
        engine.add("bad", {"type": "inline"}, lambda m: 1 / 0)

        assert engine.process("::bad x") == "::bad x"
        assert len(recording_log.messages["error"]) == 1

    def test_none_result(self, recording_log):
        """None replaces the span with nothing"""
        engine = engine_make(recording_log)
        engine.add("gone", {"type": "inline"}, lambda m: None)

        assert engine.process("a\n::gone x\nb") == "a\n\nb"


class TestUnprocessed:
    """Test leftover policy"""

    def test_warn_once_per_name(self, recording_log):
        """Warn policy keeps text and warns per distinct name"""
        engine = engine_make(recording_log)
        text = "::mystery one\n::mystery two\n::other\n"

        assert engine.process(text) == text
        assert recording_log.messages["warning"] == [
            "Unprocessed directive ::mystery",
            "Unprocessed directive ::other",
        ]

    def test_strip(self, recording_log):
        """Strip policy removes leftover blocks, then lines"""
        engine = engine_make(recording_log, policy="strip")

        result = engine.process("before\n::mystery x\n::end\nafter\n::lonely\n")

        assert result == "before\n\nafter\n\n"
        assert recording_log.messages["warning"] == []
        assert recording_log.messages["debug"] == [
            "Removed unprocessed directive ::mystery",
            "Removed unprocessed directive ::lonely",
        ]

    def test_unknown_policy(self, recording_log):
        """Policies other than warn/strip are rejected"""
        with pytest.raises(ValueError):
            DirectiveEngine(registry=HandlerRegistry(), unprocessed_policy="ignore")


class TestEndToEnd:
    """Test the engine as a whole"""

    def test_columns_sections(self, recording_log):
        """Sections reach a columns handler in order"""
        received = []

        engine = engine_make(recording_log)

        def columns(match):
            sections = engine.content_split(match.content)
            received.extend(sections)
            return "|".join(sections)

        engine.add("columns", columns)
        text = "::columns 2\nLeft **text**.\n---\nRight text.\n::end"

        assert engine.process(text) == "Left **text**.|Right text."
        assert received == ["Left **text**.", "Right text."]

    def test_default_registry_has_builtins(self, recording_log):
        """Engine without a registry knows the built-in directives"""
        engine = DirectiveEngine(log=recording_log)
        for name in ("columns", "card", "cards", "callout", "if", "space", "code"):
            assert name in engine.registry


class TestScanner:
    """Test scanner helpers directly"""

    def test_scan_rejects_both(self):
        """Scanning takes one form at a time"""
        with pytest.raises(ValueError):
            directives_scan("::x y", "x", DirectiveKind.BOTH)

    def test_spans_match_raw(self):
        """Span offsets cover exactly the raw text"""
        content = "intro\n::box a\nbody\n::end\noutro"
        span = directives_scan(content, "box", DirectiveKind.BLOCK)[0]
        assert content[span.start:span.end] == span.match.raw

    def test_find_and_strip(self):
        """Leftover helpers"""
        assert unprocessed_find("::note hi\ntext\n::todo\n::note again") == ["note", "todo"]
        assert unprocessed_strip("a\n::x\nb\n::end\nc") == "a\n\nc"
