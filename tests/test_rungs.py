"""
Tests for L5K rung splitting.
"""

from logixparse.rungs import split_rung_body, split_rungs


class TestSplitRungs:
    """Test splitting a ROUTINE block into rungs."""

    def test_two_rungs(self):
        routine = """ROUTINE MainRoutine
    N: XIC(A)OTE(B);
    N: [Note]XIC(B)XIC(C)OTE(D);
END_ROUTINE"""
        sections = split_rungs(routine)

        assert len(sections) == 2
        assert split_rung_body(sections[0].body) == (None, "XIC(A)OTE(B)")
        assert split_rung_body(sections[1].body) == ("Note", "XIC(B)XIC(C)OTE(D)")

    def test_rung_spanning_lines(self):
        routine = """ROUTINE R
    N: XIC(A)
       [XIC(B) ,XIC(C) ]OTE(D);
END_ROUTINE"""
        sections = split_rungs(routine)

        assert len(sections) == 1
        assert sections[0].body.splitlines() == [" XIC(A)", "[XIC(B) ,XIC(C) ]OTE(D);"]

    def test_multiline_bracket_comment(self):
        routine = """ROUTINE R
    N: [Line one
       line two]XIC(A)OTE(B);
END_ROUTINE"""
        sections = split_rungs(routine)
        comment, content = split_rung_body(sections[0].body)

        assert comment == "Line one\nline two"
        assert content == "XIC(A)OTE(B)"

    def test_rc_comment_applies_to_next_rung(self):
        routine = """ROUTINE Alarms
    RC: "Latch the alarm";
    N: XIC(Fault)OTL(Alarm);
    N: XIC(Reset)OTU(Alarm);
END_ROUTINE"""
        sections = split_rungs(routine)

        assert [s.comment for s in sections] == ["Latch the alarm", None]

    def test_multiline_rc_comment(self):
        routine = """ROUTINE R
    RC: "Start the pump$N
    when level is high";
    N: XIC(High)OTE(Pump);
END_ROUTINE"""
        sections = split_rungs(routine)

        assert len(sections) == 1
        assert sections[0].comment == "Start the pump\n when level is high"

    def test_no_rungs(self):
        assert split_rungs("ROUTINE Empty\nEND_ROUTINE") == []


class TestSplitRungBody:
    """Test separating the comment from the ladder text."""

    def test_plain(self):
        assert split_rung_body(" XIC(A)OTE(B);") == (None, "XIC(A)OTE(B)")

    def test_without_terminator(self):
        assert split_rung_body("XIC(A)OTE(B)") == (None, "XIC(A)OTE(B)")

    def test_comment_only_at_start(self):
        comment, content = split_rung_body("XIC(A)[XIC(B),XIC(C)]OTE(D);")

        assert comment is None
        assert content == "XIC(A)[XIC(B),XIC(C)]OTE(D)"
