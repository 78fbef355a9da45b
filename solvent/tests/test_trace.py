"""Tests for solve tracing."""

import json

from solvent import Equation, SolveStep, SolveTrace


def traced(source, target="x", bindings=None):
    return Equation.parse(source).solve(target, bindings, trace=True)[1]


class TestSolveStep:
    """Tests for SolveStep."""

    def test_repr(self):
        """A step shows what was undone and the equation before and after."""
        step = SolveStep("-", "+", 0, "x - 2 = 3", "x = 5")
        assert repr(step) == "undo - (apply +): x - 2 = 3 → x = 5"

    def test_to_dict(self):
        """Steps serialize to plain dictionaries."""
        step = SolveStep("/", "/", 1, "12 / x = 4", "x = 3")
        assert step.to_dict() == {
            "undone": "/",
            "applied": "/",
            "position": 1,
            "before": "12 / x = 4",
            "after": "x = 3",
        }


class TestSolveTrace:
    """Tests for SolveTrace formatting."""

    def test_chain(self):
        """Chain format shows the equation after every step."""
        trace = traced("3 * x - 2 = 7")
        assert trace.format("chain") == "\n".join([
            "3 * x - 2 = 7",
            "  --(undo -)-->",
            "3 * x = 9",
            "  --(undo *)-->",
            "x = 3",
        ])

    def test_compact(self):
        """Compact format is one line."""
        trace = traced("3 * x - 2 = 7")
        assert trace.format("compact") == "3 * x - 2 = 7 --[-, *]--> x = 3"

    def test_verbose(self):
        """The default format numbers each step."""
        trace = traced("x + 1 = 3")
        text = trace.format()
        assert text == repr(trace)
        assert text.splitlines() == [
            "Initial: x + 1 = 3",
            "  1. undo + (apply -): x + 1 = 3 → x = 2",
            "Final: x = 2",
        ]

    def test_iteration(self):
        """A trace iterates over its steps."""
        trace = traced("2 * (x + 3) = 10")
        assert [s.undone for s in trace] == ["*", "+"]
        assert len(trace) == 2
        assert trace

    def test_no_steps(self):
        """Solving an isolated unknown records no steps."""
        trace = traced("x = 4")
        assert not trace
        assert trace.initial == trace.final == "x = 4"
        assert trace.value == 4.0

    def test_to_dict_is_json(self):
        """to_dict output can be dumped as JSON."""
        trace = traced("x * y = 12", bindings={"y": 4})
        data = trace.to_dict()
        assert data["target"] == "x"
        assert data["step_count"] == 1
        assert data["value"] == 3.0
        assert json.loads(json.dumps(data)) == data

    def test_empty_trace(self):
        """A fresh trace has no steps and no result."""
        trace = SolveTrace()
        assert len(trace) == 0
        assert trace.value is None
        assert trace.to_dict()["steps"] == []
