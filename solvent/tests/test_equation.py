"""Tests for equations and single-unknown solving."""

import logging

import pytest
from solvent import (
    Equation, parse, Variable, SolveTrace,
    SolveError, ParseError, UnresolvedVariableError, ExpressionError,
)


class TestSolveScenarios:
    """Worked examples of solving for one unknown."""

    def test_subtract_constant(self):
        """x - 2 = 3 gives 5."""
        assert Equation(parse("x - 2"), parse("3")).solve("x") == pytest.approx(5)

    def test_trivial(self):
        """x = 3 gives 3 without any steps."""
        assert Equation(parse("x"), parse("3")).solve("x") == pytest.approx(3)

    def test_two_occurrences(self):
        """x + x = 4 cannot be solved."""
        with pytest.raises(SolveError):
            Equation(parse("x + x"), parse("4")).solve("x")

    def test_folded_other_side(self):
        """x - 2 = (3 * (3 - 4) / 9) gives 5/3."""
        eq = Equation(parse("x - 2"), parse("(3 * (3 - 4) / 9)"))
        assert eq.solve("x") == pytest.approx(1.6666667, abs=1e-6)

    def test_folded_both_sides(self):
        """x * 3 - (12 / 6) = (3 * (3 - 4) / 9) gives 5/9."""
        eq = Equation.parse("x * 3 - (12 / 6) = (3 * (3 - 4) / 9)")
        assert eq.solve("x") == pytest.approx(0.555555, abs=1e-6)

    def test_nested(self):
        """Operators are undone from the outside in."""
        assert Equation.parse("2 * (x + 3) = 10").solve("x") == pytest.approx(2)
        assert Equation.parse("(x / 4 - 1) * 3 = 6").solve("x") == pytest.approx(12)

    def test_unknown_on_right(self):
        """The unknown may be on the right hand side."""
        assert Equation.parse("4 = x + 1").solve("x") == pytest.approx(3)
        assert Equation.parse("3 = x").solve("x") == pytest.approx(3)

    def test_unknown_in_right_operand_of_subtract(self):
        """a - x = r is solved as x = a - r."""
        assert Equation.parse("10 - x = 4").solve("x") == pytest.approx(6)

    def test_unknown_in_right_operand_of_divide(self):
        """a / x = r is solved as x = a / r."""
        assert Equation.parse("12 / x = 4").solve("x") == pytest.approx(3)

    def test_unknown_in_right_operand_of_add(self):
        """a + x = r is solved as x = r - a."""
        assert Equation.parse("2 + x = 9").solve("x") == pytest.approx(7)
        assert Equation.parse("5 * x = 20").solve("x") == pytest.approx(4)

    def test_symbolic_sibling(self):
        """Whole subtrees beside the unknown move across."""
        eq = Equation.parse("(y + 1) * x = 12")
        assert eq.solve("x", {"y": 2}) == pytest.approx(4)

    def test_power_cannot_be_undone(self):
        """^ on the unknown's path has no inverse."""
        with pytest.raises(SolveError, match="no inverse"):
            Equation.parse("x ^ 2 = 9").solve("x")

    def test_power_elsewhere_is_fine(self):
        """^ away from the unknown's path folds normally."""
        assert Equation.parse("x + 2 ^ 3 = 10").solve("x") == pytest.approx(2)


class TestBindings:
    """Tests for solving with other variables bound."""

    def test_bound_other_variable(self):
        """Other variables take their values from bindings."""
        eq = Equation.parse("x * y = 12")
        assert eq.solve("x", {"y": 3}) == pytest.approx(4)

    def test_variable_keys(self):
        """Targets and bindings may be Variables."""
        eq = Equation.parse("x - y = 1")
        assert eq.solve(Variable("x"), {Variable("y"): 2}) == pytest.approx(3)

    def test_unbound_other_variable(self):
        """A solution depending on an unbound variable cannot be evaluated."""
        with pytest.raises(UnresolvedVariableError):
            Equation.parse("x + y = 3").solve("x")

    def test_bound_target(self):
        """The unknown must not already have a value."""
        with pytest.raises(SolveError, match="already has a value"):
            Equation.parse("x - 2 = 3").solve("x", {"x": 1})

    def test_absent_target(self):
        """The unknown must appear in the equation."""
        with pytest.raises(SolveError, match="does not occur"):
            Equation.parse("x - 2 = 3").solve("y")

    def test_occurrences_across_sides(self):
        """Occurrences on both sides count together."""
        with pytest.raises(SolveError, match="occurs 2 times"):
            Equation.parse("x + 1 = x * 2").solve("x")

    def test_solve_error_family(self):
        """SolveError is an ExpressionError."""
        with pytest.raises(ExpressionError):
            Equation.parse("x * x = 4").solve("x")


class TestProperties:
    """Properties that hold for any solvable equation."""

    CASES = [
        ("x - 2 = 3", {}),
        ("2 * (x + 3) = 10", {}),
        ("10 - x = 4", {}),
        ("12 / (x - 1) = 4", {}),
        ("(y + 1) * x / 2 = z", {"y": 3, "z": 8}),
        ("7 = 3 * x - 2", {}),
    ]

    @pytest.mark.parametrize("source,bindings", CASES)
    def test_round_trip(self, source, bindings):
        """Substituting the solution satisfies the original equation."""
        original = Equation.parse(source)
        value = original.copy().solve("x", bindings)
        env = dict(bindings, x=value)
        assert original.is_satisfied(env)
        assert original.residual(env) == pytest.approx(0, abs=1e-9)

    @pytest.mark.parametrize("source,bindings", CASES)
    def test_swap_symmetry(self, source, bindings):
        """Swapping the sides gives the same solution."""
        eq = Equation.parse(source)
        swapped = Equation(eq.rhs.copy(), eq.lhs.copy())
        assert eq.solve("x", bindings) == pytest.approx(swapped.solve("x", bindings))

    def test_sides_rewritten(self):
        """After solving, the unknown stands alone."""
        eq = Equation.parse("x * 3 - 2 = 7")
        eq.solve("x")
        assert str(eq) == "x = 3"

    def test_occurrences_fixed_at_construction(self):
        """The occurrence map does not change when the sides do."""
        eq = Equation.parse("x * y = 12")
        eq.solve("x", {"y": 3})
        assert eq.occurrences == {Variable("x"): 1, Variable("y"): 1}


class TestEquationApi:
    """Tests for construction and inspection."""

    def test_string_sides(self):
        """Sides may be given as text."""
        assert Equation("x - 2", "3").solve("x") == pytest.approx(5)

    def test_bad_side_type(self):
        """Sides must be expressions or text."""
        with pytest.raises(TypeError):
            Equation(1, "x")

    def test_parse_requires_one_equals(self):
        """Equation text needs exactly one '='."""
        with pytest.raises(ParseError):
            Equation.parse("x + 1")
        with pytest.raises(ParseError):
            Equation.parse("x = 1 = 2")

    def test_occurrences_read_only(self):
        """The occurrence map cannot be modified."""
        eq = Equation.parse("x + y = y")
        assert eq.occurrences[Variable("y")] == 2
        with pytest.raises(TypeError):
            eq.occurrences[Variable("x")] = 5

    def test_unknowns(self):
        """unknowns lists the variables without values."""
        eq = Equation.parse("x * y = z")
        assert set(eq.unknowns({"y": 1})) == {Variable("x"), Variable("z")}
        assert eq.unknowns({"x": 1, "y": 1, "z": 1}) == []

    def test_copy_is_independent(self):
        """Solving a copy leaves the original sides alone."""
        eq = Equation.parse("x + 1 = 3")
        eq.copy().solve("x")
        assert str(eq) == "x + 1 = 3"

    def test_str_and_repr(self):
        """Equations print as lhs = rhs."""
        eq = Equation.parse("x + 1 = 3")
        assert str(eq) == "x + 1 = 3"
        assert repr(eq) == "Equation('x + 1 = 3')"


class TestSolveTraceAndLogging:
    """Tests for traced solving and debug logging."""

    def test_trace_returned(self):
        """trace=True returns the value and a SolveTrace."""
        value, trace = Equation.parse("3 * x - 2 = 7").solve("x", trace=True)
        assert value == pytest.approx(3)
        assert isinstance(trace, SolveTrace)
        assert len(trace) == 2
        assert trace.value == value
        assert trace.target == "x"

    def test_trace_positions(self):
        """Each step records which operand held the unknown."""
        _, trace = Equation.parse("10 - x * 2 = 4").solve("x", trace=True)
        assert [(s.undone, s.applied, s.position) for s in trace] == [
            ("-", "-", 1),
            ("*", "/", 0),
        ]
        assert trace.final == "x = 3"

    def test_logs_steps(self, caplog):
        """Steps and the result are logged at debug level."""
        caplog.set_level(logging.DEBUG, logger="solvent.equation")
        Equation.parse("x + 1 = 3").solve("x")
        assert "Solved x" in caplog.text
        assert "Step 1" in caplog.text

    def test_logs_rejection(self, caplog):
        """A rejected solve is logged before the error propagates."""
        caplog.set_level(logging.DEBUG, logger="solvent.equation")
        with pytest.raises(SolveError):
            Equation.parse("x + x = 3").solve("x")
        assert "Rejected solve" in caplog.text


class TestDeepNesting:
    """Tests for solving deeply nested equations."""

    @staticmethod
    def nested(depth):
        return "( " * depth + "x" + " + 1 )" * depth

    def test_deep_unknown(self):
        """An unknown thousands of levels down is isolated."""
        depth = 2500
        eq = Equation(parse(self.nested(depth)), parse("0"))
        assert eq.solve("x") == pytest.approx(-depth)

    def test_deep_unknown_on_right(self):
        """Deep nesting works on the right hand side too."""
        depth = 2000
        eq = Equation(parse("5"), parse("2 * " + self.nested(depth)))
        assert eq.solve("x") == pytest.approx(2.5 - depth)

    def test_no_formatting_without_trace(self, monkeypatch, caplog):
        """Untraced solves never format the equation."""
        caplog.set_level(logging.WARNING, logger="solvent.equation")

        def fail(self):
            raise AssertionError("equation was formatted")

        eq = Equation.parse("(x * 3 - 2) / 4 = 7")
        monkeypatch.setattr(Equation, "__str__", fail)
        assert eq.solve("x") == pytest.approx(10)

    def test_deep_trace(self):
        """Traced solves record one step per level."""
        depth = 300
        eq = Equation(parse(self.nested(depth)), parse("0"))
        value, trace = eq.solve("x", trace=True)
        assert value == pytest.approx(-depth)
        assert len(trace) == depth
        assert trace.final == "x = " + str(-depth)
