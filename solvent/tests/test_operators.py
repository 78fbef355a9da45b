"""Tests for the operator registry."""

import math

import pytest
from solvent import OPERATORS, ADD, SUBTRACT, MULTIPLY, DIVIDE, POWER, Precedence, get_operator
from solvent.operators import operator_symbols


class TestRegistry:
    """Tests for the set of operators."""

    def test_symbols(self):
        """The registry holds exactly + - * / ^."""
        assert set(OPERATORS) == {"+", "-", "*", "/", "^"}

    def test_lookup(self):
        """Operators are found by symbol."""
        assert get_operator("*") is MULTIPLY
        with pytest.raises(KeyError):
            get_operator("%")

    def test_precedence(self):
        """Precedence classes match the operators."""
        assert ADD.precedence == SUBTRACT.precedence == Precedence.ADDITIVE
        assert MULTIPLY.precedence == DIVIDE.precedence == Precedence.MULTIPLICATIVE
        assert POWER.precedence == Precedence.POWER

    def test_all_binary(self):
        """Every operator takes two operands."""
        assert all(op.arity == 2 for op in OPERATORS.values())

    def test_operator_symbols(self):
        """operator_symbols lists every registered symbol."""
        assert sorted(operator_symbols()) == sorted("+-*/^")


class TestInverses:
    """Tests for the inverse pairing."""

    def test_pairs(self):
        """+ and - undo each other, as do * and /."""
        assert ADD.inverse is SUBTRACT
        assert SUBTRACT.inverse is ADD
        assert MULTIPLY.inverse is DIVIDE
        assert DIVIDE.inverse is MULTIPLY

    def test_power_has_no_inverse(self):
        """^ cannot be undone."""
        assert POWER.inverse is None
        assert not POWER.invertible
        with pytest.raises(ValueError):
            POWER.undo(0)

    def test_undo_left_operand(self):
        """With the unknown on the left, the inverse takes the other side first."""
        assert SUBTRACT.undo(0) == (ADD, 0)
        assert DIVIDE.undo(0) == (MULTIPLY, 0)

    def test_undo_commutative_right_operand(self):
        """Commutative operators undo the same way from either side."""
        assert ADD.undo(1) == (SUBTRACT, 0)
        assert MULTIPLY.undo(1) == (DIVIDE, 0)

    def test_undo_non_commutative_right_operand(self):
        """a - x = r gives x = a - r; a / x = r gives x = a / r."""
        assert SUBTRACT.undo(1) == (SUBTRACT, 1)
        assert DIVIDE.undo(1) == (DIVIDE, 1)


class TestEvaluation:
    """Tests for operator evaluation."""

    def test_arithmetic(self):
        """Each operator computes its result as a float."""
        assert ADD(2, 3) == 5.0
        assert SUBTRACT(2, 3) == -1.0
        assert MULTIPLY(2, 3) == 6.0
        assert DIVIDE(3, 2) == 1.5
        assert POWER(2, 10) == 1024.0
        assert isinstance(ADD(2, 3), float)

    def test_wrong_operand_count(self):
        """Operand count must equal the arity."""
        with pytest.raises(ValueError):
            ADD.evaluate([1])
        with pytest.raises(ValueError):
            ADD.evaluate([1, 2, 3])

    def test_division_by_zero(self):
        """Division by zero follows IEEE rules instead of raising."""
        assert DIVIDE(1, 0) == math.inf
        assert DIVIDE(-1, 0) == -math.inf
        assert math.isnan(DIVIDE(0, 0))

    def test_power_domain(self):
        """Power never raises or returns complex numbers."""
        assert math.isnan(POWER(-8, 1 / 3))
        assert POWER(0, -1) == math.inf
        assert POWER(10, 400) == math.inf
        assert POWER(-10, 401) == -math.inf
        assert POWER(-2, 3) == -8.0

    def test_power_of_signed_zero(self):
        """Negative powers of zero keep the sign of zero for odd exponents."""
        assert POWER(-0.0, -1) == -math.inf
        assert POWER(-0.0, -3) == -math.inf
        assert POWER(0.0, -1) == math.inf
        assert POWER(-0.0, -2) == math.inf
        assert POWER(-0.0, -0.5) == math.inf
