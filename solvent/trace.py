"""
Tracing for Equation.solve.

    value, trace = Equation.parse("3 * x - 2 = 7").solve("x", trace=True)
    print(trace.format("chain"))

    3 * x - 2 = 7
      --(undo -)-->
    3 * x = 9
      --(undo *)-->
    x = 3
"""

from typing import Dict, List, Optional


class SolveStep:
    """One inverse application: the operator stripped and what replaced it."""

    def __init__(self, undone: str, applied: str, position: int,
                 before: str, after: str):
        self.undone = undone
        self.applied = applied
        self.position = position
        self.before = before
        self.after = after

    def __repr__(self) -> str:
        return f"undo {self.undone} (apply {self.applied}): {self.before} → {self.after}"

    def to_dict(self) -> Dict:
        """Convert step to dictionary for serialization."""
        return {
            "undone": self.undone,
            "applied": self.applied,
            "position": self.position,
            "before": self.before,
            "after": self.after,
        }


class SolveTrace:
    """
    A trace of all steps taken while isolating an unknown.

    Provides multiple formatting options:
        - Default repr: verbose multi-line format
        - format("compact"): single line summary
        - format("chain"): equation after every step
        - to_dict(): JSON-serializable dictionary
    """

    def __init__(self, target: Optional[str] = None):
        self.target = target
        self.steps: List[SolveStep] = []
        self.initial: Optional[str] = None
        self.final: Optional[str] = None
        self.value: Optional[float] = None

    def add_step(self, step: SolveStep):
        self.steps.append(step)

    def format(self, style: str = "verbose") -> str:
        """
        Format the trace in different styles.

        Args:
            style: One of "verbose", "compact", "chain"

        Returns:
            Formatted string representation of the trace.
        """
        if style == "compact":
            undone = [s.undone for s in self.steps]
            return f"{self.initial} --[{', '.join(undone)}]--> {self.final}"

        elif style == "chain":
            parts = [str(self.initial)]
            for step in self.steps:
                parts.append(f"  --(undo {step.undone})-->")
                parts.append(step.after)
            return "\n".join(parts)

        else:  # verbose (default)
            return repr(self)

    def __repr__(self) -> str:
        lines = [f"Initial: {self.initial}"]
        for i, step in enumerate(self.steps, 1):
            lines.append(f"  {i}. {step}")
        lines.append(f"Final: {self.final}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        """Iterate over solve steps."""
        return iter(self.steps)

    def __bool__(self) -> bool:
        """True if any operator was moved across the equation."""
        return len(self.steps) > 0

    def to_dict(self) -> Dict:
        """Convert trace to dictionary for JSON serialization."""
        return {
            "target": self.target,
            "initial": self.initial,
            "final": self.final,
            "value": self.value,
            "steps": [step.to_dict() for step in self.steps],
            "step_count": len(self.steps),
        }
