"""
Lab Settings
============
Central registry for the numeric bounds, defaults and sweep constants shared by
the sigmoid neuron engine and the lab window.

Exports:
    W_BOUNDS, B_BOUNDS, X_BOUNDS, Y_TRUE_BOUNDS, LEARNING_RATE_BOUNDS
    DEFAULT_W, DEFAULT_B, DEFAULT_X, DEFAULT_Y_TRUE, DEFAULT_LEARNING_RATE
    AUTO_STEP_PERIOD_MS
    LabVariant, LAB_VARIANTS
"""
import math
from dataclasses import dataclass
from typing import Tuple

Bounds = Tuple[float, float]

# --- Parameter domains (closed intervals) ---
W_BOUNDS: Bounds = (-2.0, 2.0)
B_BOUNDS: Bounds = (-2.0, 2.0)
X_BOUNDS: Bounds = (-10.0, 10.0)
Y_TRUE_BOUNDS: Bounds = (0.0, 1.0)
LEARNING_RATE_BOUNDS: Bounds = (0.001, 1.0)

# --- Defaults ---
# Reset always returns to these, whatever the bounds are.
DEFAULT_W = 0.5
DEFAULT_B = 0.1
DEFAULT_X = 2.5
DEFAULT_Y_TRUE = 0.9
DEFAULT_LEARNING_RATE = 0.1

# --- Curve sweeps ---
PERTURBATION_RANGE: Bounds = (-2.0, 2.0)
PERTURBATION_STEP = 0.1
RESPONSE_RANGE: Bounds = (-10.0, 10.0)
RESPONSE_STEP = 0.2

# --- Auto-stepping ---
AUTO_STEP_PERIOD_MS = 500


def clamp(value: float, bounds: Bounds) -> float:
    """Saturate value at the nearer end of the closed interval bounds."""
    value = float(value)
    if math.isnan(value):
        raise ValueError("Cannot clamp NaN.")
    low, high = bounds
    return max(low, min(high, value))


@dataclass(frozen=True)
class LabVariant:
    """One configuration of the lab window. Both variants drive the same engine."""
    key: str
    title: str
    description: str
    editable_sample: bool
    allow_randomize: bool


FIXED_EXAMPLE = LabVariant(
    key="fixed",
    title="One Neuron, One Example",
    description="The training example is fixed at x = 2.5, y = 0.9. "
                "Adjust w and b or let gradient descent do it for you.",
    editable_sample=False,
    allow_randomize=False,
)

EXPLORER = LabVariant(
    key="explorer",
    title="Neuron Explorer",
    description="Change the input, the target and the learning rate, "
                "or randomize everything and watch the neuron recover.",
    editable_sample=True,
    allow_randomize=True,
)

LAB_VARIANTS = {variant.key: variant for variant in (FIXED_EXAMPLE, EXPLORER)}
