# walkthrough.py
# Text for the "show your work" panel: the forward pass and the chain rule,
# filled in with the current numbers.

from typing import List

from labs.sigmoid_core.neuron import ModelState, Observation, Sample


def derivation_lines(state: ModelState, sample: Sample, observation: Observation,
                     learning_rate: float) -> List[str]:
    w, b = state.w, state.b
    x, y_true = sample.x, sample.y_true
    z, y = observation.z, observation.y
    dL_dy = -2.0 * (y_true - y)
    dy_dz = y * (1.0 - y)

    return [
        "Forward pass",
        f"  z = w·x + b = {w:.3f}·{x:.3f} + {b:.3f} = {z:.4f}",
        f"  y = σ(z) = 1 / (1 + e^-z) = {y:.4f}",
        f"  L = (y_true - y)² = ({y_true:.3f} - {y:.4f})² = {observation.loss:.4f}",
        "",
        "Backward pass (chain rule)",
        f"  ∂L/∂y = -2(y_true - y) = {dL_dy:.4f}",
        f"  ∂y/∂z = y(1 - y) = {dy_dz:.4f}",
        f"  ∂z/∂w = x = {x:.3f}      ∂z/∂b = 1",
        f"  ∂L/∂w = ∂L/∂y · ∂y/∂z · x = {observation.dL_dw:.4f}",
        f"  ∂L/∂b = ∂L/∂y · ∂y/∂z = {observation.dL_db:.4f}",
        "",
        f"Next step (α = {learning_rate:.3f})",
        f"  w ← w - α·∂L/∂w = {w - learning_rate * observation.dL_dw:.4f}",
        f"  b ← b - α·∂L/∂b = {b - learning_rate * observation.dL_db:.4f}",
    ]
