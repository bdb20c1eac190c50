# curves.py
# Sampled datasets for the three plot families of the sigmoid lab:
# loss vs. perturbation, derivative vs. perturbation, output vs. input.

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from labs.sigmoid_core import settings
from labs.sigmoid_core.neuron import ModelState, Sample, forward, loss_gradients, squared_error

Point = Tuple[float, float]


@dataclass(frozen=True, eq=False)
class Series:
    x: np.ndarray
    y: np.ndarray

    def __len__(self) -> int:
        return len(self.x)

    def points(self) -> List[Point]:
        return list(zip(self.x.tolist(), self.y.tolist()))


@dataclass(frozen=True, eq=False)
class CurveData:
    loss_vs_dw: Series
    loss_vs_db: Series
    grad_w_vs_dw: Series
    grad_b_vs_db: Series
    response: Series
    target: Point
    prediction: Point


def sweep(start: float, stop: float, step: float) -> np.ndarray:
    """
    Inclusive grid from start to stop.
    The point count is rounded up front so accumulated float error can never
    drop the last sample.
    """
    if step <= 0:
        raise ValueError(f"Sweep step must be positive, got {step}.")
    if stop < start:
        raise ValueError(f"Sweep stop {stop} is below start {start}.")
    count = int(round((stop - start) / step)) + 1
    return np.linspace(start, stop, count)


def perturbation_curves(state: ModelState, sample: Sample,
                        step: float = settings.PERTURBATION_STEP) -> Tuple[Series, Series, Series, Series]:
    """
    Vary w alone, then b alone, by each delta in the perturbation range.
    Perturbed parameters are deliberately left unclamped.

    Returns (loss_vs_dw, loss_vs_db, grad_w_vs_dw, grad_b_vs_db).
    """
    deltas = sweep(*settings.PERTURBATION_RANGE, step)

    _, y_w = forward(state.w + deltas, state.b, sample.x)
    loss_w = squared_error(y_w, sample.y_true)
    grad_w, _ = loss_gradients(y_w, sample.y_true, sample.x)

    _, y_b = forward(state.w, state.b + deltas, sample.x)
    loss_b = squared_error(y_b, sample.y_true)
    _, grad_b = loss_gradients(y_b, sample.y_true, sample.x)

    return (Series(deltas, loss_w), Series(deltas, loss_b),
            Series(deltas, grad_w), Series(deltas, grad_b))


def response_curve(state: ModelState, step: float = settings.RESPONSE_STEP) -> Series:
    xs = sweep(*settings.RESPONSE_RANGE, step)
    _, ys = forward(state.w, state.b, xs)
    return Series(xs, ys)


def sample_curves(state: ModelState, sample: Sample,
                  perturbation_step: float = settings.PERTURBATION_STEP,
                  response_step: float = settings.RESPONSE_STEP,
                  prediction: Optional[float] = None) -> CurveData:
    """Pass prediction (the current y from an Observation) to skip a second forward pass."""
    loss_vs_dw, loss_vs_db, grad_w_vs_dw, grad_b_vs_db = perturbation_curves(state, sample, perturbation_step)
    if prediction is None:
        _, prediction = forward(state.w, state.b, sample.x)
    return CurveData(
        loss_vs_dw=loss_vs_dw,
        loss_vs_db=loss_vs_db,
        grad_w_vs_dw=grad_w_vs_dw,
        grad_b_vs_db=grad_b_vs_db,
        response=response_curve(state, response_step),
        target=(sample.x, sample.y_true),
        prediction=(sample.x, float(prediction)),
    )
