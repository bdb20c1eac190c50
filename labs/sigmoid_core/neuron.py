# neuron.py
# Forward pass, loss and analytic gradients of a single sigmoid neuron.

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

Number = Union[float, np.ndarray]


@dataclass(frozen=True)
class ModelState:
    w: float
    b: float


@dataclass(frozen=True)
class Sample:
    x: float
    y_true: float


@dataclass(frozen=True)
class Observation:
    """Everything derived from one (ModelState, Sample) pair."""
    z: float
    y: float
    loss: float
    dL_dw: float
    dL_db: float


def _as_output(values: np.ndarray) -> Number:
    return float(values) if np.ndim(values) == 0 else values


# --- Forward pass ---

def pre_activation(w: Number, b: Number, x: Number) -> Number:
    return w * x + b


def sigmoid(z: Number) -> Number:
    """
    Logistic function, stable for any finite z.
    exp is only ever taken of -|z|, so it cannot overflow.
    """
    z = np.asarray(z, dtype=float)
    e = np.exp(-np.abs(z))
    values = np.where(z >= 0, 1.0 / (1.0 + e), e / (1.0 + e))
    return _as_output(values)


def forward(w: Number, b: Number, x: Number) -> Tuple[Number, Number]:
    z = pre_activation(w, b, x)
    return z, sigmoid(z)


def squared_error(y: Number, y_true: Number) -> Number:
    return (y_true - y) ** 2


# --- Backward pass ---

def loss_gradients(y: Number, y_true: Number, x: Number) -> Tuple[Number, Number]:
    """
    Chain rule from the forward output:
        dL/dy = -2 (y_true - y)
        dy/dz = y (1 - y)
        dz/dw = x,  dz/db = 1
    """
    dL_dy = -2.0 * (y_true - y)
    dy_dz = y * (1.0 - y)
    dL_db = dL_dy * dy_dz
    dL_dw = dL_db * x
    return dL_dw, dL_db


def recompute(state: ModelState, sample: Sample) -> Observation:
    z, y = forward(state.w, state.b, sample.x)
    dL_dw, dL_db = loss_gradients(y, sample.y_true, sample.x)
    return Observation(
        z=float(z),
        y=float(y),
        loss=float(squared_error(y, sample.y_true)),
        dL_dw=float(dL_dw),
        dL_db=float(dL_db),
    )
