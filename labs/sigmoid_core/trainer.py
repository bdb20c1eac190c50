"""
Trainer Session
===============
Owns the authoritative state of the sigmoid lab and is its only mutator.

Every input (slider, button, timer tick) goes through a ``TrainerSession``
method. Each mutator clamps its input, stores the new state, recomputes the
Observation synchronously and emits ``changed``, so readers never see an
Observation that belongs to an older state.

Classes:
    RepeatingTask: Cancellable handle around a periodic QTimer.
    TrainerSession: ModelState + Sample + learning rate + auto-step session.
"""
import dataclasses
import logging
from typing import Callable, Optional

import numpy as np
from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from labs.sigmoid_core import settings
from labs.sigmoid_core.curves import CurveData, sample_curves
from labs.sigmoid_core.neuron import ModelState, Observation, Sample, recompute

logger = logging.getLogger(__name__)


class RepeatingTask:
    """Handle returned when a periodic callback is scheduled."""

    def __init__(self, period_ms: int, callback: Callable[[], None]):
        self._timer = QTimer()
        self._timer.setInterval(period_ms)
        self._timer.timeout.connect(callback)
        self._timer.start()

    @property
    def active(self) -> bool:
        return self._timer.isActive()

    def cancel(self) -> None:
        self._timer.stop()


def qt_scheduler(period_ms: int, callback: Callable[[], None]) -> RepeatingTask:
    return RepeatingTask(period_ms, callback)


def gradient_step(state: ModelState, observation: Observation, learning_rate: float) -> ModelState:
    """One vanilla gradient-descent update, clamped after the step."""
    return ModelState(
        w=settings.clamp(state.w - learning_rate * observation.dL_dw, settings.W_BOUNDS),
        b=settings.clamp(state.b - learning_rate * observation.dL_db, settings.B_BOUNDS),
    )


class TrainerSession(QObject):
    changed = pyqtSignal()
    auto_step_toggled = pyqtSignal(bool)

    def __init__(self,
                 state: Optional[ModelState] = None,
                 sample: Optional[Sample] = None,
                 learning_rate: float = settings.DEFAULT_LEARNING_RATE,
                 scheduler: Callable[[int, Callable[[], None]], RepeatingTask] = qt_scheduler,
                 period_ms: int = settings.AUTO_STEP_PERIOD_MS,
                 rng: Optional[np.random.Generator] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        state = state or ModelState(settings.DEFAULT_W, settings.DEFAULT_B)
        sample = sample or Sample(settings.DEFAULT_X, settings.DEFAULT_Y_TRUE)

        self._state = ModelState(settings.clamp(state.w, settings.W_BOUNDS),
                                 settings.clamp(state.b, settings.B_BOUNDS))
        self._sample = Sample(settings.clamp(sample.x, settings.X_BOUNDS),
                              settings.clamp(sample.y_true, settings.Y_TRUE_BOUNDS))
        self._learning_rate = settings.clamp(learning_rate, settings.LEARNING_RATE_BOUNDS)
        self._scheduler = scheduler
        self._period_ms = period_ms
        self._rng = rng if rng is not None else np.random.default_rng()

        self._task = None
        self._generation = 0
        self._step_count = 0
        self._curves: Optional[CurveData] = None
        self._observation = recompute(self._state, self._sample)

    # --- Outputs ---

    @property
    def state(self) -> ModelState:
        return self._state

    @property
    def sample(self) -> Sample:
        return self._sample

    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    @property
    def observation(self) -> Observation:
        return self._observation

    @property
    def running(self) -> bool:
        return self._task is not None

    @property
    def step_count(self) -> int:
        return self._step_count

    def curves(self) -> CurveData:
        if self._curves is None:
            self._curves = sample_curves(self._state, self._sample, prediction=self._observation.y)
        return self._curves

    # --- Inputs ---

    def set_w(self, value: float) -> None:
        self._commit(state=dataclasses.replace(self._state, w=settings.clamp(value, settings.W_BOUNDS)))

    def set_b(self, value: float) -> None:
        self._commit(state=dataclasses.replace(self._state, b=settings.clamp(value, settings.B_BOUNDS)))

    def set_x(self, value: float) -> None:
        self._commit(sample=dataclasses.replace(self._sample, x=settings.clamp(value, settings.X_BOUNDS)))

    def set_y_true(self, value: float) -> None:
        self._commit(sample=dataclasses.replace(
            self._sample, y_true=settings.clamp(value, settings.Y_TRUE_BOUNDS)))

    def set_learning_rate(self, value: float) -> None:
        self._learning_rate = settings.clamp(value, settings.LEARNING_RATE_BOUNDS)
        self._commit()

    def step(self) -> None:
        new_state = gradient_step(self._state, self._observation, self._learning_rate)
        self._step_count += 1
        self._commit(state=new_state)
        logger.debug("Step %d: w=%.4f b=%.4f loss=%.6f",
                     self._step_count, new_state.w, new_state.b, self._observation.loss)

    def toggle_auto_step(self) -> None:
        if self.running:
            self.stop_auto_step()
        else:
            self.start_auto_step()

    def start_auto_step(self) -> None:
        if self._task is not None:
            logger.debug("Auto-step already running; start ignored.")
            return
        self._generation += 1
        generation = self._generation
        self._task = self._scheduler(self._period_ms, lambda: self._on_tick(generation))
        logger.info("Auto-step started (every %d ms).", self._period_ms)
        self.auto_step_toggled.emit(True)

    def stop_auto_step(self) -> None:
        if self._task is None:
            logger.debug("Auto-step not running; stop ignored.")
            return
        task, self._task = self._task, None
        self._generation += 1
        task.cancel()
        logger.info("Auto-step stopped after %d steps.", self._step_count)
        self.auto_step_toggled.emit(False)

    def reset(self) -> None:
        """Back to the default w and b. x, y_true and the learning rate are kept."""
        self.stop_auto_step()
        self._step_count = 0
        self._commit(state=ModelState(settings.DEFAULT_W, settings.DEFAULT_B))
        logger.info("Parameters reset to w=%.2f, b=%.2f.", settings.DEFAULT_W, settings.DEFAULT_B)

    def randomize(self) -> None:
        state = ModelState(w=float(self._rng.uniform(*settings.W_BOUNDS)),
                           b=float(self._rng.uniform(*settings.B_BOUNDS)))
        sample = Sample(x=float(self._rng.uniform(*settings.X_BOUNDS)),
                        y_true=float(self._rng.uniform(*settings.Y_TRUE_BOUNDS)))
        self._commit(state=state, sample=sample)
        logger.info("Randomized: w=%.3f b=%.3f x=%.3f y_true=%.3f",
                    state.w, state.b, sample.x, sample.y_true)

    # --- Internals ---

    def _on_tick(self, generation: int) -> None:
        # ticks from a cancelled task, even one queued before cancel(), never step
        if self._task is None or generation != self._generation:
            return
        self.step()

    def _commit(self, state: Optional[ModelState] = None, sample: Optional[Sample] = None) -> None:
        if state is not None:
            self._state = state
        if sample is not None:
            self._sample = sample
        self._observation = recompute(self._state, self._sample)
        self._curves = None
        self.changed.emit()
