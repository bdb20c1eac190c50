import os

# Qt widgets and timers in the tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from labs.sigmoid_core.neuron import ModelState, Sample


class ManualTask:
    def __init__(self, period_ms, callback):
        self.period_ms = period_ms
        self.callback = callback
        self.active = True

    def cancel(self):
        self.active = False


class ManualScheduler:
    """Stands in for the QTimer scheduler; ticks only when told to."""

    def __init__(self):
        self.tasks = []

    def __call__(self, period_ms, callback):
        task = ManualTask(period_ms, callback)
        self.tasks.append(task)
        return task

    @property
    def active_tasks(self):
        return [task for task in self.tasks if task.active]

    def tick(self, times=1):
        for _ in range(times):
            for task in self.active_tasks:
                task.callback()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def reference_state():
    return ModelState(w=0.5, b=0.1)


@pytest.fixture
def reference_sample():
    return Sample(x=2.5, y_true=0.9)
