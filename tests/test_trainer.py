import numpy as np
import pytest

from labs.sigmoid_core import settings
from labs.sigmoid_core.neuron import ModelState, Observation, Sample, recompute
from labs.sigmoid_core.trainer import TrainerSession, gradient_step


@pytest.fixture
def session(scheduler):
    return TrainerSession(scheduler=scheduler, rng=np.random.default_rng(0))


def test_gradient_step_moves_against_the_gradient(reference_state, reference_sample):
    obs = recompute(reference_state, reference_sample)
    new_state = gradient_step(reference_state, obs, 0.1)
    assert new_state.w == pytest.approx(0.5 - 0.1 * obs.dL_dw)
    assert new_state.b == pytest.approx(0.1 - 0.1 * obs.dL_db)
    assert recompute(new_state, reference_sample).loss < obs.loss


@pytest.mark.parametrize("learning_rate", [1.0, 1e3, 1e9])
def test_gradient_step_clamps_after_huge_updates(learning_rate):
    obs = Observation(z=0.0, y=0.5, loss=0.1, dL_dw=-3.0, dL_db=4.0)
    new_state = gradient_step(ModelState(1.9, -1.9), obs, learning_rate)
    assert -2.0 <= new_state.w <= 2.0
    assert -2.0 <= new_state.b <= 2.0
    if learning_rate > 1:
        assert new_state == ModelState(2.0, -2.0)


def test_session_starts_from_defaults(session):
    assert session.state == ModelState(settings.DEFAULT_W, settings.DEFAULT_B)
    assert session.sample == Sample(settings.DEFAULT_X, settings.DEFAULT_Y_TRUE)
    assert session.learning_rate == settings.DEFAULT_LEARNING_RATE
    assert not session.running
    assert session.step_count == 0
    assert session.observation == recompute(session.state, session.sample)


def test_setters_clamp_silently(session):
    session.set_w(7.0)
    session.set_b(-7.0)
    session.set_x(-50.0)
    session.set_y_true(1.5)
    session.set_learning_rate(5.0)
    assert session.state == ModelState(2.0, -2.0)
    assert session.sample == Sample(-10.0, 1.0)
    assert session.learning_rate == 1.0

    session.set_learning_rate(0.0)
    assert session.learning_rate == 0.001


def test_observation_never_stale(session):
    session.set_x(-3.0)
    assert session.observation == recompute(session.state, session.sample)
    session.set_w(-1.25)
    assert session.observation == recompute(session.state, session.sample)
    session.step()
    assert session.observation == recompute(session.state, session.sample)


def test_every_mutation_emits_changed(session):
    seen = []
    session.changed.connect(lambda: seen.append(session.state))
    session.set_b(0.3)
    session.step()
    session.set_learning_rate(0.5)
    assert len(seen) == 3


def test_curves_follow_the_latest_state(session):
    before = session.curves()
    assert session.curves() is before
    session.set_w(-1.0)
    after = session.curves()
    assert after is not before
    assert after.prediction[1] == pytest.approx(session.observation.y)


def test_many_steps_with_max_learning_rate_stay_in_bounds(session):
    session.set_x(10.0)
    session.set_y_true(0.0)
    session.set_learning_rate(1.0)
    for _ in range(200):
        session.step()
        assert -2.0 <= session.state.w <= 2.0
        assert -2.0 <= session.state.b <= 2.0
    assert session.step_count == 200


def test_steps_reduce_loss_on_reference_example(session):
    start = session.observation.loss
    for _ in range(50):
        session.step()
    assert session.observation.loss < start


def test_reset_restores_parameters_only(session):
    session.set_x(-4.0)
    session.set_y_true(0.2)
    session.set_learning_rate(0.7)
    session.step()
    session.reset()
    assert session.state == ModelState(0.5, 0.1)
    assert session.sample == Sample(-4.0, 0.2)
    assert session.learning_rate == 0.7
    assert session.step_count == 0


def test_reset_is_idempotent(session):
    session.set_w(-1.7)
    session.reset()
    once = (session.state, session.sample, session.learning_rate, session.observation, session.running)
    session.reset()
    twice = (session.state, session.sample, session.learning_rate, session.observation, session.running)
    assert once == twice


def test_reset_stops_auto_step(session, scheduler):
    session.toggle_auto_step()
    session.reset()
    assert not session.running
    assert scheduler.active_tasks == []


def test_toggle_twice_from_idle(session, scheduler):
    states = []
    session.auto_step_toggled.connect(states.append)
    session.toggle_auto_step()
    assert session.running
    session.toggle_auto_step()
    assert not session.running
    assert states == [True, False]
    assert len(scheduler.tasks) == 1
    assert scheduler.active_tasks == []


def test_start_while_running_registers_no_second_task(session, scheduler):
    session.start_auto_step()
    session.start_auto_step()
    assert len(scheduler.tasks) == 1
    scheduler.tick(3)
    assert session.step_count == 3


def test_stop_while_idle_is_a_no_op(session):
    states = []
    session.auto_step_toggled.connect(states.append)
    session.stop_auto_step()
    assert not session.running
    assert states == []


def test_auto_step_uses_the_fixed_period(session, scheduler):
    session.start_auto_step()
    assert scheduler.tasks[0].period_ms == settings.AUTO_STEP_PERIOD_MS


def test_ticks_after_cancel_do_not_step(session, scheduler):
    session.start_auto_step()
    scheduler.tick()
    task = scheduler.tasks[0]
    session.stop_auto_step()
    task.callback()
    assert session.step_count == 1


def test_late_tick_from_cancelled_task_is_ignored_after_restart(session, scheduler):
    session.start_auto_step()
    old_task = scheduler.tasks[0]
    session.stop_auto_step()
    session.start_auto_step()

    old_task.callback()
    scheduler.tick()
    assert session.step_count == 1


def test_curves_reuse_the_observed_prediction(session):
    session.set_w(-0.75)
    assert session.curves().prediction == (session.sample.x, session.observation.y)


def test_randomize_draws_from_declared_intervals(session, scheduler):
    session.start_auto_step()
    for _ in range(50):
        session.randomize()
        assert -2.0 <= session.state.w <= 2.0
        assert -2.0 <= session.state.b <= 2.0
        assert -10.0 <= session.sample.x <= 10.0
        assert 0.0 <= session.sample.y_true <= 1.0
        assert session.observation == recompute(session.state, session.sample)
    assert session.running
    assert len(scheduler.active_tasks) == 1


def test_randomize_is_reproducible_with_a_seeded_generator(scheduler):
    first = TrainerSession(scheduler=scheduler, rng=np.random.default_rng(42))
    second = TrainerSession(scheduler=scheduler, rng=np.random.default_rng(42))
    first.randomize()
    second.randomize()
    assert first.state == second.state
    assert first.sample == second.sample


def test_initial_values_are_clamped(scheduler):
    session = TrainerSession(state=ModelState(5.0, -5.0), sample=Sample(20.0, -1.0),
                             learning_rate=3.0, scheduler=scheduler)
    assert session.state == ModelState(2.0, -2.0)
    assert session.sample == Sample(10.0, 0.0)
    assert session.learning_rate == 1.0


def test_qt_timer_drives_auto_step(qtbot):
    session = TrainerSession(period_ms=20)
    session.toggle_auto_step()
    qtbot.waitUntil(lambda: session.step_count >= 3, timeout=3000)
    session.toggle_auto_step()
    assert not session.running
    stopped_at = session.step_count
    qtbot.wait(150)
    assert session.step_count == stopped_at


def test_qt_double_toggle_fires_no_ticks(qtbot):
    session = TrainerSession(period_ms=20)
    session.toggle_auto_step()
    session.toggle_auto_step()
    qtbot.wait(150)
    assert session.step_count == 0
    assert session.state == ModelState(settings.DEFAULT_W, settings.DEFAULT_B)
