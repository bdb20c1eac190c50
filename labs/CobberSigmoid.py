# CobberSigmoid.py
# A PyQt6 application for watching one sigmoid neuron learn from one example:
# the forward pass, the chain rule, and gradient descent on w and b.
# Written for the CobberBackprop launcher.

import logging
import sys

from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QFrame, QPushButton, QSlider, QFormLayout
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont, QColor
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure

from labs.sigmoid_core import settings
from labs.sigmoid_core.settings import LabVariant, LAB_VARIANTS, FIXED_EXAMPLE
from labs.sigmoid_core.trainer import TrainerSession
from labs.sigmoid_core.walkthrough import derivation_lines

logger = logging.getLogger(__name__)

# Slider positions are integers; a float value is position / scale.
W_SCALE = 100
B_SCALE = 100
X_SCALE = 10
Y_TRUE_SCALE = 100
LEARNING_RATE_SCALE = 1000


class MplCanvas(FigureCanvas):
    def __init__(self, parent=None, width=5, height=4, dpi=100):
        # constrained_layout keeps titles/labels from being clipped
        self.fig = Figure(figsize=(width, height), dpi=dpi, constrained_layout=True)
        self.axes = self.fig.add_subplot(111)
        super(MplCanvas, self).__init__(self.fig)
        self.setParent(parent)


def make_slider(bounds, scale, value):
    slider = QSlider(Qt.Orientation.Horizontal)
    slider.setRange(round(bounds[0] * scale), round(bounds[1] * scale))
    slider.setValue(round(value * scale))
    return slider


class CobberSigmoidApp(QMainWindow):
    def __init__(self, variant: LabVariant = FIXED_EXAMPLE, session: TrainerSession = None):
        super().__init__()
        # --- BRANDING ---
        self.cobber_maroon = QColor(108, 29, 69)
        self.cobber_gold = QColor(234, 170, 0)
        self.lato_font = QFont("Lato")

        self.variant = variant
        self.session = session if session is not None else TrainerSession(parent=self)
        if not variant.editable_sample:
            # the fixed lab always trains on the reference example
            self.session.set_x(settings.DEFAULT_X)
            self.session.set_y_true(settings.DEFAULT_Y_TRUE)

        self.setWindowTitle(f"CobberSigmoid: {variant.title}")
        self.setGeometry(100, 100, 1500, 800)
        self.setFont(self.lato_font)

        main_layout = QHBoxLayout()

        # --- Controls (left) ---
        controls_panel = QFrame()
        controls_panel.setFrameShape(QFrame.Shape.StyledPanel)
        controls_layout = QVBoxLayout(controls_panel)

        title_label = QLabel(f"<h3>{variant.title}</h3>")
        description_label = QLabel(f"<p>{variant.description}</p>")
        description_label.setWordWrap(True)

        state, sample = self.session.state, self.session.sample
        self.w_slider = make_slider(settings.W_BOUNDS, W_SCALE, state.w)
        self.b_slider = make_slider(settings.B_BOUNDS, B_SCALE, state.b)
        self.x_slider = make_slider(settings.X_BOUNDS, X_SCALE, sample.x)
        self.y_true_slider = make_slider(settings.Y_TRUE_BOUNDS, Y_TRUE_SCALE, sample.y_true)
        self.lr_slider = make_slider(settings.LEARNING_RATE_BOUNDS, LEARNING_RATE_SCALE,
                                     self.session.learning_rate)

        self.w_value = QLabel()
        self.b_value = QLabel()
        self.x_value = QLabel()
        self.y_true_value = QLabel()
        self.lr_value = QLabel()

        form_layout = QFormLayout()
        form_layout.addRow("Weight (w):", self._slider_row(self.w_slider, self.w_value))
        form_layout.addRow("Bias (b):", self._slider_row(self.b_slider, self.b_value))
        if variant.editable_sample:
            form_layout.addRow("Input (x):", self._slider_row(self.x_slider, self.x_value))
            form_layout.addRow("Target (y_true):", self._slider_row(self.y_true_slider, self.y_true_value))
        form_layout.addRow("Learning Rate (α):", self._slider_row(self.lr_slider, self.lr_value))

        self.step_button = QPushButton("Take One Step")
        self.auto_button = QPushButton("Start Auto-Step")
        self.reset_button = QPushButton("Reset w and b")
        self.randomize_button = QPushButton("Randomize")
        self.randomize_button.setVisible(variant.allow_randomize)

        buttons_layout = QGridLayout()
        buttons_layout.addWidget(self.step_button, 0, 0)
        buttons_layout.addWidget(self.auto_button, 0, 1)
        buttons_layout.addWidget(self.reset_button, 1, 0)
        buttons_layout.addWidget(self.randomize_button, 1, 1)

        self.observation_label = QLabel()
        self.observation_label.setStyleSheet("font-size: 16px;")
        self.observation_label.setTextFormat(Qt.TextFormat.RichText)

        self.walkthrough_label = QLabel()
        self.walkthrough_label.setFont(QFont("Courier New", 10))
        self.walkthrough_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)

        controls_layout.addWidget(title_label)
        controls_layout.addWidget(description_label)
        controls_layout.addLayout(form_layout)
        controls_layout.addLayout(buttons_layout)
        controls_layout.addWidget(self.observation_label)
        controls_layout.addWidget(QLabel("<b>Show Your Work</b>"))
        controls_layout.addWidget(self.walkthrough_label)
        controls_layout.addStretch(1)

        # --- Plots (right) ---
        plot_panel = QFrame()
        plot_panel.setFrameShape(QFrame.Shape.StyledPanel)
        plot_layout = QGridLayout(plot_panel)
        self.loss_canvas = MplCanvas(self, width=5, height=4)
        self.grad_canvas = MplCanvas(self, width=5, height=4)
        self.response_canvas = MplCanvas(self, width=10, height=4)
        plot_layout.addWidget(self.loss_canvas, 0, 0)
        plot_layout.addWidget(self.grad_canvas, 0, 1)
        plot_layout.addWidget(self.response_canvas, 1, 0, 1, 2)

        main_layout.addWidget(controls_panel, 2)
        main_layout.addWidget(plot_panel, 5)

        central_widget = QWidget()
        central_widget.setLayout(main_layout)
        self.setCentralWidget(central_widget)

        # --- Signals ---
        self.w_slider.valueChanged.connect(lambda v: self.session.set_w(v / W_SCALE))
        self.b_slider.valueChanged.connect(lambda v: self.session.set_b(v / B_SCALE))
        self.x_slider.valueChanged.connect(lambda v: self.session.set_x(v / X_SCALE))
        self.y_true_slider.valueChanged.connect(lambda v: self.session.set_y_true(v / Y_TRUE_SCALE))
        self.lr_slider.valueChanged.connect(lambda v: self.session.set_learning_rate(v / LEARNING_RATE_SCALE))
        self.step_button.clicked.connect(self.session.step)
        self.auto_button.clicked.connect(self.session.toggle_auto_step)
        self.reset_button.clicked.connect(self.session.reset)
        self.randomize_button.clicked.connect(self.session.randomize)
        self.session.changed.connect(self.refresh)
        self.session.auto_step_toggled.connect(self.on_auto_step_toggled)

        self.refresh()
        logger.info("Opened the %s lab.", variant.key)

    def _slider_row(self, slider, value_label):
        row = QHBoxLayout()
        value_label.setMinimumWidth(50)
        row.addWidget(slider)
        row.addWidget(value_label)
        return row

    def refresh(self):
        self.sync_sliders()
        self.update_readout()
        self.draw_loss_plot()
        self.draw_gradient_plot()
        self.draw_response_plot()

    def sync_sliders(self):
        """Move sliders to the session's values without feeding the change back."""
        state, sample = self.session.state, self.session.sample
        pairs = [
            (self.w_slider, self.w_value, state.w, W_SCALE, "{:.2f}"),
            (self.b_slider, self.b_value, state.b, B_SCALE, "{:.2f}"),
            (self.x_slider, self.x_value, sample.x, X_SCALE, "{:.1f}"),
            (self.y_true_slider, self.y_true_value, sample.y_true, Y_TRUE_SCALE, "{:.2f}"),
            (self.lr_slider, self.lr_value, self.session.learning_rate, LEARNING_RATE_SCALE, "{:.3f}"),
        ]
        for slider, label, value, scale, fmt in pairs:
            slider.blockSignals(True)
            slider.setValue(round(value * scale))
            slider.blockSignals(False)
            label.setText(fmt.format(value))

    def update_readout(self):
        obs = self.session.observation
        self.observation_label.setText(
            f"<b>y:</b> {obs.y:.4f} &nbsp; <b>Loss:</b> {obs.loss:.4f}<br>"
            f"<b>∂L/∂w:</b> {obs.dL_dw:.4f} &nbsp; <b>∂L/∂b:</b> {obs.dL_db:.4f}<br>"
            f"<b>Steps taken:</b> {self.session.step_count}"
        )
        self.walkthrough_label.setText("\n".join(derivation_lines(
            self.session.state, self.session.sample, obs, self.session.learning_rate)))

    def on_auto_step_toggled(self, running):
        self.auto_button.setText("Stop Auto-Step" if running else "Start Auto-Step")
        self.step_button.setEnabled(not running)

    # --- Plots ---

    def draw_loss_plot(self):
        curves = self.session.curves()
        obs = self.session.observation
        ax = self.loss_canvas.axes
        ax.clear()
        ax.plot(curves.loss_vs_dw.x, curves.loss_vs_dw.y, color=self.cobber_maroon.name(), label='vary w')
        ax.plot(curves.loss_vs_db.x, curves.loss_vs_db.y, color=self.cobber_gold.name(), label='vary b')
        ax.scatter([0.0], [obs.loss], c='black', zorder=5, label='current')
        ax.set_title("Loss vs. Perturbation")
        ax.set_xlabel("Δ (added to w or b)")
        ax.set_ylabel("Loss")
        ax.grid(True, linestyle='--', alpha=0.6)
        ax.legend(loc='upper right')
        self.loss_canvas.draw()

    def draw_gradient_plot(self):
        curves = self.session.curves()
        obs = self.session.observation
        ax = self.grad_canvas.axes
        ax.clear()
        ax.axhline(0.0, color='grey', linestyle='--', alpha=0.7)
        ax.plot(curves.grad_w_vs_dw.x, curves.grad_w_vs_dw.y, color=self.cobber_maroon.name(), label='∂L/∂w vs Δw')
        ax.plot(curves.grad_b_vs_db.x, curves.grad_b_vs_db.y, color=self.cobber_gold.name(), label='∂L/∂b vs Δb')
        ax.scatter([0.0, 0.0], [obs.dL_dw, obs.dL_db], c='black', zorder=5)
        ax.set_title("Derivative vs. Perturbation")
        ax.set_xlabel("Δ (added to w or b)")
        ax.set_ylabel("Derivative")
        ax.grid(True, linestyle='--', alpha=0.6)
        ax.legend(loc='upper right')
        self.grad_canvas.draw()

    def draw_response_plot(self):
        curves = self.session.curves()
        state = self.session.state
        ax = self.response_canvas.axes
        ax.clear()
        ax.plot(curves.response.x, curves.response.y, 'r--', label=f'Neuron (w={state.w:.2f}, b={state.b:.2f})')
        ax.scatter(*curves.target, s=120, marker='*', c='green', zorder=5, label='Target y_true')
        ax.scatter(*curves.prediction, s=60, c=self.cobber_maroon.name(), zorder=6, label='Prediction y')
        ax.set_title("Neuron Output vs. Input")
        ax.set_xlabel("x")
        ax.set_ylabel("y = σ(w·x + b)")
        ax.set_ylim(-0.05, 1.05)
        ax.grid(True, linestyle='--', alpha=0.6)
        ax.legend(loc='lower right')
        self.response_canvas.draw()

    def closeEvent(self, event):
        self.session.stop_auto_step()
        super().closeEvent(event)


# --- Standalone Execution Guard ---
if __name__ == "__main__":
    from labs.logging_config import setup_logging

    setup_logging()
    app = QApplication(sys.argv)
    variant_key = sys.argv[1] if len(sys.argv) > 1 else FIXED_EXAMPLE.key
    window = CobberSigmoidApp(LAB_VARIANTS.get(variant_key, FIXED_EXAMPLE))
    window.show()
    sys.exit(app.exec())
