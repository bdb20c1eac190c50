# CobberBackprop.py
# Main launcher for the sigmoid-neuron backpropagation labs.

import logging
import os
import sys

from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QHBoxLayout, QVBoxLayout,
    QTreeWidget, QTreeWidgetItem, QLabel, QSplitter, QMessageBox
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont, QPixmap, QColor, QIcon

from labs.CobberSigmoid import CobberSigmoidApp
from labs.logging_config import setup_logging
from labs.sigmoid_core.settings import FIXED_EXAMPLE, EXPLORER

logger = logging.getLogger("labs.launcher")

LABS_DATA = [
    {
        "part": "Part I: One Neuron", "chapter": 1,
        "title": "Forward and Backward: One Neuron, One Example",
        "program_name": "CobberSigmoid", "variant": FIXED_EXAMPLE
    },
    {
        "part": "Part I: One Neuron", "chapter": 2,
        "title": "Exploring Inputs, Targets and Learning Rates",
        "program_name": "CobberSigmoid Explorer", "variant": EXPLORER
    },
]


def resource_dir():
    """Folder holding the icons, for both the frozen build and a source checkout."""
    if getattr(sys, 'frozen', False):
        return os.path.dirname(sys.executable)
    return os.path.dirname(os.path.abspath(__file__))


class CobberBackprop(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("CobberBackprop: Watching a Neuron Learn")
        self.setGeometry(100, 100, 1000, 700)
        self.lab_windows = []
        self.cobber_maroon = QColor(108, 29, 69)
        self.cobber_gold = QColor(234, 170, 0)
        self.lato_font = QFont("Lato")

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QHBoxLayout(central_widget)
        splitter = QSplitter(Qt.Orientation.Horizontal)

        # --- Left Pane: Lab Navigator ---
        self.navigator_tree = QTreeWidget()
        self.navigator_tree.setHeaderLabel("Labs")
        self.populate_navigator()
        splitter.addWidget(self.navigator_tree)
        self.navigator_tree.setStyleSheet(f"""
            QTreeWidget {{ font-size: 11pt; }} QHeaderView::section {{
                background-color: {self.cobber_maroon.name()}; color: white; padding: 4px;
                font-size: 12pt; font-weight: bold; border: 1px solid #6C1D45;
            }} QTreeWidget::item {{ padding: 5px; }}
        """)

        # --- Right Pane: Welcome Page ---
        welcome_page = QWidget()
        welcome_layout = QVBoxLayout(welcome_page)
        welcome_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        icon_pixmap = QPixmap(os.path.join(resource_dir(), "ProgramIcon.png"))
        welcome_icon_label = QLabel()
        welcome_icon_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        if not icon_pixmap.isNull():
            welcome_icon_label.setPixmap(icon_pixmap.scaledToHeight(256, Qt.TransformationMode.SmoothTransformation))

        welcome_title = QLabel("Welcome to CobberBackprop!")
        w_title_font = QFont(self.lato_font)
        w_title_font.setPointSize(22)
        w_title_font.setBold(True)
        welcome_title.setFont(w_title_font)
        welcome_title.setStyleSheet(f"color: {self.cobber_maroon.name()};")

        welcome_subtitle = QLabel("Double-click a lab from the navigator to launch.")
        w_subtitle_font = QFont(self.lato_font)
        w_subtitle_font.setPointSize(14)
        w_subtitle_font.setItalic(True)
        welcome_subtitle.setFont(w_subtitle_font)

        welcome_layout.addWidget(welcome_icon_label)
        welcome_layout.addSpacing(20)
        welcome_layout.addWidget(welcome_title)
        welcome_layout.addWidget(welcome_subtitle)
        splitter.addWidget(welcome_page)

        splitter.setSizes([400, 600])
        main_layout.addWidget(splitter)

        self.navigator_tree.itemActivated.connect(self.launch_lab)

    def populate_navigator(self):
        self.navigator_tree.clear()
        parts = {}
        part_font = QFont(self.lato_font)
        part_font.setPointSize(11)
        part_font.setBold(True)
        chapter_font = QFont(self.lato_font)
        chapter_font.setPointSize(10)
        for lab in LABS_DATA:
            part_name = lab["part"]
            if part_name not in parts:
                parts[part_name] = QTreeWidgetItem(self.navigator_tree, [part_name])
                parts[part_name].setFont(0, part_font)
            chapter_text = f"Chapter {lab['chapter']}: {lab['title']}"
            child_item = QTreeWidgetItem(parts[part_name], [chapter_text])
            child_item.setData(0, Qt.ItemDataRole.UserRole, lab)
            child_item.setFont(0, chapter_font)
            child_item.setForeground(0, self.cobber_maroon)
        for part_item in parts.values():
            part_item.setExpanded(True)

    def launch_lab(self, item, column):
        """Opens a lab window for the selected chapter."""
        if item is None or item.childCount() > 0:
            return  # part headers are not labs

        lab_data = item.data(0, Qt.ItemDataRole.UserRole)
        if not lab_data:
            return

        try:
            window = CobberSigmoidApp(lab_data["variant"])
        except Exception as e:
            logger.exception("Could not launch %s", lab_data["program_name"])
            QMessageBox.critical(self, "Launch Error", f"Could not launch the lab application.\nError: {e}")
            return

        # keep a reference so each lab window outlives this handler
        self.lab_windows.append(window)
        window.show()
        logger.info("Launched %s", lab_data["program_name"])


def main():
    setup_logging()
    app = QApplication(sys.argv)
    icon_path = os.path.join(resource_dir(), "ProgramIcon.ico")
    if os.path.exists(icon_path):
        app.setWindowIcon(QIcon(icon_path))

    window = CobberBackprop()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
