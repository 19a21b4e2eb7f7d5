import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from PyQt5.QtCore import QPoint, Qt, QTimer, QUrl, pyqtSignal
from PyQt5.QtGui import QDesktopServices, QImage, QPixmap
from PyQt5.QtWidgets import (
    QApplication,
    QComboBox,
    QDoubleSpinBox,
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from DM_Libs.constants import (
    CLAMP_RANGE,
    INIT_SIZE_RANGE,
    POWER_RANGE,
    SIGMA_RANGE,
    SUPPORTED_STANDARD_IMAGES,
)
from DM_Libs.errors import DeformMapError
from DM_Libs.SessionLib.painter_session import PainterSession, PointerButton
from DM_Libs.SessionLib.painter_settings import PaintMode, PainterSettings
from DM_Libs.SessionLib.settings_store import load_settings, save_settings

logger = logging.getLogger(__name__)

PAINT_INTERVAL_MS = 16


class PaintCanvas(QLabel):
    """Shows the deform map stretched over the widget and reports pointer positions."""

    pointer_moved = pyqtSignal(float, float)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setAlignment(Qt.AlignCenter)
        self.setMinimumSize(512, 512)
        self.setMouseTracking(True)
        self.setStyleSheet("border: 1px solid #888;")
        self.held_button: Optional[PointerButton] = None
        self.last_position: Optional[QPoint] = None

    def normalized(self, position: QPoint):
        # Widget y grows downward, which matches buffer row order
        return position.x() / max(1, self.width()), position.y() / max(1, self.height())

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.LeftButton:
            self.held_button = PointerButton.PRIMARY
        elif event.button() == Qt.RightButton:
            self.held_button = PointerButton.SECONDARY
        self.last_position = event.pos()

    def mouseReleaseEvent(self, event) -> None:
        buttons = event.buttons()
        if buttons & Qt.LeftButton:
            self.held_button = PointerButton.PRIMARY
        elif buttons & Qt.RightButton:
            self.held_button = PointerButton.SECONDARY
        else:
            self.held_button = None

    def mouseMoveEvent(self, event) -> None:
        self.last_position = event.pos()
        u, v = self.normalized(event.pos())
        self.pointer_moved.emit(u, v)

    def leaveEvent(self, event) -> None:
        self.last_position = None
        super().leaveEvent(event)

    def show_rgba(self, data: bytes, width: int, height: int) -> None:
        image = QImage(data, width, height, width * 4, QImage.Format_RGBA8888)
        pixmap = QPixmap.fromImage(image.copy())
        self.setPixmap(
            pixmap.scaled(self.size(), Qt.AspectRatioMode.IgnoreAspectRatio, Qt.TransformationMode.FastTransformation)
        )


class DeformMapPainterWindow(QMainWindow):
    def __init__(self, session: PainterSession, data_dir: Path) -> None:
        super().__init__()
        self.setWindowTitle("Deform Map Painter")
        self.resize(1200, 800)

        self.session = session
        self.data_dir = data_dir

        self._build_ui()
        self._load_settings_into_ui()
        self._connect_signals()

        self.paint_timer = QTimer(self)
        self.paint_timer.setInterval(PAINT_INTERVAL_MS)
        self.paint_timer.timeout.connect(self.on_paint_tick)
        self.paint_timer.start()

        self.refresh_canvas()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        root = QHBoxLayout(central)
        controls_col = QVBoxLayout()

        self.label_status = QLabel("Status : ")
        self.label_status.setWordWrap(True)
        self.label_readout = QLabel("")

        paint_group = QGroupBox("Paint")
        paint_form = QFormLayout(paint_group)
        self.combo_paint_mode = QComboBox()
        for mode in PaintMode:
            self.combo_paint_mode.addItem(mode.value, mode)
        self.spin_power = self._double_spin(POWER_RANGE, 0.01, 3)
        self.spin_sigma = self._double_spin(SIGMA_RANGE, 0.5, 2)
        self.spin_clamp_min = self._double_spin(CLAMP_RANGE, 0.05, 3)
        self.spin_clamp_max = self._double_spin(CLAMP_RANGE, 0.05, 3)
        paint_form.addRow("Paint Mode", self.combo_paint_mode)
        paint_form.addRow("Power", self.spin_power)
        paint_form.addRow("Sigma", self.spin_sigma)
        paint_form.addRow("Clamp Min", self.spin_clamp_min)
        paint_form.addRow("Clamp Max", self.spin_clamp_max)

        init_group = QGroupBox("Initialize")
        init_form = QFormLayout(init_group)
        self.spin_init_width = QSpinBox()
        self.spin_init_height = QSpinBox()
        for spin in (self.spin_init_width, self.spin_init_height):
            spin.setRange(*INIT_SIZE_RANGE)
        self.btn_initialize = QPushButton("Initialize Texture")
        init_form.addRow("Width", self.spin_init_width)
        init_form.addRow("Height", self.spin_init_height)
        init_form.addRow(self.btn_initialize)

        save_load_group = QGroupBox("Save / Load")
        save_load_col = QVBoxLayout(save_load_group)
        self.edit_load_path = QLineEdit()
        self.btn_browse = QPushButton("Browse...")
        self.btn_load = QPushButton("Load")
        self.btn_save = QPushButton("Save")
        save_load_col.addWidget(self.edit_load_path)
        save_load_col.addWidget(self.btn_browse)
        save_load_col.addWidget(self.btn_load)
        save_load_col.addWidget(self.btn_save)

        controls_col.addWidget(self.label_status)
        controls_col.addWidget(paint_group)
        controls_col.addWidget(init_group)
        controls_col.addWidget(save_load_group)
        controls_col.addWidget(self.label_readout)
        controls_col.addStretch(1)

        self.canvas = PaintCanvas()

        root.addLayout(controls_col, stretch=1)
        root.addWidget(self.canvas, stretch=3)

    def _double_spin(self, value_range, step: float, decimals: int) -> QDoubleSpinBox:
        spin = QDoubleSpinBox()
        spin.setRange(*value_range)
        spin.setSingleStep(step)
        spin.setDecimals(decimals)
        return spin

    def _load_settings_into_ui(self) -> None:
        settings = self.session.settings
        self.combo_paint_mode.setCurrentIndex(list(PaintMode).index(settings.paint_mode))
        self.spin_power.setValue(settings.paint_power)
        self.spin_sigma.setValue(settings.paint_sigma)
        self.spin_clamp_min.setValue(settings.paint_clamp[0])
        self.spin_clamp_max.setValue(settings.paint_clamp[1])
        self.spin_init_width.setValue(settings.init_size[0])
        self.spin_init_height.setValue(settings.init_size[1])

    def _connect_signals(self) -> None:
        self.combo_paint_mode.currentIndexChanged.connect(self.on_settings_changed)
        self.spin_power.valueChanged.connect(self.on_settings_changed)
        self.spin_sigma.valueChanged.connect(self.on_settings_changed)
        self.spin_clamp_min.valueChanged.connect(self.on_settings_changed)
        self.spin_clamp_max.valueChanged.connect(self.on_settings_changed)
        self.spin_init_width.valueChanged.connect(self.on_settings_changed)
        self.spin_init_height.valueChanged.connect(self.on_settings_changed)
        self.btn_initialize.clicked.connect(self.initialize_texture)
        self.btn_browse.clicked.connect(self.browse_texture)
        self.btn_load.clicked.connect(self.load_texture)
        self.btn_save.clicked.connect(self.save_texture)
        self.canvas.pointer_moved.connect(self.on_pointer_moved)

    def on_settings_changed(self) -> None:
        settings = self.session.settings
        settings.paint_mode = list(PaintMode)[self.combo_paint_mode.currentIndex()]
        settings.paint_power = self.spin_power.value()
        settings.paint_sigma = self.spin_sigma.value()
        settings.paint_clamp = (self.spin_clamp_min.value(), self.spin_clamp_max.value())
        settings.init_size = (self.spin_init_width.value(), self.spin_init_height.value())

    def on_paint_tick(self) -> None:
        if self.canvas.held_button is None or self.canvas.last_position is None:
            return

        u, v = self.canvas.normalized(self.canvas.last_position)
        try:
            painted = self.session.paint_at(u, v, self.canvas.held_button)
        except DeformMapError as e:
            self.canvas.held_button = None
            self._set_status(f"Paint failed : {e}")
            return

        if painted:
            self.refresh_canvas()
            self.on_pointer_moved(u, v)

    def on_pointer_moved(self, u: float, v: float) -> None:
        readout = self.session.inspect_pixel(u, v)
        self.label_readout.setText(readout.format() if readout else "")

    def initialize_texture(self) -> None:
        try:
            self.session.initialize_texture()
        except DeformMapError as e:
            self._set_status(f"Initialize failed : {e}")
            return
        self.refresh_canvas()

    def browse_texture(self) -> None:
        patterns = " ".join(f"*{ext}" for ext in sorted(SUPPORTED_STANDARD_IMAGES))
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Select Deform Map",
            str(self.session.save_directory),
            f"Images ({patterns})",
        )
        if file_path:
            self.edit_load_path.setText(file_path)

    def load_texture(self) -> None:
        self.session.load_texture(self.edit_load_path.text())
        self._set_status(self.session.status_message)
        self.refresh_canvas()

    def save_texture(self) -> None:
        try:
            path = self.session.save_texture()
        except (OSError, ValueError) as e:
            self._set_status(self.session.status_message)
            QMessageBox.warning(self, "Save Failed", str(e))
            return

        self.edit_load_path.setText(self.session.load_file_path)
        self._set_status(self.session.status_message)
        if not open_save_folder(path):
            logger.warning(f"Could not open folder {path.parent}")

    def refresh_canvas(self) -> None:
        self.canvas.show_rgba(self.session.pixel_bytes(), self.session.width, self.session.height)

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self.refresh_canvas()

    def closeEvent(self, event) -> None:
        try:
            save_settings(self.data_dir, self.session.settings)
        except OSError as e:
            logger.warning(f"Could not save settings: {e}")
        super().closeEvent(event)

    def _set_status(self, message: str) -> None:
        self.label_status.setText(f"Status : {message}")


def open_save_folder(path: Path) -> bool:
    """Show the folder holding a saved texture in the desktop file browser."""
    return QDesktopServices.openUrl(QUrl.fromLocalFile(str(Path(path).parent)))


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Paint Gaussian brush strokes into a deform map texture.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path.cwd(),
        help="Application data directory; textures and settings go in its DeformMaps folder.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level.",
    )
    return parser.parse_args(argv)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(levelname)s: %(name)s: %(message)s",
    )


def main() -> None:
    args = parse_args()
    configure_logging(args.log_level)

    try:
        session = PainterSession(load_settings(args.data_dir), data_dir=args.data_dir)
    except ValueError as e:
        logger.warning(f"Ignoring unreadable settings: {e}")
        session = PainterSession(PainterSettings(), data_dir=args.data_dir)

    app = QApplication(sys.argv)
    window = DeformMapPainterWindow(session, args.data_dir)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
