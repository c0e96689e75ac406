"""PyQt5 user interface for QRCode Helper."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt5.QtCore import QMimeData, Qt
from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from .config import AppConfig, StyleConfig
from .engine import SyncEngine
from .events import SaveRequested, SizeChanged, TextChanged
from .icon import create_icon
from .qr import QRCodeManager
from .qtimage import from_qimage, to_qpixmap
from .raster import RasterImage
from .sources import DataOffer, InputSourceAdapter
from .storage import suggested_filename, with_default_suffix

logger = logging.getLogger(__name__)


def offer_from_mime(mime: Optional[QMimeData]) -> DataOffer:  # pragma: no cover - requires Qt
    """Collect the bitmap, local files and text a ``QMimeData`` carries."""

    if mime is None:
        return DataOffer()

    bitmap: Optional[RasterImage] = None
    if mime.hasImage():
        qimage = mime.imageData()
        if qimage is not None and not qimage.isNull():
            bitmap = from_qimage(qimage)

    files = tuple(
        Path(url.toLocalFile()) for url in mime.urls() if url.isLocalFile()
    ) if mime.hasUrls() else ()

    text = mime.text() if mime.hasText() else None
    return DataOffer(bitmap=bitmap, files=files, text=text)


class MainWindow(QWidget):  # pragma: no cover - requires Qt event loop
    """Text field, size field and preview wired to a :class:`SyncEngine`."""

    def __init__(self, app: "QRCodeHelperApp", config: AppConfig, style: StyleConfig):
        super().__init__()
        self._app = app
        self._config = config
        self._style = style

        self._setup_ui()

        self._engine = SyncEngine(self, config)
        self._sources = InputSourceAdapter(self._engine.dispatch, config)
        self.setAcceptDrops(True)

    def _setup_ui(self) -> None:
        layout = QHBoxLayout(self)

        editor = QWidget()
        editor.setObjectName("CentralPanel")
        editor_layout = QVBoxLayout(editor)

        self._text_input = QPlainTextEdit()
        self._text_input.setPlaceholderText("Type text to encode, or load / paste / drop a QR image...")
        self._text_input.setFont(QFont(self._style.font_mono, 11))
        self._text_input.textChanged.connect(self._on_text_changed)

        size_row = QHBoxLayout()
        size_label = QLabel("Size:")
        size_label.setObjectName("SubtleLabel")
        self._size_input = QLineEdit(str(self._config.default_size))
        self._size_input.setMaximumWidth(120)
        self._size_input.textChanged.connect(self._on_size_changed)
        size_row.addWidget(size_label)
        size_row.addWidget(self._size_input)
        size_row.addStretch()

        load_btn = QPushButton("Load")
        load_btn.clicked.connect(self._load_file)
        paste_btn = QPushButton("Paste")
        paste_btn.clicked.connect(self._paste)
        save_btn = QPushButton("Save")
        save_btn.setObjectName("AccentButton")
        save_btn.clicked.connect(self._save)

        button_row = QHBoxLayout()
        button_row.addWidget(load_btn)
        button_row.addWidget(paste_btn)
        button_row.addWidget(save_btn)

        editor_layout.addWidget(self._text_input)
        editor_layout.addLayout(size_row)
        editor_layout.addLayout(button_row)

        self._preview = QLabel("QR code will appear here")
        self._preview.setObjectName("qrDisplayLabel")
        self._preview.setAlignment(Qt.AlignCenter)
        self._preview.setMinimumSize(self._style.preview_min_size, self._style.preview_min_size)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._preview)

        layout.addWidget(editor, 1)
        layout.addWidget(scroll, 1)

    # -- SyncView --------------------------------------------------------

    def display_image(self, image: RasterImage) -> None:
        pixmap = to_qpixmap(image)
        target = self._preview.size()
        if pixmap.width() > target.width() or pixmap.height() > target.height():
            pixmap = pixmap.scaled(target, Qt.KeepAspectRatio, Qt.SmoothTransformation)
        self._preview.setPixmap(pixmap)

    def display_text(self, text: str) -> None:
        # Programmatic updates must not come back as user edits.
        self._text_input.blockSignals(True)
        try:
            self._text_input.setPlainText(text)
        finally:
            self._text_input.blockSignals(False)

    def clear_display(self) -> None:
        self._preview.clear()
        self._preview.setText("QR code will appear here")

    def show_error(self, message: str) -> None:
        QMessageBox.warning(self, self._config.app_name, message)

    def show_status(self, message: str) -> None:
        self._app.statusBar().showMessage(message, 5_000)

    # -- user events -----------------------------------------------------

    def _on_text_changed(self) -> None:
        self._engine.dispatch(TextChanged(self._text_input.toPlainText()))

    def _on_size_changed(self, text: str) -> None:
        self._engine.dispatch(SizeChanged(text))

    def _save(self) -> None:
        path, selected = QFileDialog.getSaveFileName(
            self,
            "Save QR Code",
            suggested_filename(self._config),
            self._style.save_filter,
        )
        if not path:
            return
        self._engine.dispatch(SaveRequested(with_default_suffix(path, selected)))

    def _load_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open", "", self._style.open_filter)
        if not path:
            return
        self._sources.open_file(path)

    def _paste(self) -> None:
        self._sources.paste(offer_from_mime(QApplication.clipboard().mimeData()))

    def dragEnterEvent(self, event) -> None:  # type: ignore[override]
        event.acceptProposedAction()

    def dragMoveEvent(self, event) -> None:  # type: ignore[override]
        event.acceptProposedAction()

    def dropEvent(self, event) -> None:  # type: ignore[override]
        event.acceptProposedAction()
        self._sources.drop(offer_from_mime(event.mimeData()))


class QRCodeHelperApp(QMainWindow):  # pragma: no cover - requires Qt event loop
    def __init__(self) -> None:
        super().__init__()

        self._config = AppConfig()
        self._style = StyleConfig()
        self._setup_ui()

    def _setup_ui(self) -> None:
        self.setWindowTitle(f"{self._config.app_name} v{self._config.app_version}")
        self.setGeometry(100, 100, 850, 480)
        self.setMinimumSize(700, 420)

        try:
            self.setWindowIcon(create_icon(self._config))
        except RuntimeError as exc:
            logger.warning("Window icon unavailable: %s", exc)

        self._apply_stylesheet()

        self._main_window = MainWindow(self, self._config, self._style)
        self.setCentralWidget(self._main_window)
        status = self.statusBar()
        if not QRCodeManager(self._config).is_available():
            status.showMessage("Install 'segno' for QR support: pip install segno")

        self.show()

    def _apply_stylesheet(self) -> None:
        style = self._style
        self.setStyleSheet(
            f"""
            QMainWindow {{ background: {style.bg_primary}; }}
            QWidget {{ color: {style.fg_primary}; font-family: {style.font_family}; font-size: {style.font_size}px; }}
            QLineEdit, QPlainTextEdit {{ background: {style.bg_primary}; color: {style.fg_secondary}; border: 1px solid {style.border}; border-radius: 4px; padding: 8px; }}
            QLineEdit:focus, QPlainTextEdit:focus {{ border: 1px solid {style.accent_primary}; }}
            QPushButton {{ background: {style.accent_secondary}; color: {style.fg_secondary}; border: none; padding: 10px 16px; border-radius: 4px; font-weight: bold; }}
            QPushButton#AccentButton {{ background: {style.accent_primary}; color: {style.bg_primary}; }}
            QPushButton:hover {{ background: #81A1C1; }}
            QScrollArea {{ border: none; }}
            #SubtleLabel {{ color: #81A1C1; }}
            #CentralPanel {{ background: {style.bg_secondary}; border-radius: 8px; padding: 12px; }}
            #qrDisplayLabel {{ border: 2px dashed {style.border}; background: white; color: {style.bg_primary}; border-radius: 4px; }}
            """
        )


def run() -> int:  # pragma: no cover - requires Qt event loop
    config = AppConfig()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication.instance() or QApplication([])
    app.setApplicationName(config.app_name)
    window = QRCodeHelperApp()
    return app.exec_()


__all__ = ["run", "QRCodeHelperApp", "offer_from_mime"]
