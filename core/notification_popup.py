"""
Scheduled message popup presented in the bottom-right corner.
"""

from __future__ import annotations

from PySide6.QtCore import QPoint, Qt, Signal
from PySide6.QtGui import QColor, QKeyEvent
from PySide6.QtWidgets import (
    QApplication,
    QGraphicsDropShadowEffect,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from activity_hud import logger as app_logger
from core.surfaces import Surface
from shared.schedule import ScheduleItem

_LOGGER = app_logger.get_logger()

POPUP_WIDTH = 350
POPUP_HEIGHT = 150
SCREEN_MARGIN = 20
FONT_NAME = "Segoe UI"

# (background, foreground, button background, button foreground)
_ALERT_PALETTE = ("#ffff00", "#000000", "#000000", "#ffff00")
_SUCCESS_PALETTE = ("rgb(0, 200, 0)", "#ffffff", "rgb(0, 120, 215)", "#ffffff")


class ScheduledMessagePopup(QWidget):
    confirmed = Signal()

    def __init__(self, item: ScheduleItem, parent: QWidget | None = None) -> None:
        flags = Qt.WindowType.Tool | Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint
        super().__init__(parent)
        self.setWindowFlags(flags)
        self.setObjectName("ScheduledMessagePopup")
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose, True)
        self.setFixedSize(POPUP_WIDTH, POPUP_HEIGHT)

        background, foreground, button_bg, button_fg = (
            _ALERT_PALETTE if item.kind.is_alert_style else _SUCCESS_PALETTE
        )

        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(24)
        shadow.setColor(QColor(0, 0, 0, 140))
        shadow.setOffset(0, 10)
        self.setGraphicsEffect(shadow)

        self._message_label = QLabel(item.label)
        self._message_label.setWordWrap(True)
        self._message_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._message_label.setObjectName("ScheduledMessageText")

        self._confirm_button = QPushButton("OK")
        self._confirm_button.setFixedSize(100, 35)
        self._confirm_button.setCursor(Qt.CursorShape.PointingHandCursor)

        button_row = QHBoxLayout()
        button_row.addStretch()
        button_row.addWidget(self._confirm_button)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(15, 15, 15, 15)
        layout.setSpacing(10)
        layout.addWidget(self._message_label, 1)
        layout.addLayout(button_row)

        self.setStyleSheet(
            f"""
            QWidget#ScheduledMessagePopup {{
                background-color: {background};
            }}
            QLabel#ScheduledMessageText {{
                color: {foreground};
                font-family: "{FONT_NAME}";
                font-size: 12pt;
                font-weight: bold;
            }}
            QPushButton {{
                background-color: {button_bg};
                color: {button_fg};
                border: none;
                font-family: "{FONT_NAME}";
                font-size: 10pt;
                font-weight: bold;
            }}
            """
        )
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)

        self._confirm_button.clicked.connect(self._confirm)  # type: ignore[arg-type]

    def present(self) -> None:
        self._position_bottom_right()
        self.show()
        self.raise_()

    def _position_bottom_right(self) -> None:
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        geometry = screen.availableGeometry()
        x = geometry.right() - self.width() - SCREEN_MARGIN
        y = geometry.bottom() - self.height() - SCREEN_MARGIN
        self.move(QPoint(x, y))

    def _confirm(self) -> None:
        self.confirmed.emit()
        self.close()

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        if event.key() == Qt.Key.Key_Escape:
            self._confirm()
            return
        super().keyPressEvent(event)


class ScheduledMessageSurface(Surface):
    def create(self, params: ScheduleItem) -> ScheduledMessagePopup:
        popup = ScheduledMessagePopup(params)
        popup.confirmed.connect(lambda: _LOGGER.info("Scheduled message confirmed"))
        popup.present()
        return popup

    def destroy(self, handle: ScheduledMessagePopup) -> None:
        try:
            handle.close()
        except RuntimeError:
            # Already deleted after the user confirmed it.
            pass
