"""PySide6 main window and Qt implementations of the workbench surfaces."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable
from pathlib import Path

from codebench.config import AppConfig
from codebench.errors import CodebenchError, ErrorKind, ExitCode, user_facing_error
from codebench.languages import Language
from codebench.preview import SANDBOX_PERMISSIONS
from codebench.terminal import KeyEvent, TerminalOptions
from codebench.terminal.models import FIT_ADDON
from codebench.themes import EditorThemeDefinition, ThemeName, register_editor_themes, theme_profile
from codebench.ui.state import AppState
from codebench.ui.workbench import Workbench, WorkbenchServices, engine_from_config

logger = py_logging.getLogger(__name__)


def _stylesheet(theme: ThemeName) -> str:
    chrome = theme_profile(theme).chrome
    return (
        f"QMainWindow, QWidget {{ background: {chrome['window_bg']}; color: {chrome['window_fg']}; }}"
        f"QListWidget, QFrame#panel {{ background: {chrome['panel_bg']}; border: 1px solid {chrome['border']}; }}"
        f"QListWidget::item:selected {{ background: {chrome['accent']}; color: #ffffff; }}"
        f"QToolButton:hover, QPushButton:hover {{ background: {chrome['hover']}; }}"
        f"QPushButton#runButton {{ background: {chrome['accent']}; color: #ffffff; padding: 4px 12px; }}"
        f"QLabel#placeholder {{ color: {chrome['muted_fg']}; }}"
    )


def launch_main_window(
    *,
    config: AppConfig,
    state: AppState,
    config_path: str | Path | None = None,
) -> int:
    try:
        from PySide6.QtCore import QEvent, QObject, Qt, QTimer
        from PySide6.QtGui import QFontDatabase, QKeyEvent, QTextCursor
        from PySide6.QtWidgets import (
            QApplication,
            QCheckBox,
            QComboBox,
            QFrame,
            QHBoxLayout,
            QInputDialog,
            QLabel,
            QListWidget,
            QMainWindow,
            QMessageBox,
            QPlainTextEdit,
            QPushButton,
            QSizePolicy,
            QSplitter,
            QStackedWidget,
            QTextBrowser,
            QToolBar,
            QVBoxLayout,
            QWidget,
        )
    except ImportError as exc:
        raise CodebenchError(
            "PySide6 is not installed; the workbench window cannot open.",
            code=ExitCode.UI_UNAVAILABLE,
            hint="Run `pip install PySide6` and try again.",
        ) from exc

    from codebench.ui.app import persist_preferences

    class QtHandle:  # pragma: no cover
        def __init__(self, timer: QTimer) -> None:
            self._timer = timer
            self._done = False
            timer.timeout.connect(self._mark_done)

        def _mark_done(self) -> None:
            self._done = True
            self._timer.deleteLater()

        def cancel(self) -> None:
            if not self._done:
                self._timer.stop()
                self._done = True
                self._timer.deleteLater()

        @property
        def active(self) -> bool:
            return not self._done

    class QtScheduler:  # pragma: no cover
        def __init__(self, parent: QObject) -> None:
            self._parent = parent

        def _start(self, delay_ms: int, callback: Callable[[], None]) -> QtHandle:
            timer = QTimer(self._parent)
            timer.setSingleShot(True)
            handle = QtHandle(timer)
            timer.timeout.connect(callback)
            timer.start(delay_ms)
            return handle

        def call_later(self, delay: float, callback: Callable[[], None]) -> QtHandle:
            return self._start(max(0, int(delay * 1000)), callback)

        def call_next_frame(self, callback: Callable[[], None]) -> QtHandle:
            # Zero-delay timers run after pending paint/resize events.
            return self._start(0, callback)

    class QtNoopAddon:  # pragma: no cover
        def dispose(self) -> None:
            return None

    class QtFitAddon:  # pragma: no cover
        def __init__(self, view: QPlainTextEdit) -> None:
            self._view: QPlainTextEdit | None = view
            self.columns = 0
            self.rows = 0

        def fit(self) -> None:
            view = self._view
            if view is None:
                raise RuntimeError("terminal view is detached")
            viewport = view.viewport().size()
            metrics = view.fontMetrics()
            char_width = metrics.horizontalAdvance("W")
            line_height = metrics.lineSpacing()
            if viewport.width() <= 0 or viewport.height() <= 0 or char_width <= 0 or line_height <= 0:
                raise ValueError(f"Invalid terminal geometry: {viewport.width()}x{viewport.height()}")
            self.columns = viewport.width() // char_width
            self.rows = viewport.height() // line_height

        def dispose(self) -> None:
            self._view = None

    class TerminalView(QPlainTextEdit):  # pragma: no cover
        def __init__(self, options: TerminalOptions) -> None:
            super().__init__()
            self.setObjectName("terminalConsole")
            self.setLineWrapMode(QPlainTextEdit.LineWrapMode.WidgetWidth)
            self.setUndoRedoEnabled(False)
            self.setReadOnly(False)
            self.setFont(QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont))
            self.setStyleSheet(
                f"QPlainTextEdit {{ background: {options.background}; color: {options.foreground}; border: none; }}"
            )
            self.setCursorWidth(2)
            self._handlers: list[Callable[[KeyEvent], None]] = []
            self._blink_visible = True
            self._blink_timer: QTimer | None = None
            if options.cursor_blink:
                self._blink_timer = QTimer(self)
                self._blink_timer.timeout.connect(self._blink)
                self._blink_timer.start(530)

        def _blink(self) -> None:
            self._blink_visible = not self._blink_visible
            self.setCursorWidth(2 if self._blink_visible else 0)

        def add_key_handler(self, handler: Callable[[KeyEvent], None]) -> Callable[[], None]:
            self._handlers.append(handler)

            def unsubscribe() -> None:
                if handler in self._handlers:
                    self._handlers.remove(handler)

            return unsubscribe

        def keyPressEvent(self, event: QKeyEvent) -> None:  # type: ignore[override]
            modifiers = event.modifiers()
            key = event.key()
            is_enter = key in (Qt.Key.Key_Return, Qt.Key.Key_Enter)
            text = "\r" if is_enter else event.text()
            if not text:
                return
            translated = KeyEvent(
                key=text,
                key_code=13 if is_enter else 0,
                alt=bool(modifiers & Qt.KeyboardModifier.AltModifier),
                ctrl=bool(modifiers & Qt.KeyboardModifier.ControlModifier),
                meta=bool(modifiers & Qt.KeyboardModifier.MetaModifier),
            )
            for handler in list(self._handlers):
                handler(translated)

        def append_text(self, text: str) -> None:
            cursor = self.textCursor()
            cursor.movePosition(QTextCursor.MoveOperation.End)
            cursor.insertText(text)
            self.setTextCursor(cursor)
            self.ensureCursorVisible()

        def stop_blinking(self) -> None:
            if self._blink_timer is not None:
                self._blink_timer.stop()
                self._blink_timer = None

    class QtTerminalSurface:  # pragma: no cover
        def __init__(self, options: TerminalOptions) -> None:
            self.options = options
            self.view = TerminalView(options)

        def load_addon(self, name: str) -> QtFitAddon | QtNoopAddon:
            if name == FIT_ADDON:
                return QtFitAddon(self.view)
            return QtNoopAddon()

        def open(self, host: object) -> None:
            if not isinstance(host, QWidget) or host.layout() is None:
                raise RuntimeError("terminal host has no layout")
            host.layout().addWidget(self.view)

        def write(self, text: str) -> None:
            if self.options.convert_eol:
                text = text.replace("\r\n", "\n").replace("\r", "\n")
            self.view.append_text(text)

        def write_line(self, text: str) -> None:
            self.write(text + "\r\n")

        def on_key(self, handler: Callable[[KeyEvent], None]) -> Callable[[], None]:
            return self.view.add_key_handler(handler)

        def dispose(self) -> None:
            self.view.stop_blinking()
            self.view.setParent(None)
            self.view.deleteLater()

    class _ResizeFilter(QObject):  # pragma: no cover
        def __init__(self, callback: Callable[[], None]) -> None:
            super().__init__()
            self._callback = callback
            self.host: QWidget | None = None

        def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # type: ignore[override]
            if watched is self.host and event.type() == QEvent.Type.Resize:
                self._callback()
            return False

    class QtSizeObserver:  # pragma: no cover
        def __init__(self, callback: Callable[[], None]) -> None:
            self._filter = _ResizeFilter(callback)

        def observe(self, host: object) -> None:
            if isinstance(host, QWidget):
                self._filter.host = host
                host.installEventFilter(self._filter)

        def disconnect(self) -> None:
            host = self._filter.host
            if host is not None:
                host.removeEventFilter(self._filter)
                self._filter.host = None

    class QtPreviewSurface:  # pragma: no cover
        """Isolated rendering frame: scripts on, storage and navigation off."""

        def __init__(self) -> None:
            self.widget: QWidget
            self._web = False
            try:
                from PySide6.QtCore import QUrl
                from PySide6.QtWebEngineCore import QWebEnginePage, QWebEngineProfile, QWebEngineSettings
                from PySide6.QtWebEngineWidgets import QWebEngineView
            except ImportError:
                logger.warning("QtWebEngine unavailable; preview scripts will not run.")
                self.widget = QTextBrowser()
                self.widget.setOpenLinks(False)
                return
            profile = QWebEngineProfile(self._owner())
            settings = profile.settings()
            allow_scripts = "allow-scripts" in SANDBOX_PERMISSIONS
            settings.setAttribute(QWebEngineSettings.WebAttribute.JavascriptEnabled, allow_scripts)
            settings.setAttribute(QWebEngineSettings.WebAttribute.LocalStorageEnabled, False)
            settings.setAttribute(QWebEngineSettings.WebAttribute.JavascriptCanOpenWindows, False)
            settings.setAttribute(QWebEngineSettings.WebAttribute.LocalContentCanAccessRemoteUrls, False)
            settings.setAttribute(QWebEngineSettings.WebAttribute.LocalContentCanAccessFileUrls, False)
            view = QWebEngineView()
            view.setPage(QWebEnginePage(profile, view))
            self._base_url = QUrl("about:blank")
            self.widget = view
            self._web = True

        def _owner(self) -> QObject:
            app = QApplication.instance()
            assert app is not None
            return app

        def is_attached(self) -> bool:
            return self.widget.isVisible()

        def write_document(self, html: str) -> None:
            if self._web:
                self.widget.setHtml(html, self._base_url)
            else:
                self.widget.setHtml(html)

    class QtEditorSurface(QPlainTextEdit):  # pragma: no cover
        def __init__(self, on_change: Callable[[str], None]) -> None:
            super().__init__()
            self._on_change = on_change
            self._themes: dict[str, EditorThemeDefinition] = {}
            self._loading = False
            self.language = Language.PLAINTEXT
            self.setFont(QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont))
            self.textChanged.connect(self._emit_change)

        def define_theme(self, name: str, definition: EditorThemeDefinition) -> None:
            self._themes[name] = definition

        def apply_options(self, config: AppConfig) -> None:
            font = self.font()
            font.setPointSize(config.editor_font_size)
            self.setFont(font)
            mode = QPlainTextEdit.LineWrapMode.WidgetWidth if config.word_wrap else QPlainTextEdit.LineWrapMode.NoWrap
            self.setLineWrapMode(mode)

        def set_document(self, content: str, language: Language, theme: str) -> None:
            self.language = language
            definition = self._themes.get(theme)
            if definition is not None:
                background = definition["colors"].get("editor.background", "")
                foreground = "#ffffff" if definition["base"] == "vs-dark" else "#000000"
                self.setStyleSheet(f"QPlainTextEdit {{ background: {background}; color: {foreground}; }}")
            if self.toPlainText() != content:
                self._loading = True
                try:
                    self.setPlainText(content)
                finally:
                    self._loading = False

        def _emit_change(self) -> None:
            if not self._loading:
                self._on_change(self.toPlainText())

    class WorkbenchWindow(QMainWindow):  # pragma: no cover
        def __init__(self) -> None:
            super().__init__()
            self.setWindowTitle("Codebench")
            self.resize(1200, 760)

            services = WorkbenchServices(
                scheduler=QtScheduler(self),
                terminal_factory=QtTerminalSurface,
                observer_factory=QtSizeObserver,
                engine=engine_from_config(config),
            )
            self.workbench = Workbench(
                state,
                services,
                preview_debounce_seconds=config.preview_debounce_seconds,
            )

            toolbar = QToolBar("Main", self)
            toolbar.setMovable(False)
            self.addToolBar(toolbar)
            toolbar.addAction("New File", self._new_file)
            self.theme_action = toolbar.addAction("", self._toggle_theme)
            toolbar.addAction("Terminal", self._toggle_terminal)
            toolbar.addAction("Preview", self._toggle_preview)
            toolbar.addAction("Settings", self._toggle_settings)
            spacer = QWidget()
            spacer.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
            toolbar.addWidget(spacer)
            run_button = QPushButton("Run")
            run_button.setObjectName("runButton")
            run_button.clicked.connect(self._run)
            toolbar.addWidget(run_button)

            root = QWidget(self)
            self.setCentralWidget(root)
            outer = QHBoxLayout(root)
            outer.setContentsMargins(0, 0, 0, 0)

            sidebar = QFrame()
            sidebar.setObjectName("panel")
            sidebar.setFixedWidth(240)
            sidebar_layout = QVBoxLayout(sidebar)
            header = QHBoxLayout()
            header.addWidget(QLabel("<b>Explorer</b>"))
            add_button = QPushButton("+")
            add_button.setFixedWidth(28)
            add_button.clicked.connect(self._new_file)
            header.addWidget(add_button)
            sidebar_layout.addLayout(header)
            self.file_list = QListWidget()
            self.file_list.currentTextChanged.connect(self._select_file)
            sidebar_layout.addWidget(self.file_list)
            outer.addWidget(sidebar)

            main_column = QVBoxLayout()
            self.editor_split = QSplitter(Qt.Orientation.Horizontal)
            self.editor_stack = QStackedWidget()
            placeholder = QLabel("Select or create a file to start coding")
            placeholder.setObjectName("placeholder")
            placeholder.setAlignment(Qt.AlignmentFlag.AlignCenter)
            self.editor = QtEditorSurface(self.workbench.edit)
            self.editor.apply_options(config)
            register_editor_themes(self.editor)
            self.editor_stack.addWidget(placeholder)
            self.editor_stack.addWidget(self.editor)
            self.editor_split.addWidget(self.editor_stack)

            self.preview_panel = QFrame()
            preview_layout = QVBoxLayout(self.preview_panel)
            preview_layout.setContentsMargins(0, 0, 0, 0)
            preview_layout.addWidget(QLabel("Preview"))
            self.preview_surface = QtPreviewSurface()
            preview_layout.addWidget(self.preview_surface.widget)
            self.editor_split.addWidget(self.preview_panel)
            main_column.addWidget(self.editor_split, 2)

            self.terminal_panel = QFrame()
            self.terminal_panel.setObjectName("panel")
            terminal_layout = QVBoxLayout(self.terminal_panel)
            terminal_header = QHBoxLayout()
            terminal_header.addWidget(QLabel("<b>Terminal</b>"))
            close_terminal = QPushButton("×")
            close_terminal.setFixedWidth(28)
            close_terminal.clicked.connect(lambda: self._set_terminal(False))
            terminal_header.addWidget(close_terminal)
            terminal_layout.addLayout(terminal_header)
            self.terminal_host = QWidget()
            host_layout = QVBoxLayout(self.terminal_host)
            host_layout.setContentsMargins(0, 0, 0, 0)
            terminal_layout.addWidget(self.terminal_host)
            main_column.addWidget(self.terminal_panel, 1)
            outer.addLayout(main_column, 1)

            self.settings_panel = QFrame()
            self.settings_panel.setObjectName("panel")
            self.settings_panel.setFixedWidth(300)
            settings_layout = QVBoxLayout(self.settings_panel)
            settings_layout.addWidget(QLabel("<b>Settings</b>"))
            settings_layout.addWidget(QLabel("Editor"))
            self.auto_save_box = QCheckBox("Auto Save")
            self.auto_save_box.setChecked(state.auto_save)
            self.auto_save_box.toggled.connect(self.workbench.set_auto_save)
            settings_layout.addWidget(self.auto_save_box)
            settings_layout.addWidget(QLabel("Theme"))
            self.theme_combo = QComboBox()
            self.theme_combo.addItem("Light", ThemeName.LIGHT.value)
            self.theme_combo.addItem("Dark", ThemeName.DARK.value)
            self.theme_combo.currentIndexChanged.connect(self._theme_from_combo)
            settings_layout.addWidget(self.theme_combo)
            settings_layout.addWidget(QLabel("Extensions"))
            extensions = QPushButton("Browse Extensions")
            extensions.setEnabled(False)
            settings_layout.addWidget(extensions)
            settings_layout.addStretch(1)
            outer.addWidget(self.settings_panel)

            self.workbench.attach_preview_surface(self.preview_surface)
            self._refresh()
            if state.show_terminal:
                QTimer.singleShot(0, lambda: self._set_terminal(True))

        def _refresh(self) -> None:
            current = self.workbench.state
            profile = theme_profile(current.theme)
            self.setStyleSheet(_stylesheet(current.theme))
            self.theme_action.setText("Dark" if current.theme == ThemeName.LIGHT else "Light")
            self.theme_combo.blockSignals(True)
            self.theme_combo.setCurrentIndex(self.theme_combo.findData(current.theme.value))
            self.theme_combo.blockSignals(False)

            names = [item.name for item in current.workspace.files()]
            self.file_list.blockSignals(True)
            self.file_list.clear()
            self.file_list.addItems(names)
            active = current.workspace.active_name
            if active is not None and active in names:
                self.file_list.setCurrentRow(names.index(active))
            self.file_list.blockSignals(False)

            active_file = self.workbench.active_file
            if active_file is None:
                self.editor_stack.setCurrentIndex(0)
            else:
                self.editor_stack.setCurrentIndex(1)
                self.editor.set_document(active_file.content, active_file.language, profile.editor_theme)
            self.preview_panel.setVisible(current.show_preview and active_file is not None)
            self.terminal_panel.setVisible(current.show_terminal)
            self.settings_panel.setVisible(current.show_settings)

        def _report(self, exc: CodebenchError) -> None:
            QMessageBox.warning(self, "Codebench", user_facing_error(exc.message, hint=exc.hint))

        def _new_file(self) -> None:
            name, accepted = QInputDialog.getText(
                self, "Create New File", "Enter file name (e.g., main.js)"
            )
            if not accepted or not name:
                return
            try:
                self.workbench.create_file(name)
            except CodebenchError as exc:
                if exc.kind in (ErrorKind.DUPLICATE_FILE_NAME, ErrorKind.INVALID_FILE_NAME):
                    self._report(exc)
                    return
                raise
            self._refresh()

        def _select_file(self, name: str) -> None:
            if name:
                self.workbench.select_file(name)
                self._refresh()

        def _toggle_theme(self) -> None:
            self.workbench.toggle_theme()
            self._refresh()

        def _theme_from_combo(self, index: int) -> None:
            self.workbench.set_theme(str(self.theme_combo.itemData(index)))
            self._refresh()

        def _toggle_settings(self) -> None:
            self.workbench.toggle_settings()
            self._refresh()

        def _toggle_preview(self) -> None:
            self.workbench.toggle_preview()
            self._refresh()

        def _toggle_terminal(self) -> None:
            self._set_terminal(not self.workbench.state.show_terminal)

        def _set_terminal(self, visible: bool) -> None:
            self.terminal_panel.setVisible(visible)
            try:
                self.workbench.attach_terminal_host(self.terminal_host if visible else None)
                self.workbench.set_terminal_visible(visible)
            except CodebenchError as exc:
                self._report(exc)
            self._refresh()

        def _run(self) -> None:
            if self.workbench.active_file is None:
                return
            if not self.workbench.state.show_terminal:
                self._set_terminal(True)
            self.workbench.run_active()

        def closeEvent(self, event) -> None:  # type: ignore[override]
            self.workbench.attach_terminal_host(None)
            self.workbench.shutdown()
            try:
                persist_preferences(self.workbench.state, config, config_path)
            except OSError as exc:
                logger.warning("Failed to save preferences: %s", exc)
            super().closeEvent(event)

    app = QApplication.instance() or QApplication([])
    window = WorkbenchWindow()
    window.show()
    return int(app.exec())
