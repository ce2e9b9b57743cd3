import sys
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QIcon, QColor, QTextCharFormat, QTextCursor, QTextOption
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QTextEdit, QVBoxLayout, QWidget,
    QTableView, QHeaderView, QSplitter, QGroupBox, QDockWidget, QFileDialog, QToolBar,
    QTabWidget
)
from PySide6.QtGui import QStandardItemModel, QStandardItem

from rom16 import common
from rom16 import assembler
from rom16 import architecture as arch
from rom16 import arithmetic as arith
from rom16 import rom
from rom16 import state

class RomModel(QStandardItemModel):
    def __init__(self):
        super().__init__(0, 3)
        self.setHorizontalHeaderLabels(["Address", "Word", "Instruction"])

    def update(self, image, used):
        self.removeRows(0, self.rowCount())
        for a, w in image.words():
            address_item = QStandardItem(f"0x{a:04X}")
            word_item = QStandardItem(arith.word_to_hex4(w))
            text = arch.show_instruction(w, a) if a in used else ""
            instr_item = QStandardItem(text)
            if a in used:
                word_item.setBackground(QColor("#204020"))
            self.appendRow([address_item, word_item, instr_item])

class MainWindow(QMainWindow):
    def __init__(self, file_name=None):
        super().__init__()
        self.setWindowTitle("Rom16 IDE")
        self.setGeometry(100, 100, 1200, 800)

        main_splitter = QSplitter(Qt.Orientation.Horizontal)
        self.setCentralWidget(main_splitter)

        # Left: code editor above the message log
        left_vertical_splitter = QSplitter(Qt.Orientation.Vertical)
        main_splitter.addWidget(left_vertical_splitter)

        self.code_editor = QTextEdit()
        self.code_editor.setWordWrapMode(QTextOption.NoWrap)
        self.code_editor.setAcceptRichText(False)
        self.code_dock = QDockWidget("Code Editor", self)
        self.code_dock.setWidget(self.code_editor)
        left_vertical_splitter.addWidget(self.code_dock)

        log_group = QGroupBox("Messages")
        log_layout = QVBoxLayout(log_group)
        self.msg_log = QTextEdit()
        self.msg_log.setReadOnly(True)
        log_layout.addWidget(self.msg_log)
        left_vertical_splitter.addWidget(log_group)

        left_vertical_splitter.setStretchFactor(0, 3)
        left_vertical_splitter.setStretchFactor(1, 1)

        # Right: listing, symbol table, ROM contents
        self.tabs = QTabWidget()
        main_splitter.addWidget(self.tabs)

        self.listing_view = QTextEdit()
        self.listing_view.setReadOnly(True)
        self.listing_view.setWordWrapMode(QTextOption.NoWrap)
        self.tabs.addTab(self.listing_view, "Listing")

        self.symbol_view = QTextEdit()
        self.symbol_view.setReadOnly(True)
        self.tabs.addTab(self.symbol_view, "Symbols")

        rom_widget = QWidget()
        rom_layout = QVBoxLayout(rom_widget)
        self.rom_view = QTableView()
        self.rom_model = RomModel()
        self.rom_view.setModel(self.rom_model)
        self.rom_view.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeToContents)
        rom_layout.addWidget(self.rom_view)
        self.tabs.addTab(rom_widget, "ROM")

        main_splitter.setStretchFactor(0, 1)
        main_splitter.setStretchFactor(1, 1)

        # Toolbar and menus
        self.toolbar = QToolBar("Main Toolbar")
        self.addToolBar(self.toolbar)

        self.assemble_action = QAction(QIcon.fromTheme("system-run"), "Assemble", self)
        self.assemble_action.triggered.connect(self.assemble_code)
        self.toolbar.addAction(self.assemble_action)

        self.export_action = QAction(QIcon.fromTheme("document-export"), "Export Hex...", self)
        self.export_action.triggered.connect(self.export_hex)
        self.export_action.setEnabled(False)
        self.toolbar.addAction(self.export_action)

        self.trace_action = QAction("Trace", self)
        self.trace_action.setCheckable(True)
        self.trace_action.toggled.connect(self.toggle_trace)
        self.toolbar.addAction(self.trace_action)

        file_menu = self.menuBar().addMenu("&File")
        open_action = QAction(QIcon.fromTheme("document-open"), "Open...", self)
        open_action.triggered.connect(self.open_file)
        file_menu.addAction(open_action)

        save_action = QAction(QIcon.fromTheme("document-save"), "Save", self)
        save_action.triggered.connect(self.save_file)
        file_menu.addAction(save_action)

        save_as_action = QAction(QIcon.fromTheme("document-save-as"), "Save As...", self)
        save_as_action.triggered.connect(self.save_file_as)
        file_menu.addAction(save_as_action)

        file_menu.addAction(self.export_action)

        self.toolbar.addAction(open_action)
        self.toolbar.addAction(save_action)

        self.last_asm_info = None
        self.current_file = None
        if file_name:
            self.load_file(file_name)

    def assemble_code(self):
        self.msg_log.clear()
        self._clear_highlight()
        source_code = self.code_editor.toPlainText()
        try:
            asm_info = assembler.assembler("editor", source_code)
        except common.AsmError as e:
            self.msg_log.append(f"{e.kind}: {e}")
            self.last_asm_info = None
            self.export_action.setEnabled(False)
            if e.line is not None:
                self._highlight_line(e.line)
            return False

        self.last_asm_info = asm_info
        self.listing_view.setPlainText("\n".join(asm_info.listing))
        self.symbol_view.setPlainText("\n".join(state.show_symbol_table(asm_info)))
        used = {s["address"] for s in asm_info.asm_stmt}
        self.rom_model.update(asm_info.rom, used)
        self.export_action.setEnabled(True)
        self.msg_log.append(f"Assembly successful: {len(asm_info.asm_stmt)} instructions, "
                            f"{len(asm_info.symbol_table)} labels")
        return True

    def export_hex(self):
        if not self.last_asm_info:
            return
        file_name, _ = QFileDialog.getSaveFileName(self, "Export Hex Image", ".", "Hex Files (*.hex);;All Files (*)")
        if file_name:
            try:
                rom.write_hex_file(self.last_asm_info.rom, file_name)
                self.msg_log.append(f"Image written: {file_name}")
            except OSError as e:
                self.msg_log.append(f"Error writing image: {e}")

    def toggle_trace(self, checked):
        if checked:
            common.mode.set_trace()
        else:
            common.mode.clear_trace()

    def _highlight_line(self, line):
        format = QTextCharFormat()
        format.setBackground(QColor(Qt.GlobalColor.darkRed))

        cursor = self.code_editor.textCursor()
        cursor.setPosition(0)
        cursor.movePosition(QTextCursor.MoveOperation.Down, QTextCursor.MoveMode.MoveAnchor, line - 1)
        cursor.movePosition(QTextCursor.MoveOperation.StartOfLine, QTextCursor.MoveMode.MoveAnchor)
        cursor.movePosition(QTextCursor.MoveOperation.EndOfLine, QTextCursor.MoveMode.KeepAnchor)
        cursor.mergeCharFormat(format)
        self.code_editor.setTextCursor(cursor)
        self.code_editor.ensureCursorVisible()

    def _clear_highlight(self):
        format = QTextCharFormat()
        format.setBackground(QColor(Qt.GlobalColor.transparent))

        cursor = self.code_editor.textCursor()
        cursor.select(QTextCursor.SelectionType.Document)
        cursor.mergeCharFormat(format)
        cursor.clearSelection()
        self.code_editor.setTextCursor(cursor)

    def load_file(self, file_name):
        try:
            with open(file_name, "r", encoding="latin-1") as f:
                self.code_editor.setPlainText(f.read())
            self.current_file = file_name
            self.setWindowTitle(f"Rom16 IDE - {file_name}")
            self.msg_log.append(f"File loaded: {self.current_file}")
        except OSError as e:
            self.msg_log.append(f"Error opening file: {e}")

    def open_file(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open Assembly File", ".", "Assembly Files (*.asm);;All Files (*)")
        if file_name:
            self.load_file(file_name)

    def save_file(self):
        if self.current_file:
            try:
                with open(self.current_file, "w", encoding="latin-1", errors="replace") as f:
                    f.write(self.code_editor.toPlainText())
                self.msg_log.append(f"File saved: {self.current_file}")
            except OSError as e:
                self.msg_log.append(f"Error saving file: {e}")
        else:
            self.save_file_as()

    def save_file_as(self):
        file_name, _ = QFileDialog.getSaveFileName(self, "Save Assembly File As", ".", "Assembly Files (*.asm);;All Files (*)")
        if file_name:
            self.current_file = file_name
            self.setWindowTitle(f"Rom16 IDE - {file_name}")
            self.save_file()

def start_gui():
    common.mode.trace_from_env()
    app = QApplication(sys.argv)
    app.setStyleSheet("""
    QMainWindow {
        background-color: #1a1a1a;
        color: #e0e0e0;
    }
    QTextEdit {
        background-color: #2a2a2a;
        color: #00ff00;
        border: 1px solid #007acc;
        padding: 5px;
        font-family: "Consolas", "Monaco", "Courier New", monospace;
        font-size: 10pt;
    }
    QTableView {
        background-color: #2a2a2a;
        color: #e0e0e0;
        border: 1px solid #007acc;
        gridline-color: #444444;
        font-family: "Consolas", "Monaco", "Courier New", monospace;
    }
    QHeaderView::section {
        background-color: #3a3a3a;
        color: #e0e0e0;
        padding: 4px;
        border: 1px solid #007acc;
    }
    QGroupBox {
        color: #e0e0e0;
        border: 1px solid #007acc;
        margin-top: 10px;
    }
    QToolBar {
        background-color: #2a2a2a;
        border: none;
        padding: 5px;
    }
    QToolButton {
        color: #e0e0e0;
        padding: 5px;
    }
    """)
    file_name = sys.argv[1] if len(sys.argv) > 1 else None
    window = MainWindow(file_name)
    window.show()
    return app.exec()

if __name__ == "__main__":
    sys.exit(start_gui())
