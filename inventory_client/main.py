from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QListWidget,
    QListWidgetItem,
    QStackedWidget,
    QHBoxLayout,
    QSizePolicy,
    QLabel,
    QPushButton,
)
from PySide6.QtCore import Qt, QTimer
from PySide6 import QtAsyncio
from pathlib import Path
import logging
import sys
from importlib import import_module

from .api.identity import BackendIdentityProvider, has_permission
from .api.transport import Transport
from .config import get_settings
from .constants import APP_NAME, REQUIRED_ROLE_USERS, ROLE_LABELS, STYLE_FILE
from .modules.base_module import BaseModule
from .modules.login.controller import LoginController
from .utils.loggers import configure_logging
from .utils.ui_helpers import wrap_center

_log = logging.getLogger(__name__)


def load_qss() -> str:
    qss = ""
    f = Path(__file__).resolve().parent / STYLE_FILE
    if f.exists():
        qss = f.read_text(encoding="utf-8")
    return qss


def _lazy_get(name: str, attr: str):
    """Import a module by name and fetch an attribute from it, with a clear error if missing."""
    try:
        mod = import_module(name)
    except Exception as e:
        raise ImportError(f"Failed to import module '{name}': {e}") from e
    try:
        return getattr(mod, attr)
    except AttributeError as e:
        raise ImportError(f"'{attr}' not found in module '{name}'.") from e


# (nav title, module path, controller class, minimum role or None)
PAGES = (
    ("Products", "inventory_client.modules.product.controller", "ProductController", None),
    ("Suppliers", "inventory_client.modules.supplier.controller", "SupplierController", None),
    ("Categories", "inventory_client.modules.category.controller", "CategoryController", None),
    ("Movements", "inventory_client.modules.movement.controller", "MovementController", None),
    ("Sales", "inventory_client.modules.sale.controller", "SaleController", None),
    ("Receipts", "inventory_client.modules.receipt.controller", "ReceiptController", None),
    ("Users", "inventory_client.modules.users.controller", "UsersController", REQUIRED_ROLE_USERS),
)


class MainWindow(QMainWindow):
    def __init__(self, transport: Transport, identity):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        # ensure normal window controls + sensible minimum
        self.setWindowFlag(Qt.WindowMinimizeButtonHint, True)
        self.setWindowFlag(Qt.WindowMaximizeButtonHint, True)
        self.setMinimumSize(820, 520)

        self.transport = transport
        self.identity = identity

        # ---- Central layout: header + left nav + stacked pages ----
        central = QWidget(self)
        layout = QVBoxLayout(central)
        self.setCentralWidget(central)

        header = QHBoxLayout()
        ident = identity.identity
        who = (ident.display_name or ident.email or "") if ident else ""
        role = ROLE_LABELS.get(identity.get_role() or "", identity.get_role() or "")
        self.lbl_user = QLabel(f"{who} · {role}" if who else role)
        self.btn_sign_out = QPushButton("Sign out")
        self.btn_sign_out.clicked.connect(identity.sign_out)
        header.addStretch(1)
        header.addWidget(self.lbl_user)
        header.addWidget(self.btn_sign_out)
        layout.addLayout(header)

        self.nav = QListWidget()
        # Cap the nav width so center content has room
        self.nav.setFixedWidth(120)
        self.nav.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Expanding)

        self.stack = QStackedWidget()

        row = QWidget()
        row_lay = QHBoxLayout(row)
        row_lay.addWidget(self.nav)
        row_lay.addWidget(self.stack, 1)
        layout.addWidget(row, 1)

        # Store module information for lazy loading
        self.module_info: list[dict] = []
        # index -> loaded controller
        self.modules: dict[int, BaseModule] = {}

        self.nav.currentRowChanged.connect(self._on_nav_item_changed)

        for title, path, cls, required in PAGES:
            if required and not has_permission(identity.get_role(), required):
                continue
            self._add_module_deferred(title, path, cls)

        # Ensure first page is visible
        if self.nav.count():
            self.nav.setCurrentRow(0)

    def _add_module_deferred(self, title: str, module_path: str, class_name: str):
        """Add module info for deferred loading."""
        self.module_info.append({
            "title": title,
            "module_path": module_path,
            "class_name": class_name,
        })
        self.nav.addItem(QListWidgetItem(title))
        # Placeholder until the page is first opened
        self.stack.addWidget(wrap_center(QLabel(f"Loading {title}...")))

    def _load_module_at_index(self, index: int):
        if index in self.modules or not (0 <= index < len(self.module_info)):
            return
        info = self.module_info[index]
        try:
            Controller = _lazy_get(info["module_path"], info["class_name"])
            controller = Controller(self.transport, self.identity)
        except Exception:
            _log.exception("[%s] failed to load", info["title"])
            page = wrap_center(QLabel(f"{info['title']}\n\nCould not be loaded."))
        else:
            self.modules[index] = controller
            page = controller.get_widget()
        old = self.stack.widget(index)
        self.stack.insertWidget(index, page)
        self.stack.removeWidget(old)
        old.deleteLater()

    def _on_nav_item_changed(self, index: int):
        self._load_module_at_index(index)
        self.stack.setCurrentIndex(index)

    def shutdown(self):
        for controller in self.modules.values():
            controller.on_signed_out()
        self.modules.clear()


class App:
    """Sign-in -> main window -> (sign-out) -> sign-in again."""

    def __init__(self, settings):
        self.settings = settings
        self.transport = Transport(settings.api_base_url, timeout=settings.request_timeout)
        self.identity = BackendIdentityProvider(self.transport)
        self.identity.add_sign_out_listener(self._on_signed_out)
        self.login = LoginController(self.identity)
        self.login.signedIn.connect(self._on_signed_in)
        self.login.cancelled.connect(self._quit)
        self.window: MainWindow | None = None

    def start(self):
        if self.settings.identity_token:
            self.login.sign_in(self.settings.identity_token)
        else:
            self.login.prompt()

    def _on_signed_in(self, _identity):
        self.window = MainWindow(self.transport, self.identity)
        self.window.showMaximized()

    def _on_signed_out(self):
        if self.window is not None:
            self.window.shutdown()
            self.window.close()
            self.window.deleteLater()
            self.window = None
        self.login.prompt("Your session ended. Please sign in again.")

    def _quit(self):
        if self.window is None:
            QApplication.instance().quit()


def main():
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_level_http)

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    qss = load_qss()
    if qss:
        app.setStyleSheet(qss)

    shell = App(settings)
    QTimer.singleShot(0, shell.start)
    QtAsyncio.run(handle_sigint=True)


if __name__ == "__main__":
    main()
