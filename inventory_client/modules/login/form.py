from PySide6.QtWidgets import QDialog, QFormLayout, QLineEdit, QDialogButtonBox, QLabel


class LoginForm(QDialog):
    def __init__(self, parent=None, message: str | None = None):
        super().__init__(parent)
        self.setWindowTitle("Sign in")
        lay = QFormLayout(self)
        self.token = QLineEdit()
        self.token.setEchoMode(QLineEdit.Password)
        self.token.setPlaceholderText("Paste the access token issued by your identity provider")
        lay.addRow("Access token", self.token)
        self.lbl_error = QLabel(message or "")
        self.lbl_error.setStyleSheet("color: #b00020;")
        self.lbl_error.setWordWrap(True)
        self.lbl_error.setVisible(bool(message))
        lay.addRow(self.lbl_error)
        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        lay.addRow(self.buttons)

    def get_token(self) -> str:
        return self.token.text().strip()
