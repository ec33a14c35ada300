# inventory_client/constants.py
APP_NAME = "Bodega Inventory"
STYLE_FILE = "styles.qss"

DEFAULT_API_BASE_URL = "http://localhost:3000"
DEFAULT_PAGE_SIZE = 20
SEARCH_DEBOUNCE_MS = 500
REQUEST_TIMEOUT_SECONDS = 30.0

# Quick-filter pseudo field: matches when any searchable column contains the text
QUICK_FILTER = "*"

# ---- Roles ----
ROLE_SUPERADMIN = "superadmin"
ROLE_OWNER = "owner"
ROLE_ADMIN = "admin"
ROLE_SECRETARIA = "secretaria"
ROLE_TRABAJADOR = "trabajador"
ROLE_EMPLEADO = "empleado"

# higher number = more permissions
ROLE_HIERARCHY = {
    ROLE_SUPERADMIN: 6,
    ROLE_OWNER: 5,
    ROLE_ADMIN: 4,
    ROLE_SECRETARIA: 3,
    ROLE_TRABAJADOR: 2,
    ROLE_EMPLEADO: 1,
}

ROLE_LABELS = {
    ROLE_SUPERADMIN: "Super Administrator",
    ROLE_OWNER: "Owner",
    ROLE_ADMIN: "Administrator",
    ROLE_SECRETARIA: "Secretary",
    ROLE_TRABAJADOR: "Worker",
    ROLE_EMPLEADO: "Employee",
}

# Minimum role per page action
REQUIRED_ROLE_EDIT = ROLE_SECRETARIA
REQUIRED_ROLE_DELETE = ROLE_ADMIN
REQUIRED_ROLE_USERS = ROLE_SUPERADMIN

# ---- List page messages ----
MSG_LOADING = "Loading…"
MSG_EMPTY = "No records found."
MSG_NO_MATCH = "No records match the active filters."
GENERIC_LOAD_ERROR = "Error connecting to the server"
GENERIC_SAVE_ERROR = "Error while saving"
