import os


def _env_flag(name, default="false"):
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "supersecret")
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))
    APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

    API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000/api")
    API_TIMEOUT = float(os.getenv("API_TIMEOUT", 10))

    # Serialized identity lives under this key in the signed session cookie.
    SESSION_USER_KEY = os.getenv("SESSION_USER_KEY", "user")
    # The backend's 401 responses are only logged unless this is switched on.
    LOGOUT_ON_UNAUTHORIZED = _env_flag("LOGOUT_ON_UNAUTHORIZED")

    LOW_STOCK_THRESHOLD = int(os.getenv("LOW_STOCK_THRESHOLD", 10))
    STOCK_STATUS_DANGER = int(os.getenv("STOCK_STATUS_DANGER", 5))
    STOCK_STATUS_WARNING = int(os.getenv("STOCK_STATUS_WARNING", 20))

    STOCK_PAGE_SIZE = int(os.getenv("STOCK_PAGE_SIZE", 20))
    LIST_PAGE_SIZE = int(os.getenv("LIST_PAGE_SIZE", 25))

    PRODUCT_IMAGE_ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}

    ZEBRA_PRINTER_HOST = os.getenv("ZEBRA_PRINTER_HOST", "localhost")
    ZEBRA_PRINTER_PORT = int(os.getenv("ZEBRA_PRINTER_PORT", 9100))
    LABELARY_BASE_URL = os.getenv("LABELARY_BASE_URL", "http://api.labelary.com/v1")

    LOG_DIR = os.getenv("LOG_DIR", os.path.join(BASE_DIR, "logs"))
