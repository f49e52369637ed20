from flask_login import LoginManager

from .services.api_client import ApiClient

api = ApiClient()
login_manager = LoginManager()
