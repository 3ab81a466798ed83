from wikivoice.api.app import app_from_config, create_app
from wikivoice.api.routes import router

__all__ = [
    "app_from_config",
    "create_app",
    "router",
]
