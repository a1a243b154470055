from .api import create_app, mount_routers
from .errors import add_error_handlers
from .middleware import CustomerTokenMiddleware

__all__ = ["create_app", "mount_routers", "add_error_handlers", "CustomerTokenMiddleware"]
