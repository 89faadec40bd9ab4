# Register every table on Base.metadata
from models import users, catalog, cart, order, setting, log  # noqa: F401
