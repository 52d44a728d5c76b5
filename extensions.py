from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Storage is configured through RATELIMIT_STORAGE_URI at init_app time
limiter = Limiter(key_func=get_remote_address)
