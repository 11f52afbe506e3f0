from slowapi import Limiter
from slowapi.util import get_remote_address

from ...config import Settings

# защита /login от перебора паролей
LOGIN_RATE_LIMIT = "10/minute"

def build_limiter(settings: Settings) -> Limiter:
    # у каждого приложения свой лимитер и своё хранилище счётчиков
    return Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
