from slowapi import Limiter
from slowapi.util import get_remote_address

# Instância única compartilhada entre main (app.state) e os routers
limiter = Limiter(key_func=get_remote_address)
