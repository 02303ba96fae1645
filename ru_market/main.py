from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware

import ru_market.config as conf
import ru_market.models  # noqa: F401
from ru_market.errors import setup_error_handlers
from ru_market.log import log_middleware
from ru_market.middlewares import TimingMiddleware
from ru_market.routers import (
    categories,
    home,
    marketplace,
    products,
    profiles,
    reviews,
    sessions,
)

app = FastAPI()


app_v1 = FastAPI(
    title="RU Market",
    version="0.1.0",
)

app_v1.include_router(home.router)
app_v1.include_router(marketplace.router)
app_v1.include_router(categories.router)
app_v1.include_router(products.router)
app_v1.include_router(profiles.router)
app_v1.include_router(reviews.router)
app_v1.include_router(sessions.router)

setup_error_handlers(app_v1)

app.mount('/api/v1', app_v1)

app.add_middleware(
    GZipMiddleware, minimum_size=conf.MIDDLEWARE_GZIP_MINIMUM_SIZE
)
app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=conf.MIDDLEWARE_TRUSTED_HOST_ALLOWED_HOSTS
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=conf.MIDDLEWARE_CORS_ALLOW_ORIGINS,
    allow_credentials=conf.MIDDLEWARE_CORS_ALLOW_CREDENTIALS,
    allow_methods=conf.MIDDLEWARE_CORS_ALLOW_METHODS,
    allow_headers=conf.MIDDLEWARE_CORS_ALLOW_HEADERS,
)
app.add_middleware(TimingMiddleware)
app.middleware("http")(log_middleware)


@app.get("/")
async def root():
    """
    Корневой маршрут, подтверждающий, что API работает.
    """
    return {"message": "RU Market API is running"}
