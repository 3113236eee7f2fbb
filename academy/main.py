from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqladmin import Admin

import academy.models  # noqa: F401
from academy.admin.auth import AdminAuth
from academy.admin.views import ADMIN_VIEWS
from academy.core.cors import add_cors_middleware
from academy.core.exception_handlers import register_exception_handlers
from academy.core.firebase import init_firebase
from academy.core.logging import configure_logging
from academy.core.request_logging import add_request_logging_middleware
from academy.db.engine import engine
from academy.router import api_router

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_firebase()
    yield


app = FastAPI(title="Chess Academy", version="0.1.0", lifespan=lifespan)

app.include_router(api_router)

add_request_logging_middleware(app)
add_cors_middleware(app)
register_exception_handlers(app)

# Mount SQLAdmin UI at /admin (SQLAdmin enables sessions via auth backend secret)
admin = Admin(
    app=app,
    engine=engine,
    authentication_backend=AdminAuth(),
)
for view in ADMIN_VIEWS:
    admin.add_view(view)
