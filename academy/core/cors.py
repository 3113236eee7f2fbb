from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from academy.core.settings import get_settings


def add_cors_middleware(app: FastAPI) -> None:
    origins = get_settings().cors_origins_list

    # Browsers reject credentialed requests against a wildcard origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )
