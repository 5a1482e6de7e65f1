"""CORS policy for browser clients of the billing endpoints.

The payment widget calls the API from the web app's origin with the
Supabase client headers attached, so those headers must be allowed on
preflight.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

CORS_ALLOW_HEADERS = [
    "authorization",
    "x-client-info",
    "apikey",
    "content-type",
    "x-supabase-client-platform",
    "x-supabase-client-platform-version",
    "x-supabase-client-runtime",
    "x-supabase-client-runtime-version",
]


def add_cors(app: FastAPI) -> None:
    """Install the permissive any-origin CORS policy on ``app``."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=CORS_ALLOW_HEADERS,
    )
