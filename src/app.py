"""Checkout FastAPI application.

Processes cart and checkout commands synchronously over HTTP. Every request
runs inside the checkout domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied.
from checkout.domain import checkout
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

checkout.init()


def create_app() -> FastAPI:
    from checkout.api import cart_router, checkout_router, order_router

    app = FastAPI(
        title="Checkout API",
        description="Carts, orders and multi-step checkout",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the checkout domain context for each request."""
        with checkout.domain_context():
            response = await call_next(request)
        return response

    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(checkout_router)
    register_exception_handlers(app)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": checkout.name})

    return app


app = create_app()
