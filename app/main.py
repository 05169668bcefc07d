import logging
from contextlib import asynccontextmanager
from json import JSONDecodeError

import httpx
import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings
from adapters.payway import PayWayAdapter
from adapters.payway.builder import PUSHBACK_PATH
from models import Acknowledgement, CreatePaymentBody
from payment_handler import PaymentServiceHandler

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("payway-relay")


class EndpointFilter(logging.Filter):
    """Filter out noisy health check access logs."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - logging filter
        return "GET /health" not in record.getMessage()


logging.getLogger("uvicorn.access").addFilter(EndpointFilter())


def get_handler(request: Request) -> PaymentServiceHandler:
    return request.app.state.handler


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.LOG_LEVEL.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = httpx.AsyncClient(timeout=settings.GATEWAY_TIMEOUT, transport=transport)
        adapter = PayWayAdapter(settings, client=client)
        try:
            # Refuse to start without credentials
            adapter.validate_configuration()
            app.state.handler = PaymentServiceHandler(adapter)
            logger.info(
                "PayWay relay ready for merchant %s -> %s",
                settings.PAYWAY_MERCHANT_ID,
                settings.PAYWAY_API_URL,
            )
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="PayWay Relay",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"] if part != "body")
            for err in exc.errors()
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": f"Invalid request: {fields or 'malformed body'}"},
        )

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": "payway-relay"}

    @app.post("/api/create-payment")
    async def create_payment(
        body: CreatePaymentBody,
        handler: PaymentServiceHandler = Depends(get_handler),
    ):
        return await handler.create_payment(body)

    @app.post(PUSHBACK_PATH)
    async def payment_callback(
        request: Request,
        handler: PaymentServiceHandler = Depends(get_handler),
    ):
        """Handle PayWay pushback notifications."""
        content_type = request.headers.get("content-type", "")
        try:
            if "application/json" in content_type:
                fields = await request.json()
            else:
                fields = dict(await request.form())
        except (JSONDecodeError, UnicodeDecodeError, StarletteHTTPException) as exc:
            logger.warning("Unreadable pushback body: %s", exc)
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content=Acknowledgement.failure("Bad request: unreadable body").model_dump(),
            )
        return await handler.handle_callback(fields)

    @app.get("/")
    async def root():
        return {"message": "PayWay Relay API", "gateway": settings.PAYWAY_API_URL}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=get_settings().HTTP_PORT,
        reload=True,
        log_level="info"
    )
