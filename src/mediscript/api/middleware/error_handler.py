"""Global exception handlers mapping domain exceptions to HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from mediscript.exceptions import (
    ConfigurationError,
    MalformedResponse,
    MediScriptError,
    PrescriptionValidationError,
    ProviderCallError,
)


def register_error_handlers(app: FastAPI) -> None:
    """Register exception-to-HTTP-status mappings."""

    @app.exception_handler(ProviderCallError)
    async def handle_provider_error(request: Request, exc: ProviderCallError) -> JSONResponse:
        return JSONResponse(
            status_code=502,
            content={"error": str(exc), "type": "provider_call_error", "provider": exc.provider},
        )

    @app.exception_handler(MalformedResponse)
    async def handle_malformed(request: Request, exc: MalformedResponse) -> JSONResponse:
        return JSONResponse(status_code=502, content={"error": str(exc), "type": "malformed_response"})

    @app.exception_handler(PrescriptionValidationError)
    async def handle_validation(request: Request, exc: PrescriptionValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"error": str(exc), "type": "validation_error"})

    @app.exception_handler(ConfigurationError)
    async def handle_config(request: Request, exc: ConfigurationError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": str(exc), "type": "configuration_error"})

    @app.exception_handler(MediScriptError)
    async def handle_generic_error(request: Request, exc: MediScriptError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": str(exc), "type": "mediscript_error"})
