"""FastAPI adapter for the contact-form email relay.

Usage:
    uvicorn roi_calculator.relay_api:app --host 0.0.0.0 --port 8080

POST /api/send-email forwards to EmailJS; every other method answers 405 with
the same {"error": ...} body shape the form expects.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .email_relay import RelayConfig, handle_send_email

SEND_EMAIL_PATH = "/api/send-email"


class ContactRequest(BaseModel):
    """Contact form body. Fields are optional and any JSON value is rendered as text."""

    name: Optional[Any] = None
    email: Optional[Any] = None
    company: Optional[Any] = None
    models: Optional[Any] = None
    spend: Optional[Any] = None


def create_app(config: Optional[RelayConfig] = None) -> FastAPI:
    """Create the relay application.

    Args:
        config: Fixed relay credentials. When omitted they are read from the
            environment on every request, so a missing secret only fails that
            request.
    """
    app = FastAPI(
        title="NeuroLattice Contact Relay",
        description="Forwards contact-form inquiries to EmailJS",
        version="1.0.0",
    )

    @app.post(SEND_EMAIL_PATH, tags=["Contact"])
    def send_email(request: ContactRequest):
        """Relay one inquiry."""
        status_code, body = handle_send_email("POST", request.model_dump(), config=config)
        return JSONResponse(status_code=status_code, content=body)

    @app.api_route(SEND_EMAIL_PATH, methods=["GET", "PUT", "PATCH", "DELETE"],
                   include_in_schema=False)
    def send_email_wrong_method(request: Request):
        status_code, body = handle_send_email(request.method, None)
        return JSONResponse(status_code=status_code, content=body)

    return app


app = create_app()
