from pydantic import BaseModel


class HealthResponse(BaseModel):
    server: str
    store: str
    timestamp: str


class WebhookSetupResponse(BaseModel):
    ok: bool
    webhook_url: str
