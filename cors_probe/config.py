"""Configuration for a CORS probe run."""

from pydantic import BaseModel, ConfigDict

ROR_API_BASE = "https://api.ror.org/v2"
SAMPLE_ROR_ID = "https://ror.org/03vek6s52"


class ProbeConfig(BaseModel):
    """Configuration for the target API, the transport and the run timeout."""

    model_config = ConfigDict(extra="forbid")

    api_base: str = ROR_API_BASE
    record_id: str = SAMPLE_ROR_ID
    origin: str = "http://localhost:4200"
    # Disable to see raw server behaviour without browser CORS semantics
    enforce_cors: bool = True
    timeout: float | None = 60.0
    user_agent: str = "cors-probe"
