from typing import Literal

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file automatically
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Read by core.logging straight from the environment
    ENVIRONMENT: Literal["development", "test", "production"] = "development"
    LOG_LEVEL: str = "INFO"

    # Bitcoin-family nodes (JSON-RPC 1.0, HTTP Basic auth)
    BTC_RPC_URL: str | None = None
    BTC_RPC_USER: str = ""
    BTC_RPC_PASSWORD: str = ""

    BCH_RPC_URL: str | None = None
    BCH_RPC_USER: str = ""
    BCH_RPC_PASSWORD: str = ""

    LTC_RPC_URL: str | None = None
    LTC_RPC_USER: str = ""
    LTC_RPC_PASSWORD: str = ""

    # Ethereum node (JSON-RPC 2.0, no auth)
    ETH_RPC_URL: str | None = None

    # Transport timeout, the only timeout in the verification path
    RPC_TIMEOUT_SECONDS: float = 30.0

    # Observability (Optional)
    OTEL_SERVICE_NAME: str = "trade-autoconfirm"

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="ignore"
    )

    def rpc_endpoint(self, prefix: str) -> tuple[str, str, str]:
        """Return (url, user, password) for a chain's settings prefix."""
        url = getattr(self, f"{prefix}_RPC_URL", None)
        if not url:
            raise RuntimeError(
                f"{prefix}_RPC_URL not set; create .env or export the variable"
            )
        user = getattr(self, f"{prefix}_RPC_USER", "")
        password = getattr(self, f"{prefix}_RPC_PASSWORD", "")
        return url, user, password
