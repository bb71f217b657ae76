"""
Load settings from .env. Never log or expose secret values.
All values come from environment variables (populated via .env file).
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tools.base import ErrorKind, ToolError

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # HTTP
    http_timeout: float = Field(default=10.0, gt=0, description="Per-call timeout in seconds")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="Browser User-Agent for outbound requests")

    # Web tools
    search_url: str = Field(default="https://html.duckduckgo.com/html/", description="HTML search endpoint")
    scrape_allow_error_status: bool = Field(
        default=False, description="Parse non-2xx pages as content instead of returning an error"
    )

    # Exchange rates
    exchange_rate_url: str = Field(
        default="https://open.er-api.com/v6/latest/{code}",
        description="Rate endpoint template; {code} and optional {api_key} are substituted",
    )
    exchange_rate_api_key: Optional[str] = Field(default=None, description="Exchange rate API key")

    # Mail
    smtp_host: Optional[str] = Field(default=None, description="SMTP server host")
    smtp_port: int = Field(default=587, description="SMTP server port")
    smtp_username: Optional[str] = Field(default=None, description="SMTP username")
    smtp_password: Optional[str] = Field(default=None, description="SMTP password")
    smtp_use_tls: bool = Field(default=True, description="Upgrade SMTP connection with STARTTLS")
    mail_sender: Optional[str] = Field(default=None, description="From address for outbound mail")

    # App
    log_level: str = Field(default="INFO", description="Log level")
    api_host: str = Field(default="0.0.0.0", description="FastAPI bind host")
    api_port: int = Field(default=8000, description="FastAPI port")

    def exchange_rate_endpoint(self, code: str) -> str:
        if "{api_key}" in self.exchange_rate_url and not self.exchange_rate_api_key:
            raise ToolError(
                ErrorKind.UNKNOWN,
                "Exchange rate API key is not configured. Set EXCHANGE_RATE_API_KEY in .env.",
            )
        return self.exchange_rate_url.format(code=code, api_key=self.exchange_rate_api_key or "")


@lru_cache
def get_settings() -> Settings:
    return Settings()
