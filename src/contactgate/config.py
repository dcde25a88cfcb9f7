from datetime import timedelta

from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.gate import GateConfig


class Settings(BaseSettings):
    server_host: str = "0.0.0.0"
    server_port: int = 8080
    # "production" enables HSTS on responses
    environment: str = "development"

    # Sliding-window rate limit per client (default: 3 submissions per 15 minutes)
    rate_limit_window_seconds: int = 900
    rate_limit_max_requests: int = 3
    # Anti-forgery token lifetime (seconds). Default: 30 minutes
    token_ttl_seconds: int = 1800
    # Reject tokens presented by a client other than the one they were issued to
    bind_token_to_owner: bool = False
    # Number of reverse proxies in front of the app that append to X-Forwarded-For.
    # 0 ignores the header and uses the peer address
    trusted_proxy_hops: int = 0
    # Background eviction of expired tokens and idle rate windows (seconds)
    sweep_interval_seconds: int = 300

    # Notification / mail transport
    site_name: str = "Portfolio"
    email_from: str = "no-reply@example.com"
    # Operator mailbox; falls back to email_from (send to yourself)
    email_to: str = ""
    sendgrid_api_key: str = ""
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def operator_email(self) -> str:
        return self.email_to or self.email_from

    def gate_config(self) -> GateConfig:
        return GateConfig(
            window_duration=timedelta(seconds=self.rate_limit_window_seconds),
            max_requests=self.rate_limit_max_requests,
            token_ttl=timedelta(seconds=self.token_ttl_seconds),
            bind_token_to_owner=self.bind_token_to_owner,
        )
