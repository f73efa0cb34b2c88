import os
import logging
from dataclasses import dataclass

TRANSPORTS = ("stdio", "streamable-http")

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
LOG_FILE_NAME = "weather_server.log"


@dataclass(frozen=True)
class Settings:
    """Process configuration, read once at startup."""

    api_base: str = "https://api.weather.gov"
    user_agent: str = "weather-app/2.0"
    timeout: float = 30.0
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000
    http_path: str = "/mcp"
    log_dir: str = "logs"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ
        transport = env.get("MCP_TRANSPORT", cls.transport)
        if transport not in TRANSPORTS:
            raise ValueError(f"MCP_TRANSPORT must be one of {', '.join(TRANSPORTS)}, got {transport!r}")
        try:
            port = int(env.get("MCP_PORT", cls.port))
            timeout = float(env.get("NWS_TIMEOUT", cls.timeout))
        except ValueError as e:
            raise ValueError(f"Invalid numeric setting: {e}") from e
        return cls(
            api_base=env.get("NWS_API_BASE", cls.api_base).rstrip("/"),
            user_agent=env.get("NWS_USER_AGENT", cls.user_agent),
            timeout=timeout,
            transport=transport,
            host=env.get("MCP_HOST", cls.host),
            port=port,
            http_path=env.get("MCP_HTTP_PATH", cls.http_path),
            log_dir=env.get("LOG_DIR", cls.log_dir),
            log_level=env.get("LOG_LEVEL", cls.log_level).upper(),
        )


def configure_logging(settings: Settings) -> str:
    """Send server logs to a file under LOG_DIR and return its path.

    Stdout carries the stdio transport, so nothing may be logged there.
    """
    os.makedirs(settings.log_dir, exist_ok=True)
    log_file = os.path.abspath(os.path.join(settings.log_dir, LOG_FILE_NAME))
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
    )
    return log_file
