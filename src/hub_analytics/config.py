import os
from dataclasses import dataclass
from urllib.parse import urlparse

DEFAULT_CUBE_BASE_URL = "http://127.0.0.1:4000"


@dataclass
class Config:
    cube_base_url: "str" = DEFAULT_CUBE_BASE_URL
    cube_auth_token: "str" = ""
    # per request timeout of the cube HTTP client, in seconds
    cube_timeout: "float" = 10.0
    # bound on a whole analytics request, None to disable
    request_timeout: "float | None" = None

    log_level: "str" = "info"
    log_format: "str" = "console"

    @classmethod
    def from_env(cls) -> "Config":
        config = cls(
            cube_base_url=os.environ.get("CUBE_BASE_URL", DEFAULT_CUBE_BASE_URL),
            cube_auth_token=os.environ.get("CUBE_AUTH_TOKEN", ""),
            cube_timeout=float(os.environ.get("CUBE_TIMEOUT", "10")),
        )
        config.validate()
        return config

    def validate(self) -> "None":
        """
        checks that the cube base URL is an absolute http(s) URL.
        """
        parsed = urlparse(self.cube_base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"invalid cube base URL: {self.cube_base_url!r}")

    @property
    def cube_enabled(self) -> "bool":
        return bool(self.cube_auth_token)
