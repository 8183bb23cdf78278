from pydantic_settings import BaseSettings
from typing import List
from pydantic import field_validator

class Settings(BaseSettings):
    app_env: str = "dev"
    app_host: str = "127.0.0.1"
    app_port: int = 8000
    database_url: str = "sqlite+aiosqlite:///./authapi.db"
    app_jwt_secret: str = "dev-secret-change-me"
    app_jwt_alg: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 60
    access_token_rotate_minutes: int = 60 * 24
    enforce_password_strength: bool = False
    log_level: str = "INFO"
    cors_allow_origins: List[str] = ["*"]
    pool_size: int = 10
    max_overflow: int = 20

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @property
    def is_production(self) -> bool:
        return self.app_env == "prod"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _coerce_origins(cls, v):
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("[") and s.endswith("]"):
                try:
                    import json
                    return json.loads(s)
                except ValueError:
                    pass
            if "," in s:
                return [p.strip() for p in s.split(",") if p.strip()]
            if s:
                return [s]
        return ["*"]

    @field_validator("access_token_rotate_minutes")
    @classmethod
    def _rotate_within_lifetime(cls, v, info):
        lifetime = info.data.get("access_token_expire_minutes")
        if v < 0 or (lifetime is not None and v >= lifetime):
            raise ValueError("access_token_rotate_minutes must be between 0 and the token lifetime")
        return v

settings = Settings()
