import os
import logging
from functools import lru_cache
from pathlib import Path
import dotenv
from pydantic import BaseModel


logger = logging.getLogger(__name__)


class Config(BaseModel):
    qdrant_url: str
    qdrant_api_key: str | None = None
    qdrant_collection_name: str = "artifacts"

    django_secret_key: str
    allowed_hosts: list[str] = ["localhost", "127.0.0.1"]
    debug: bool = False
    log_level: str = "INFO"
    cors_allowed_origins: list[str] = ["*"]


def create_config():
    env_files = [".env.dev", ".env.prod"]
    for env_file in env_files:
        if Path(env_file).exists():
            dotenv.load_dotenv(env_file)
            break
    else:
        logger.debug("No .env file found, reading configuration from the environment")

    qdrant_url = os.getenv("QDRANT_URL")
    qdrant_api_key = os.getenv("QDRANT_API_KEY") or None
    qdrant_collection_name = os.getenv("QDRANT_COLLECTION_NAME", "artifacts")
    django_secret_key = os.getenv("DJANGO_SECRET_KEY")
    debug = os.getenv("DEBUG", "False").lower() == "true"
    allowed_hosts = [
        host.strip()
        for host in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
        if host.strip()
    ]
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    cors_allowed_origins = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOWED_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    if not qdrant_url:
        raise ValueError("QDRANT_URL is not set")
    if not qdrant_collection_name:
        raise ValueError("QDRANT_COLLECTION_NAME is not set")
    if not django_secret_key:
        raise ValueError("DJANGO_SECRET_KEY is not set")

    return Config(
        qdrant_url=qdrant_url,
        qdrant_api_key=qdrant_api_key,
        qdrant_collection_name=qdrant_collection_name,
        django_secret_key=django_secret_key,
        allowed_hosts=allowed_hosts,
        debug=debug,
        log_level=log_level,
        cors_allowed_origins=cors_allowed_origins,
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    return create_config()


if __name__ == "__main__":
    print(get_config())
