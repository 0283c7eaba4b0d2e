from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    mongo_uri: str = Field(default="mongodb://mongodb:27017", alias="MONGO_URI")
    mongo_database: str = Field(default="main", alias="MONGO_DATABASE")
    mongo_collection: str = Field(default="users", alias="MONGO_COLLECTION")
    mongo_connect_timeout_s: float = Field(default=10.0, alias="MONGO_CONNECT_TIMEOUT_S")

    influx_host: str = Field(default="influxdb", alias="INFLUX_HOST")
    influx_port: int = Field(default=8086, alias="INFLUX_PORT")
    influx_user: str = Field(default="grafana", alias="INFLUX_USER")
    influx_password: str = Field(default="grafana", alias="INFLUX_PASSWORD")
    influx_database: str = Field(default="metrics", alias="INFLUX_DATABASE")
    influx_precision: str = Field(default="s", alias="INFLUX_PRECISION")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8080, alias="PORT")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
