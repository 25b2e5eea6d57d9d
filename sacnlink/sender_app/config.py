import uuid
from functools import lru_cache

from pydantic import Field
from pydantic_settings import SettingsConfigDict, BaseSettings


class SenderSettings(BaseSettings):
    destination_host: str = Field("127.0.0.1", validation_alias="SACN_DESTINATION_HOST")
    destination_port: int = Field(5568, ge=1, le=65535, validation_alias="SACN_DESTINATION_PORT")
    multicast: bool = Field(False, validation_alias="SACN_MULTICAST")

    sender_id: uuid.UUID = Field(default_factory=lambda: uuid.UUID(int=0), validation_alias="SACN_SENDER_ID")
    source_name: str = Field("sacnlink sender", validation_alias="SACN_SOURCE_NAME")
    priority: int = Field(100, ge=0, le=200, validation_alias="SACN_PRIORITY")

    first_universe: int = Field(1, ge=1, le=63999, validation_alias="SACN_FIRST_UNIVERSE")
    universe_count: int = Field(1, ge=1, le=63999, validation_alias="SACN_UNIVERSE_COUNT")
    slots: int = Field(512, ge=0, le=512, validation_alias="SACN_SLOTS")

    universe_pause: float = Field(0.05, ge=0, validation_alias="SACN_UNIVERSE_PAUSE")
    frame_interval: float = Field(1.0, ge=0, validation_alias="SACN_FRAME_INTERVAL")
    send_retries: int = Field(0, ge=0, validation_alias="SACN_SEND_RETRIES")

    log_ring_size: int = Field(200, ge=1, validation_alias="SACN_LOG_RING_SIZE")
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", populate_by_name=True, extra="ignore")

    @property
    def universes(self) -> range:
        return range(self.first_universe, self.first_universe + self.universe_count)


@lru_cache
def get_settings() -> SenderSettings:
    return SenderSettings()
