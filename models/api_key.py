from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApiKey(BaseModel):
    """An issued API key and its owner/usage metadata.

    On disk the key value is the mapping key, so ``to_record`` leaves it out
    and uses the field names the key file has always used.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str
    owner_name: str = Field(alias='name')
    owner_email: str = Field(alias='email')
    created_at: datetime = Field(alias='created')
    last_used_at: datetime = Field(alias='lastUsed')

    @field_validator('created_at', 'last_used_at')
    @classmethod
    def assume_utc(cls, value):
        # Timestamps without an offset are stored as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def from_record(cls, key, record):
        return cls.model_validate({**record, 'key': key})

    def to_record(self):
        return self.model_dump(mode='json', by_alias=True, exclude={'key'})

    def to_json(self):
        return self.to_record()
