# utils/api_keys.py
import logging
import secrets
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

from flask import current_app
from pydantic import ValidationError

from models.api_key import ApiKey
from storage import read_json_document, write_json_document
from utils.errors import InvalidApiKeyError, InvalidInputError, StorageError

logger = logging.getLogger(__name__)

API_KEY_BYTES = 32  # 256 bits of randomness


def generate_api_key():
    """Generate a random, hex encoded API key"""
    return secrets.token_hex(API_KEY_BYTES)


def utcnow():
    return datetime.now(timezone.utc)


class ApiKeyStore:
    """Issued API keys persisted as a single JSON document.

    Writes (issue, touch) are serialized by one lock and rewrite the whole
    file before they return. Reads go against the last committed snapshot
    without locking: a mutation builds a new dict, persists it, and only then
    swaps it in, so a failed write leaves the store as it was.
    """

    def __init__(self, path, clock=utcnow):
        self.path = Path(path)
        self._clock = clock
        self._write_lock = threading.Lock()
        self._keys = self._load()

    def _load(self):
        try:
            data = read_json_document(self.path)
        except FileNotFoundError:
            logger.info(f"API key file {self.path} not found, creating an empty one")
            write_json_document(self.path, {})
            return {}

        if not isinstance(data, dict):
            raise StorageError(f"Malformed API key file {self.path.name}: expected an object")
        try:
            keys = {key: ApiKey.from_record(key, record) for key, record in data.items()}
        except (ValidationError, TypeError) as e:
            raise StorageError(f"Malformed API key file {self.path.name}: {e}") from e

        logger.info(f"Loaded {len(keys)} API keys from {self.path}")
        return keys

    def _commit(self, keys):
        write_json_document(self.path, {key: api_key.to_record() for key, api_key in keys.items()})
        self._keys = keys

    def __len__(self):
        return len(self._keys)

    def __contains__(self, key):
        return key in self._keys

    def issue(self, owner_name, owner_email):
        owner_name = (owner_name or '').strip()
        owner_email = (owner_email or '').strip()
        if not owner_name or not owner_email:
            raise InvalidInputError('Name and email are required')

        with self._write_lock:
            key = generate_api_key()
            while key in self._keys:
                key = generate_api_key()

            now = self._clock()
            api_key = ApiKey(
                key=key,
                owner_name=owner_name,
                owner_email=owner_email,
                created_at=now,
                last_used_at=now
            )
            keys = dict(self._keys)
            keys[key] = api_key
            self._commit(keys)

        logger.info(f"Issued API key {key[:8]}... for {owner_email}")
        return api_key

    def validate(self, key):
        api_key = self._keys.get(key) if key else None
        if api_key is None:
            raise InvalidApiKeyError()
        return api_key

    def info(self, key):
        return self.validate(key)

    def touch(self, key):
        """Record a use of an already validated key.

        An unknown key here is a caller bug and raises KeyError.
        """
        with self._write_lock:
            current = self._keys[key]
            now = self._clock()
            if now <= current.last_used_at:
                now = current.last_used_at + timedelta(microseconds=1)

            keys = dict(self._keys)
            keys[key] = current.model_copy(update={'last_used_at': now})
            self._commit(keys)
            return keys[key]


def get_api_key_store():
    """Get the ApiKeyStore registered on the current Flask app."""
    return current_app.extensions['api_keys']
