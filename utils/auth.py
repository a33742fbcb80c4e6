# utils/auth.py
from functools import wraps
from flask import request, jsonify
import logging

from utils.api_keys import get_api_key_store
from utils.errors import InvalidApiKeyError

logger = logging.getLogger(__name__)

API_KEY_HEADER = 'X-API-Key'


def get_request_api_key():
    """Pull the API key from the request headers, or None"""
    return request.headers.get(API_KEY_HEADER) or None


def api_key_required(f):
    """Decorator to protect routes with an issued API key.

    The validated key is passed to the view as its first argument.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        api_key = get_request_api_key()
        if not api_key:
            logger.warning(f"API key missing for {request.path}")
            return jsonify({'error': 'Invalid or missing API key'}), 401

        try:
            current_key = get_api_key_store().validate(api_key)
        except InvalidApiKeyError as e:
            logger.warning(f"Rejected API key {api_key[:8]}... for {request.path}")
            return jsonify({'error': str(e)}), 401

        return f(current_key, *args, **kwargs)

    return decorated
