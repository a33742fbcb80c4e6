# routes/keys.py
from flask import Blueprint, request, jsonify
from pydantic import ValidationError
import logging

from schemas.api_key_schemas import ApiKeyCreate, ApiKeyIssued
from utils.api_keys import get_api_key_store
from utils.auth import api_key_required
from utils.errors import InvalidInputError, StorageError

keys_bp = Blueprint('keys', __name__)
logger = logging.getLogger(__name__)


@keys_bp.route('/generate-key', methods=['POST'])
def generate_key():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Name and email are required'}), 400

    try:
        payload = ApiKeyCreate.model_validate(data)
        api_key = get_api_key_store().issue(payload.name, payload.email)
    except (ValidationError, InvalidInputError):
        return jsonify({'error': 'Name and email are required'}), 400
    except StorageError as e:
        logger.error(f"Error generating API key: {str(e)}")
        return jsonify({'error': 'Internal server error'}), 500
    except Exception as e:
        logger.error(f"Error generating API key: {str(e)}", exc_info=True)
        return jsonify({'error': 'Internal server error'}), 500

    issued = ApiKeyIssued(
        apiKey=api_key.key,
        name=api_key.owner_name,
        email=api_key.owner_email,
        created=api_key.created_at
    )
    return jsonify(issued.model_dump(mode='json')), 201


@keys_bp.route('/update-key-usage', methods=['POST'])
@api_key_required
def update_key_usage(current_key):
    try:
        get_api_key_store().touch(current_key.key)
    except StorageError as e:
        logger.error(f"Error updating API key usage: {str(e)}")
        return jsonify({'error': 'Internal server error'}), 500
    return jsonify({'success': True})


@keys_bp.route('/key-info', methods=['GET'])
@api_key_required
def key_info(current_key):
    return jsonify(current_key.to_json())
