# config.py
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent


class Config:
    DATA_DIR = os.getenv('BIBLE_DATA_DIR', os.path.join(BASE_DIR, 'data'))
    # Both files default to living inside DATA_DIR
    METADATA_FILE = os.getenv('METADATA_FILE')
    API_KEYS_FILE = os.getenv('API_KEYS_FILE')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')
    PORT = int(os.getenv('PORT', 3001))
