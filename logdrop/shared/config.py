"""
Configuration Module

This module manages application configuration settings loaded from
environment variables (optionally through a .env file).

Features:
- Environment loading
- Storage root location
- Listener settings
- Logging level
- CORS origins
- Archive buffering threshold

Dependencies:
- os for env
- dotenv for loading

Author: Logdrop Development Team
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Storage Configuration
STORAGE_ROOT = os.getenv('LOGDROP_STORAGE_ROOT', '/opt/eotw_data')

# Server Configuration
HOST = os.getenv('LOGDROP_HOST', '0.0.0.0')
PORT = int(os.getenv('LOGDROP_PORT', '3000'))
LOG_LEVEL = os.getenv('LOGDROP_LOG_LEVEL', 'INFO').upper()

# CORS Configuration
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv('LOGDROP_CORS_ORIGINS', '*').split(',')
    if origin.strip()
]

# Archive Configuration
# Archives larger than this spill from memory to a temporary file
ARCHIVE_SPOOL_BYTES = int(os.getenv('LOGDROP_ARCHIVE_SPOOL_BYTES', str(32 * 1024 * 1024)))
