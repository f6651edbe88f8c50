"""Credentials loader for the Spotify application identifiers in credentials.json."""

import json
import os
from typing import Dict


DEFAULT_CREDENTIALS_PATH = "credentials.json"

REQUIRED_KEYS = [
    'spotify_client_id',
    'spotify_client_secret',
]


class CredentialsError(Exception):
    """Exception raised when credentials cannot be loaded."""
    pass


class Credentials:
    """Spotify application client identifier and secret."""

    def __init__(self, client_id: str, client_secret: str):
        self.client_id = client_id
        self.client_secret = client_secret

    def __repr__(self) -> str:
        # Never expose the secret in logs or tracebacks
        return f"Credentials(client_id={self.client_id!r}, client_secret='***')"


def parse_credentials(content: str) -> Dict[str, str]:
    """
    Parse the JSON content of a credentials file.

    Args:
        content: Raw file content

    Returns:
        Dictionary with the required credential fields

    Raises:
        CredentialsError: If the content is not a JSON object or a field is missing
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise CredentialsError(f"Credentials file is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise CredentialsError("Credentials file must contain a JSON object")

    missing_keys = [key for key in REQUIRED_KEYS if key not in data]
    if missing_keys:
        raise CredentialsError(
            f"Missing required credentials: {', '.join(missing_keys)}"
        )

    wrong_type = [key for key in REQUIRED_KEYS if not isinstance(data[key], str)]
    if wrong_type:
        raise CredentialsError(
            f"Credentials must be strings: {', '.join(wrong_type)}"
        )

    return {key: data[key] for key in REQUIRED_KEYS}


def load_credentials(credentials_path: str = DEFAULT_CREDENTIALS_PATH) -> Credentials:
    """
    Load Spotify credentials from a JSON file.

    Args:
        credentials_path: Path to the credentials file, relative to the
            current working directory by default

    Returns:
        Credentials instance

    Raises:
        CredentialsError: If the file is missing, unreadable or malformed
    """
    if not os.path.exists(credentials_path):
        raise CredentialsError(f"Credentials file not found: {credentials_path}")

    try:
        with open(credentials_path, 'r', encoding='utf-8') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise CredentialsError(f"Cannot read credentials file {credentials_path}: {e}") from e

    fields = parse_credentials(content)
    return Credentials(
        client_id=fields['spotify_client_id'],
        client_secret=fields['spotify_client_secret']
    )
