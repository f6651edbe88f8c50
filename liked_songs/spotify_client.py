"""Spotify API client for retrieving the user's saved (liked) tracks."""

from typing import Dict, Iterator, Optional
import requests
import spotipy
from spotipy.cache_handler import MemoryCacheHandler
from spotipy.oauth2 import SpotifyOAuth
from liked_songs.utils.logger import get_logger


logger = get_logger()

REDIRECT_URI = "http://localhost:8888/callback"
SCOPE = "user-library-read"


class SpotifyClient:
    """Client for interacting with Spotify Web API."""

    PAGE_SIZE = 50

    def __init__(self, client_id: str, client_secret: str, redirect_uri: str = REDIRECT_URI):
        """
        Initialize Spotify client.

        Args:
            client_id: Spotify application client ID
            client_secret: Spotify application client secret
            redirect_uri: OAuth redirect URI served locally during login
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.sp: Optional[spotipy.Spotify] = None

    def authenticate_user(self) -> None:
        """
        Authenticate user with Spotify using the authorization code flow.

        Opens the authorization URL in a browser and waits for the callback
        on the local redirect URI. The token is kept in memory only.

        Raises:
            Exception: If authentication fails
        """
        try:
            auth_manager = SpotifyOAuth(
                client_id=self.client_id,
                client_secret=self.client_secret,
                redirect_uri=self.redirect_uri,
                scope=SCOPE,
                cache_handler=MemoryCacheHandler(),
                open_browser=True
            )
            # Runs the interactive handshake
            auth_manager.get_access_token(as_dict=False)
            # One session reused across all page requests
            self.sp = spotipy.Spotify(
                auth_manager=auth_manager,
                requests_session=requests.Session()
            )
            logger.info("Authenticated with Spotify")

        except Exception as e:
            logger.error(f"Spotify authentication failed: {e}")
            raise

    def iter_saved_tracks(self) -> Iterator[Dict]:
        """
        Generator that yields raw saved-track items one page at a time.

        Pages are requested in the API's default order until the response
        has no next page. The generator cannot be restarted.

        Yields:
            Saved-track item dicts with keys 'added_at' and 'track'

        Raises:
            Exception: If not authenticated or an API call fails
        """
        if not self.sp:
            raise Exception("Not authenticated. Call authenticate_user() first.")

        offset = 0
        total = None

        while True:
            results = self.sp.current_user_saved_tracks(
                limit=self.PAGE_SIZE,
                offset=offset
            )

            if total is None:
                total = results.get('total', 0)
                logger.info(f"Streaming {total} saved tracks from Spotify")

            for item in results['items']:
                yield item

            logger.debug(f"Fetched saved tracks page at offset {offset}")

            if not results['next']:
                break

            offset += self.PAGE_SIZE
