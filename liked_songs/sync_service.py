"""Synchronization of Spotify liked songs into the stored snapshot."""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Dict, List, Optional
from rich.console import Console
from liked_songs.diff_reporter import count_changes, print_diff
from liked_songs.snapshot import NormalizedTrack, normalize_track, serialize_snapshot
from liked_songs.snapshot_store import SnapshotStore
from liked_songs.spotify_client import SpotifyClient
from liked_songs.utils.credentials import (
    DEFAULT_CREDENTIALS_PATH,
    Credentials,
    load_credentials,
)
from liked_songs.utils.logger import get_logger, setup_logger


class SyncReport:
    """Report of a snapshot sync run."""

    def __init__(self):
        """Initialize empty sync report."""
        self.start_time = datetime.now()
        self.end_time = None
        self.tracks_total = 0
        self.lines_added = 0
        self.lines_removed = 0
        self.uploaded = False

    @property
    def changed(self) -> bool:
        return bool(self.lines_added or self.lines_removed)

    def finalize(self):
        """Mark sync as complete."""
        self.end_time = datetime.now()

    def to_dict(self) -> Dict:
        """Convert report to dictionary."""
        duration = None
        if self.end_time:
            duration = (self.end_time - self.start_time).total_seconds()

        return {
            'start_time': self.start_time.isoformat(),
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'duration_seconds': duration,
            'tracks_total': self.tracks_total,
            'lines_added': self.lines_added,
            'lines_removed': self.lines_removed,
            'uploaded': self.uploaded,
        }


class SyncService:
    """Service that refreshes the liked songs snapshot."""

    def __init__(
        self,
        credentials_path: str = DEFAULT_CREDENTIALS_PATH,
        log_file: str = None,
        store: SnapshotStore = None,
        console: Console = None,
        spotify_client_factory: Callable[[Credentials], SpotifyClient] = None
    ):
        """
        Initialize sync service.

        Args:
            credentials_path: Path to credentials.json
            log_file: Optional path to log file
            store: Snapshot store; defaults to the fixed S3 location
            console: Console the diff is printed to
            spotify_client_factory: Builds a Spotify client from credentials
        """
        self.credentials_path = credentials_path
        self.logger = setup_logger(log_file=log_file) if log_file else get_logger()
        self.store = store or SnapshotStore()
        self.console = console or Console()
        self.spotify_client_factory = spotify_client_factory or self._default_spotify_client
        self.report = SyncReport()

    @staticmethod
    def _default_spotify_client(credentials: Credentials) -> SpotifyClient:
        return SpotifyClient(
            client_id=credentials.client_id,
            client_secret=credentials.client_secret
        )

    def load_credentials(self) -> Credentials:
        """
        Load credentials from file.

        Raises:
            CredentialsError: If credentials cannot be loaded
        """
        try:
            self.logger.info(f"Loading credentials from {self.credentials_path}")
            return load_credentials(self.credentials_path)
        except Exception as e:
            self.logger.error(f"Failed to load credentials: {e}")
            raise

    def fetch_liked_songs(self, credentials: Credentials) -> List[NormalizedTrack]:
        """
        Authenticate with Spotify and collect every saved track.

        The paginated generator is drained into a list before returning.
        """
        spotify_client = self.spotify_client_factory(credentials)
        self.logger.info("Authenticating with Spotify...")
        spotify_client.authenticate_user()

        tracks = [normalize_track(item) for item in spotify_client.iter_saved_tracks()]
        self.logger.info(f"Retrieved {len(tracks)} liked songs from Spotify")
        return tracks

    def download_snapshot(self) -> str:
        self.logger.info("Downloading previous snapshot...")
        return self.store.download()

    def build_snapshot(self, tracks: List[NormalizedTrack]) -> str:
        """Serialize fetched tracks and record how many there are."""
        self.report.tracks_total = len(tracks)
        return serialize_snapshot(tracks)

    def report_diff(self, old_snapshot: str, new_snapshot: str) -> None:
        """Print the snapshot diff and record its size on the report."""
        diff_lines = print_diff(old_snapshot, new_snapshot, console=self.console)
        self.report.lines_added, self.report.lines_removed = count_changes(diff_lines)
        if self.report.changed:
            self.logger.info(
                f"Snapshot changed: +{self.report.lines_added} -{self.report.lines_removed}"
            )
        else:
            self.logger.info("No changes since last snapshot")

    def upload_snapshot(self, new_snapshot: str) -> None:
        self.logger.info("Uploading new snapshot...")
        self.store.upload(new_snapshot)
        self.report.uploaded = True

    def finish(self) -> SyncReport:
        """Close the report once the upload has succeeded."""
        self.report.finalize()
        self.logger.debug(f"Sync report: {self.report.to_dict()}")
        return self.report

    def run(self) -> SyncReport:
        """
        Run the full sync: download, fetch, diff, upload.

        Every step runs in order and any failure aborts the run.

        Returns:
            SyncReport for this run
        """
        credentials = self.load_credentials()
        old_snapshot = self.download_snapshot()
        tracks = self.fetch_liked_songs(credentials)
        new_snapshot = self.build_snapshot(tracks)
        self.report_diff(old_snapshot, new_snapshot)
        self.upload_snapshot(new_snapshot)
        return self.finish()


class AsyncSyncService:
    """Async wrapper that runs each sync step on a single worker thread."""

    def __init__(self, sync_service: Optional[SyncService] = None):
        self.sync_service = sync_service or SyncService()
        self._executor = ThreadPoolExecutor(max_workers=1)

    async def _call(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    async def run(self) -> SyncReport:
        """
        Run the sync, awaiting each network-bound step before the next.

        Returns:
            SyncReport for this run
        """
        service = self.sync_service
        try:
            credentials = service.load_credentials()
            old_snapshot = await self._call(service.download_snapshot)
            tracks = await self._call(service.fetch_liked_songs, credentials)
            new_snapshot = service.build_snapshot(tracks)
            service.report_diff(old_snapshot, new_snapshot)
            await self._call(service.upload_snapshot, new_snapshot)
            return service.finish()
        finally:
            self._executor.shutdown(wait=False)
