"""Unit tests for SyncService and AsyncSyncService."""

import asyncio
import io
import json
import pytest
from unittest.mock import Mock
from rich.console import Console
from liked_songs.snapshot_store import SnapshotStoreError
from liked_songs.sync_service import AsyncSyncService, SyncReport, SyncService
from liked_songs.utils.credentials import CredentialsError


TRACK_A = '{"song_name":"A","added_at":100,"artist_names":["X"],"album_name":"Album"}'
TRACK_B = '{"song_name":"B","added_at":200,"artist_names":["Y","Z"],"album_name":"Album"}'


def saved_item(name, added_at, artists):
    return {
        'added_at': added_at,
        'track': {
            'name': name,
            'artists': [{'name': artist} for artist in artists],
            'album': {'name': 'Album'}
        }
    }


@pytest.fixture
def credentials_file(tmp_path):
    """Write a valid credentials.json."""
    path = tmp_path / 'credentials.json'
    path.write_text(json.dumps({
        'spotify_client_id': 'test_id',
        'spotify_client_secret': 'test_secret'
    }), encoding='utf-8')
    return str(path)


@pytest.fixture
def mock_store():
    """Create a mock snapshot store holding TRACK_A."""
    store = Mock()
    store.download.return_value = TRACK_A + '\n'
    return store


@pytest.fixture
def mock_spotify_client():
    """Create a mock Spotify client returning two liked songs, newest first."""
    client = Mock()
    client.iter_saved_tracks.return_value = iter([
        saved_item('B', '1970-01-01T00:03:20Z', ['Z', 'Y']),
        saved_item('A', '1970-01-01T00:01:40Z', ['X']),
    ])
    return client


@pytest.fixture
def console():
    return Console(file=io.StringIO(), color_system=None, width=200)


@pytest.fixture
def sync_service(credentials_file, mock_store, mock_spotify_client, console):
    """Create a SyncService with mocked collaborators."""
    return SyncService(
        credentials_path=credentials_file,
        store=mock_store,
        console=console,
        spotify_client_factory=Mock(return_value=mock_spotify_client)
    )


class TestSyncReport:
    """Test cases for SyncReport."""
    
    def test_initial_state(self):
        report = SyncReport()
        
        assert report.tracks_total == 0
        assert report.changed is False
        assert report.to_dict()['end_time'] is None
    
    def test_finalize_sets_duration(self):
        report = SyncReport()
        report.finalize()
        
        data = report.to_dict()
        assert data['end_time'] is not None
        assert data['duration_seconds'] >= 0


class TestSyncService:
    """Test cases for SyncService."""
    
    def test_run_adds_new_track(self, sync_service, mock_store, console):
        """Test the scenario where one new track was liked."""
        report = sync_service.run()
        
        mock_store.upload.assert_called_once_with(TRACK_A + '\n' + TRACK_B + '\n')
        assert report.tracks_total == 2
        assert report.lines_added == 1
        assert report.lines_removed == 0
        assert report.uploaded is True
        
        output = console.file.getvalue()
        assert '+' + TRACK_B in output
        assert '-' + TRACK_A not in output
    
    def test_run_uploads_even_without_changes(self, sync_service, mock_store, console):
        """Test that an unchanged library is still uploaded and prints no diff."""
        mock_store.download.return_value = TRACK_A + '\n' + TRACK_B + '\n'
        
        report = sync_service.run()
        
        assert report.changed is False
        assert console.file.getvalue() == ''
        mock_store.upload.assert_called_once_with(TRACK_A + '\n' + TRACK_B + '\n')
    
    def test_run_passes_credentials_to_client_factory(self, sync_service, mock_spotify_client):
        sync_service.run()
        
        credentials = sync_service.spotify_client_factory.call_args.args[0]
        assert credentials.client_id == 'test_id'
        assert credentials.client_secret == 'test_secret'
        mock_spotify_client.authenticate_user.assert_called_once()
    
    def test_missing_secret_aborts_before_network(self, tmp_path, mock_store, console):
        """Test that a credentials file without the secret stops the run immediately."""
        path = tmp_path / 'credentials.json'
        path.write_text('{"spotify_client_id": "test_id"}', encoding='utf-8')
        factory = Mock()
        service = SyncService(
            credentials_path=str(path),
            store=mock_store,
            console=console,
            spotify_client_factory=factory
        )
        
        with pytest.raises(CredentialsError, match="spotify_client_secret"):
            service.run()
        
        mock_store.download.assert_not_called()
        mock_store.upload.assert_not_called()
        factory.assert_not_called()
    
    def test_missing_object_aborts_before_fetch(self, sync_service, mock_store, mock_spotify_client, console):
        """Test that a missing snapshot stops the run before Spotify is contacted."""
        mock_store.download.side_effect = SnapshotStoreError("Cannot download: NoSuchKey")
        
        with pytest.raises(SnapshotStoreError):
            sync_service.run()
        
        sync_service.spotify_client_factory.assert_not_called()
        mock_spotify_client.iter_saved_tracks.assert_not_called()
        mock_store.upload.assert_not_called()
        assert console.file.getvalue() == ''
    
    def test_fetch_error_aborts_without_upload(self, sync_service, mock_store, mock_spotify_client):
        """Test that a failing page request leaves the stored snapshot untouched."""
        def failing_pages():
            yield saved_item('A', '1970-01-01T00:01:40Z', ['X'])
            raise Exception("HTTP 500")
        mock_spotify_client.iter_saved_tracks.return_value = failing_pages()
        
        with pytest.raises(Exception, match="HTTP 500"):
            sync_service.run()
        
        mock_store.upload.assert_not_called()
    
    def test_upload_error_propagates(self, sync_service, mock_store):
        mock_store.upload.side_effect = SnapshotStoreError("Cannot upload: AccessDenied")
        
        with pytest.raises(SnapshotStoreError):
            sync_service.run()
        
        assert sync_service.report.uploaded is False


    def test_finish_logs_report(self, sync_service):
        sync_service.logger = Mock()
        
        report = sync_service.run()
        
        sync_service.logger.debug.assert_called_once_with(f"Sync report: {report.to_dict()}")
        assert report.end_time is not None
    
    def test_trailing_newline_only_change_is_counted(self, sync_service, mock_store):
        mock_store.download.return_value = TRACK_A + '\n' + TRACK_B
        
        report = sync_service.run()
        
        assert (report.lines_added, report.lines_removed) == (1, 1)
        mock_store.upload.assert_called_once_with(TRACK_A + '\n' + TRACK_B + '\n')


class TestAsyncSyncService:
    """Test cases for AsyncSyncService."""
    
    def test_run_matches_sync_result(self, sync_service, mock_store):
        report = asyncio.run(AsyncSyncService(sync_service).run())
        
        assert report.uploaded is True
        assert report.lines_added == 1
        mock_store.upload.assert_called_once_with(TRACK_A + '\n' + TRACK_B + '\n')
    
    def test_report_matches_sync_run(self, sync_service, mock_store):
        report = asyncio.run(AsyncSyncService(sync_service).run())
        
        assert report.tracks_total == 2
        assert report.end_time is not None
        assert report.to_dict()['uploaded'] is True
    
    def test_steps_run_in_order(self, sync_service, mock_store, mock_spotify_client):
        calls = []
        mock_store.download.side_effect = lambda: calls.append('download') or TRACK_A + '\n'
        mock_spotify_client.authenticate_user.side_effect = lambda: calls.append('authenticate')
        mock_store.upload.side_effect = lambda text: calls.append('upload')
        
        asyncio.run(AsyncSyncService(sync_service).run())
        
        assert calls == ['download', 'authenticate', 'upload']
    
    def test_missing_object_aborts(self, sync_service, mock_store):
        mock_store.download.side_effect = SnapshotStoreError("Cannot download: NoSuchKey")
        
        with pytest.raises(SnapshotStoreError):
            asyncio.run(AsyncSyncService(sync_service).run())
        
        sync_service.spotify_client_factory.assert_not_called()
        mock_store.upload.assert_not_called()
