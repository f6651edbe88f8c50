"""Unit tests for the sync_liked_songs entry point."""

import pytest
from unittest.mock import AsyncMock, Mock, patch
import sync_liked_songs


class TestMain:
    """Test cases for main()."""
    
    def test_parser_defaults(self):
        args = sync_liked_songs.build_parser().parse_args([])
        
        assert args.credentials == 'credentials.json'
        assert args.log_file is None
    
    @patch('sync_liked_songs.load_dotenv')
    @patch('sync_liked_songs.AsyncSyncService')
    @patch('sync_liked_songs.SyncService')
    def test_main_success(self, mock_service_class, mock_async_class, mock_dotenv):
        mock_async_class.return_value.run = AsyncMock(return_value=Mock(tracks_total=3))
        
        sync_liked_songs.main(['--credentials', 'creds.json'])
        
        mock_dotenv.assert_called_once()
        mock_service_class.assert_called_once_with(credentials_path='creds.json', log_file=None)
        mock_async_class.assert_called_once_with(mock_service_class.return_value)
    
    @patch('sync_liked_songs.load_dotenv')
    @patch('sync_liked_songs.AsyncSyncService')
    @patch('sync_liked_songs.SyncService')
    def test_main_fatal_error_exits_1(self, mock_service_class, mock_async_class, mock_dotenv):
        mock_async_class.return_value.run = AsyncMock(side_effect=Exception("boom"))
        
        with pytest.raises(SystemExit) as exc_info:
            sync_liked_songs.main([])
        
        assert exc_info.value.code == 1
    
    @patch('sync_liked_songs.load_dotenv')
    @patch('sync_liked_songs.asyncio.run', side_effect=KeyboardInterrupt())
    @patch('sync_liked_songs.AsyncSyncService')
    @patch('sync_liked_songs.SyncService')
    def test_main_interrupted_exits_130(self, mock_service_class, mock_async_class, mock_run, mock_dotenv):
        with pytest.raises(SystemExit) as exc_info:
            sync_liked_songs.main([])
        
        assert exc_info.value.code == 130
