"""Normalization of saved tracks and the newline-delimited JSON snapshot format."""

import json
from datetime import datetime, timezone
from typing import Dict, Iterable, List


class NormalizedTrack:
    """Minimal persisted representation of a liked song."""

    def __init__(
        self,
        song_name: str,
        added_at: int,
        artist_names: List[str],
        album_name: str
    ):
        """
        Initialize normalized track.

        Args:
            song_name: Track title
            added_at: Unix timestamp (seconds) at which the track was liked
            artist_names: Artist display names, stored sorted ascending
            album_name: Album title
        """
        self.song_name = song_name
        self.added_at = added_at
        self.artist_names = sorted(artist_names)
        self.album_name = album_name

    def sort_key(self):
        return (self.added_at, self.song_name)

    def to_dict(self) -> Dict:
        """Convert to dictionary in serialized field order."""
        return {
            'song_name': self.song_name,
            'added_at': self.added_at,
            'artist_names': list(self.artist_names),
            'album_name': self.album_name,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, NormalizedTrack):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"NormalizedTrack(song_name={self.song_name!r}, added_at={self.added_at})"


def parse_added_at(value: str) -> int:
    """
    Convert a Spotify 'added_at' timestamp to integer Unix seconds.

    Args:
        value: ISO-8601 timestamp such as '2023-04-01T12:30:00Z'

    Returns:
        Seconds since the epoch (UTC)
    """
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


def normalize_track(entry: Dict) -> NormalizedTrack:
    """
    Map a raw saved-track item to a NormalizedTrack.

    The payload is assumed well-formed; a missing field raises KeyError.

    Args:
        entry: Saved-track item as returned by the Spotify API

    Returns:
        NormalizedTrack with artist names sorted
    """
    track = entry['track']
    return NormalizedTrack(
        song_name=track['name'],
        added_at=parse_added_at(entry['added_at']),
        artist_names=[artist['name'] for artist in track['artists']],
        album_name=track['album']['name']
    )


def sort_tracks(tracks: Iterable[NormalizedTrack]) -> List[NormalizedTrack]:
    """Order tracks by added_at, then song_name."""
    return sorted(tracks, key=NormalizedTrack.sort_key)


def serialize_snapshot(tracks: Iterable[NormalizedTrack]) -> str:
    """
    Render tracks as snapshot text.

    Tracks are sorted, each one is written as a compact JSON object on its
    own line, and the text ends with a newline. The same multiset of tracks
    always yields byte-identical text.

    Args:
        tracks: Normalized tracks in any order

    Returns:
        Snapshot text
    """
    lines = [
        json.dumps(track.to_dict(), separators=(',', ':'), ensure_ascii=False)
        for track in sort_tracks(tracks)
    ]
    return '\n'.join(lines) + '\n'


def split_lines(text: str, keepends: bool = False) -> List[str]:
    """
    Split snapshot text on '\\n' only.

    Unlike str.splitlines(), characters such as U+2028 that JSON leaves
    unescaped inside names do not end a line.

    Args:
        text: Snapshot text
        keepends: Keep the '\\n' at the end of each line that has one

    Returns:
        Lines; a final line without a newline is kept as-is
    """
    lines = text.split('\n')
    last = lines.pop()
    if keepends:
        lines = [line + '\n' for line in lines]
    if last:
        lines.append(last)
    return lines
