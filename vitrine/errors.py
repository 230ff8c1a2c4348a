from __future__ import annotations


class PlaylistError(Exception):
    """Import failure with a message that can be shown to the user as is."""


class EmptyPlaylistError(PlaylistError):
    def __init__(self, message: str = "No valid media entries found in playlist."):
        super().__init__(message)


class PlaylistFetchError(PlaylistError):
    def __init__(self, url: str, message: str = "Could not load playlist from the given URL"):
        super().__init__(message)
        self.url = url
