from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from musicstream.domain.playback import Track


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys; snake_case is accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Accounts


class RegisterRequest(CamelModel):
    username: str
    email: str
    password: str


class LoginRequest(CamelModel):
    email: str
    password: str


class UpdateProfileRequest(CamelModel):
    username: Optional[str] = None
    email: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class UserResponse(CamelModel):
    id: str
    username: str
    email: str
    created_at: Optional[str] = None


# Tracks


class TrackModel(CamelModel):
    """A playable track; `id` is the YouTube video id."""

    id: str
    title: str
    artist: str
    thumbnail: str = ""
    duration: int = Field(default=0, ge=0)

    def to_track(self) -> Track:
        return Track(
            id=self.id,
            title=self.title,
            artist=self.artist,
            thumbnail=self.thumbnail,
            duration=self.duration,
        )


class StoredTrackRequest(CamelModel):
    """Track body for playlist and history inserts."""

    youtube_id: str
    title: str
    artist: str
    thumbnail: str
    duration: int
    position: Optional[int] = None

    def to_track(self) -> Track:
        return Track(
            id=self.youtube_id,
            title=self.title,
            artist=self.artist,
            thumbnail=self.thumbnail,
            duration=self.duration,
        )


class PlaylistTrackResponse(CamelModel):
    id: str
    playlist_id: str
    youtube_id: str
    title: str
    artist: str
    thumbnail: str
    duration: int
    position: int
    added_at: Optional[str] = None


class RecentlyPlayedResponse(CamelModel):
    id: str
    user_id: str
    youtube_id: str
    title: str
    artist: str
    thumbnail: str
    duration: int
    played_at: Optional[str] = None


# Playlists


class CreatePlaylistRequest(CamelModel):
    name: str
    description: Optional[str] = None
    cover_url: Optional[str] = None
    is_public: bool = False


class UpdatePlaylistRequest(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None
    is_public: Optional[bool] = None


class PlaylistResponse(CamelModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    cover_url: Optional[str] = None
    is_public: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True


# Player


class PlayRequest(CamelModel):
    track: TrackModel
    queue: Optional[list[TrackModel]] = None


class QueueRequest(CamelModel):
    track: TrackModel


class VolumeRequest(CamelModel):
    volume: int


class SeekRequest(CamelModel):
    seconds: float


class MuteRequest(CamelModel):
    muted: Optional[bool] = None  # None toggles


class PlayerStateResponse(CamelModel):
    current_track: Optional[TrackModel] = None
    is_playing: bool = False
    queue: list[TrackModel] = []
    current_index: int = 0
    shuffle: bool = False
    repeat: str = "none"
    volume: int = 70
    current_time: float = 0.0
    duration: float = 0.0
    muted: bool = False
    player_ready: bool = False
