"""
Webcam capture with guaranteed device release.

A CameraSession holds a media stream from a MediaDevice. However the session
ends (capture finished, explicit close, an error, or the session object being
collected) every track of the stream is stopped.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from barbermatch.logger import get_logger
from barbermatch.utils.data_uri import to_data_uri

logger = get_logger(__name__)


class CameraError(RuntimeError):
    pass


class MediaTrack(ABC):
    kind: str = "video"

    @property
    @abstractmethod
    def live(self) -> bool:
        """True until stop() has been called"""

    @abstractmethod
    def stop(self) -> None:
        ...


class MediaStream(ABC):
    @abstractmethod
    def get_tracks(self) -> List[MediaTrack]:
        ...

    @abstractmethod
    def grab_frame(self, mime_type: str) -> bytes:
        """Encode the current video frame"""


class MediaDevice(ABC):
    @abstractmethod
    def get_user_media(self, facing_mode: str = "user") -> MediaStream:
        """Acquire the camera; raises CameraError when it is unavailable"""


class CameraSession:
    def __init__(self, device: MediaDevice, facing_mode: str = "user"):
        self.device = device
        self.facing_mode = facing_mode
        self._stream: Optional[MediaStream] = None

    @property
    def active(self) -> bool:
        return self._stream is not None

    def open(self) -> MediaStream:
        if self._stream is None:
            self._stream = self.device.get_user_media(facing_mode=self.facing_mode)
            logger.debug("Camera stream acquired")
        return self._stream

    def capture(self, mime_type: str = "image/jpeg") -> str:
        """Grab one frame as a data URI, then release the camera"""
        stream = self.open()
        try:
            frame = stream.grab_frame(mime_type)
        finally:
            self.close()
        if not frame:
            raise CameraError("Camera returned an empty frame")
        return to_data_uri(mime_type, frame)

    def close(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        for track in stream.get_tracks():
            try:
                track.stop()
            except Exception as e:
                logger.warning(f"Failed to stop {track.kind} track: {e}")
        logger.debug("Camera stream released")

    def __enter__(self) -> "CameraSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self):
        self.close()


def capture_photo(device: MediaDevice, mime_type: str = "image/jpeg", facing_mode: str = "user") -> str:
    with CameraSession(device, facing_mode=facing_mode) as session:
        return session.capture(mime_type)
