import logging
import threading
from enum import Enum

from errors import AnalysisFailed, WorkspaceBusy
from images import parse_data_url

logger = logging.getLogger(__name__)


class AnalyzerState(str, Enum):
    IDLE = "IDLE"
    IMAGE_READY = "IMAGE_READY"
    ANALYZING = "ANALYZING"
    RESULT_READY = "RESULT_READY"


class AnalyzerSession:
    """Screenshot -> style analysis -> saved methodology.

    IDLE -> IMAGE_READY -> ANALYZING -> RESULT_READY -> (save) IDLE.
    A failed analysis falls back to IMAGE_READY with the image kept.
    """

    def __init__(self):
        self.image = None
        self.result = None
        self._busy = threading.Lock()

    @property
    def state(self):
        if self._busy.locked():
            return AnalyzerState.ANALYZING
        if self.result is not None:
            return AnalyzerState.RESULT_READY
        if self.image:
            return AnalyzerState.IMAGE_READY
        return AnalyzerState.IDLE

    def select_image(self, image_data):
        parse_data_url(image_data)
        if self._busy.locked():
            raise WorkspaceBusy("An analysis is already in progress")
        self.image = image_data
        self.result = None

    def analyze(self, analyze_fn):
        if not self.image:
            return None
        if self.result is not None:
            return self.result
        if not self._busy.acquire(blocking=False):
            raise WorkspaceBusy("An analysis is already in progress")
        try:
            result = analyze_fn(self.image)
        except AnalysisFailed:
            raise
        except Exception as e:
            logger.warning(f"Analysis raised {type(e).__name__}: {e}")
            raise AnalysisFailed(str(e)) from e
        finally:
            self._busy.release()
        self.result = result
        return result

    def save_to(self, store):
        methodology = store.save(self.image, self.result)
        if methodology is not None:
            self.reset()
        return methodology

    def reset(self):
        self.image = None
        self.result = None

    def snapshot(self):
        return {
            "state": self.state.value,
            "image": self.image,
            "result": self.result.to_dict() if self.result is not None else None,
        }
