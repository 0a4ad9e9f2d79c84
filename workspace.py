import logging
import threading
from enum import Enum

from errors import GatewayError, WorkspaceBusy
from models import Category

logger = logging.getLogger(__name__)


class ApplyMode(str, Enum):
    APPEND = "append"
    REPLACE = "replace"


class CompositionWorkspace:
    """Transient selection of fragments plus free text, composed into one prompt.

    Formula fragments never join the selection; they rewrite the free text
    according to an ApplyMode the caller obtained from the user.
    """

    def __init__(self):
        self.selected = []
        self.free_text = ""
        self._busy = threading.Lock()

    @property
    def refining(self):
        return self._busy.locked()

    def is_selected(self, fragment_id):
        return any(f.id == fragment_id for f in self.selected)

    def toggle(self, fragment, mode=ApplyMode.APPEND):
        if self.is_selected(fragment.id):
            self.remove(fragment.id)
        elif fragment.category is Category.FORMULA:
            self.apply_formula(fragment, mode)
        else:
            self.selected.append(fragment)

    def apply_formula(self, fragment, mode=ApplyMode.APPEND):
        if self.free_text and ApplyMode(mode) is ApplyMode.APPEND:
            self.free_text = self.free_text + "\n" + fragment.value
        else:
            self.free_text = fragment.value

    def remove(self, fragment_id):
        self.selected = [f for f in self.selected if f.id != fragment_id]

    def drop_formulas(self):
        """Deselect fragments that were edited into the Formula category."""
        self.selected = [f for f in self.selected if f.category is not Category.FORMULA]

    def set_text(self, text):
        self.free_text = text or ""

    def composed_text(self):
        pieces = [f.value for f in self.selected]
        if self.free_text:
            pieces.append(self.free_text)
        return ", ".join(pieces)

    def tags(self):
        return [f.category.value for f in self.selected]

    def clear(self):
        self.selected = []
        self.free_text = ""

    def refine(self, refine_fn):
        """Run the composed text through refine_fn and adopt the result.

        Only one refinement may be in flight; a second call raises WorkspaceBusy.
        On failure the workspace is left untouched and GatewayError propagates.
        """
        raw = self.composed_text()
        if not raw:
            return None
        if not self._busy.acquire(blocking=False):
            raise WorkspaceBusy("A refinement is already in progress")
        try:
            refined = refine_fn(raw)
        except GatewayError:
            raise
        except Exception as e:
            logger.warning(f"Refinement raised {type(e).__name__}: {e}")
            raise GatewayError(str(e)) from e
        finally:
            self._busy.release()

        self.free_text = refined or raw
        self.selected = []
        return self.free_text

    def save_to(self, library):
        entry = library.save(self.composed_text(), self.tags())
        if entry is not None:
            self.clear()
        return entry

    def snapshot(self):
        return {
            "selected": [f.to_dict() for f in self.selected],
            "freeText": self.free_text,
            "composed": self.composed_text(),
            "refining": self.refining,
        }
