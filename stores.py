import logging
import re
import threading

from config import MAX_NOTE_IMAGES, METHODOLOGIES_KEY, NOTES_KEY, PROMPTS_KEY
from models import Category, Fragment, LibraryEntry, Methodology, new_id, now_ms
from seed import seed_fragments

logger = logging.getLogger(__name__)

LIBRARY_CATEGORY = "生成作品"
TITLE_LIMIT = 30
ELLIPSIS = "..."


def merge_image_urls(existing, freeform_text):
    """Union existing URLs with the newline/comma separated URLs in freeform_text.

    Order is existing first, then new; duplicates keep their first occurrence.
    """
    pieces = [p.strip() for p in re.split(r"[\n,]+", freeform_text or "")]
    merged = []
    for url in list(existing or []) + [p for p in pieces if p]:
        if url not in merged:
            merged.append(url)
    return merged


def make_title(content):
    title = content.split(",")[0][:TITLE_LIMIT]
    if len(content) > TITLE_LIMIT:
        title += ELLIPSIS
    return title


class _SnapshotStore:
    key = None

    def __init__(self, storage):
        self.storage = storage
        self._items = self._load()
        self._write_lock = threading.Lock()

    def _default(self):
        return []

    def _decode(self, data):
        raise NotImplementedError

    def _load(self):
        raw = self.storage.load(self.key)
        if raw is None:
            return self._default()
        if not isinstance(raw, list):
            logger.warning(f"Snapshot {self.key!r} is not a list, using default")
            return self._default()
        items = []
        for index, data in enumerate(raw):
            try:
                items.append(self._decode(data))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed record {index} in {self.key!r}: {e}")
        return items

    def persist(self):
        """Write the whole collection back to storage. Returns True on success."""
        # One writer at a time; the last write carries the newest snapshot
        with self._write_lock:
            return self.storage.save(self.key, [item.to_dict() for item in self._items])

    def __len__(self):
        return len(self._items)


class FragmentStore(_SnapshotStore):
    key = NOTES_KEY

    def _default(self):
        return seed_fragments()

    def _decode(self, data):
        return Fragment.from_dict(data)

    def get(self, fragment_id):
        for fragment in self._items:
            if fragment.id == fragment_id:
                return fragment
        return None

    def list(self, category=None):
        if category is None:
            return list(self._items)
        category = Category.parse(category)
        return [f for f in self._items if f.category is category]

    def grouped(self):
        return {category: self.list(category) for category in Category}

    def upsert(self, draft, image_url_text=""):
        """Create or edit a fragment from a draft dict.

        Returns the stored Fragment, or None when label, value or category is
        missing or the draft is malformed. Editing an existing id mutates that
        fragment in place. A note keeps at most MAX_NOTE_IMAGES images.
        """
        if not isinstance(draft, dict) or not isinstance(image_url_text, str):
            return None
        existing_urls = draft.get("imageUrls") or []
        if not isinstance(existing_urls, list) or not all(isinstance(u, str) for u in existing_urls):
            return None
        label = draft.get("label")
        value = draft.get("value")
        category = Category.parse(draft.get("category"))
        if not label or not value or category is None:
            return None

        image_urls = merge_image_urls(existing_urls, image_url_text)[:MAX_NOTE_IMAGES]

        existing = self.get(draft.get("id")) if draft.get("id") else None
        if existing is not None:
            existing.label = label
            existing.value = value
            existing.category = category
            existing.image_urls = image_urls
            return existing

        fragment = Fragment(
            id=self._fresh_id(),
            label=label,
            value=value,
            category=category,
            image_urls=image_urls,
        )
        self._items.append(fragment)
        return fragment

    def _fresh_id(self):
        taken = {f.id for f in self._items}
        fragment_id = new_id()
        while fragment_id in taken:
            fragment_id = new_id()
        return fragment_id


class LibraryStore(_SnapshotStore):
    key = PROMPTS_KEY

    def _decode(self, data):
        return LibraryEntry.from_dict(data)

    def list(self):
        return list(self._items)

    def recent(self, n=3):
        return self._items[:n]

    def save(self, composed_text, tags):
        if not composed_text:
            return None
        entry = LibraryEntry(
            id=new_id(),
            title=make_title(composed_text),
            content=composed_text,
            tags=tuple(tags),
            category=LIBRARY_CATEGORY,
            created_at=now_ms(),
        )
        self._items.insert(0, entry)
        return entry

    def search(self, query=""):
        q = (query or "").lower()
        if not q:
            return list(self._items)
        return [
            entry for entry in self._items
            if q in entry.title.lower() or any(q in tag.lower() for tag in entry.tags)
        ]


class MethodologyStore(_SnapshotStore):
    key = METHODOLOGIES_KEY

    def _decode(self, data):
        return Methodology.from_dict(data)

    def list(self):
        return list(self._items)

    def save(self, source_image, analysis):
        if not source_image or analysis is None:
            return None
        first_token = analysis.visual_style.split(" ")[0]
        methodology = Methodology(
            id=new_id(),
            name=f"研究报告：{first_token} 设计",
            image_url=source_image,
            analysis=analysis,
            created_at=now_ms(),
        )
        self._items.insert(0, methodology)
        return methodology
