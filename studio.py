from analyzer import AnalyzerSession
from config import DATA_DIR
from models import ViewType
from storage import JsonStorage
from stores import FragmentStore, LibraryStore, MethodologyStore
from workspace import CompositionWorkspace


def render_dashboard(studio, args):
    return {
        "promptCount": len(studio.library),
        "methodologyCount": len(studio.methodologies),
        "recent": [entry.to_dict() for entry in studio.library.recent(3)],
    }


def render_library(studio, args):
    query = args.get("q", "")
    return {
        "query": query,
        "entries": [entry.to_dict() for entry in studio.library.search(query)],
    }


def render_builder(studio, args):
    return {
        "categories": [
            {"category": category.value, "notes": [n.to_dict() for n in notes]}
            for category, notes in studio.fragments.grouped().items()
        ],
        "workspace": studio.builder.snapshot(),
    }


def render_analyzer(studio, args):
    return studio.analyzer.snapshot()


def render_methodologies(studio, args):
    return {"methodologies": [m.to_dict() for m in studio.methodologies.list()]}


VIEW_RENDERERS = {
    ViewType.DASHBOARD: render_dashboard,
    ViewType.LIBRARY: render_library,
    ViewType.BUILDER: render_builder,
    ViewType.ANALYZER: render_analyzer,
    ViewType.METHODOLOGIES: render_methodologies,
}


class Studio:
    """Process-wide state: the three durable stores and the two active workspaces."""

    def __init__(self, storage):
        self.storage = storage
        self.fragments = FragmentStore(storage)
        self.library = LibraryStore(storage)
        self.methodologies = MethodologyStore(storage)
        self.builder = CompositionWorkspace()
        self.analyzer = AnalyzerSession()
        self.current_view = ViewType.DASHBOARD

    @classmethod
    def open(cls, data_dir=DATA_DIR):
        return cls(JsonStorage(data_dir))

    def show(self, view, args=None):
        self.current_view = ViewType(view)
        return VIEW_RENDERERS[self.current_view](self, args or {})
