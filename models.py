import time
from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4


class Category(str, Enum):
    FORMULA = "公式"
    VISUAL_STYLE = "视觉风格"
    LAYOUT = "布局结构"
    COLOR_MOOD = "配色氛围"
    TECHNICAL_DETAIL = "技术细节"

    @classmethod
    def parse(cls, value):
        """Accept a Category, its display label or its enum name. Returns None if unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        for category in cls:
            if value in (category.value, category.name):
                return category
        return None


class ViewType(str, Enum):
    DASHBOARD = "DASHBOARD"
    LIBRARY = "LIBRARY"
    BUILDER = "BUILDER"
    ANALYZER = "ANALYZER"
    METHODOLOGIES = "METHODOLOGIES"


def new_id():
    return uuid4().hex[:9]


def now_ms():
    return int(time.time() * 1000)


@dataclass
class Fragment:
    id: str
    label: str
    value: str
    category: Category
    image_urls: list = field(default_factory=list)

    def to_dict(self):
        return {
            "id": self.id,
            "label": self.label,
            "value": self.value,
            "category": self.category.value,
            "imageUrls": list(self.image_urls),
        }

    @classmethod
    def from_dict(cls, data):
        category = Category.parse(data["category"])
        if category is None:
            raise ValueError(f"unknown category: {data['category']!r}")
        return cls(
            id=data["id"],
            label=data["label"],
            value=data["value"],
            category=category,
            image_urls=list(data.get("imageUrls") or []),
        )


@dataclass(frozen=True)
class LibraryEntry:
    id: str
    title: str
    content: str
    tags: tuple
    category: str
    created_at: int

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "tags": list(self.tags),
            "category": self.category,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data["id"],
            title=data["title"],
            content=data["content"],
            tags=tuple(data.get("tags") or ()),
            category=data.get("category", ""),
            created_at=int(data.get("createdAt", 0)),
        )


ANALYSIS_FIELDS = ("visualStyle", "colorPalette", "typography", "layoutLogic", "methodologySteps")


@dataclass(frozen=True)
class StyleAnalysis:
    visual_style: str
    color_palette: tuple
    typography: str
    layout_logic: str
    methodology_steps: tuple

    def to_dict(self):
        return {
            "visualStyle": self.visual_style,
            "colorPalette": list(self.color_palette),
            "typography": self.typography,
            "layoutLogic": self.layout_logic,
            "methodologySteps": list(self.methodology_steps),
        }

    @classmethod
    def from_dict(cls, data):
        """Build from the remote payload. Raises ValueError on a missing or malformed field."""
        if not isinstance(data, dict):
            raise ValueError("analysis payload is not an object")
        missing = [name for name in ANALYSIS_FIELDS if name not in data]
        if missing:
            raise ValueError(f"analysis payload missing fields: {', '.join(missing)}")
        for name in ("visualStyle", "typography", "layoutLogic"):
            if not isinstance(data[name], str):
                raise ValueError(f"{name} must be a string")
        for name in ("colorPalette", "methodologySteps"):
            if not isinstance(data[name], list) or not all(isinstance(x, str) for x in data[name]):
                raise ValueError(f"{name} must be a list of strings")
        return cls(
            visual_style=data["visualStyle"],
            color_palette=tuple(data["colorPalette"]),
            typography=data["typography"],
            layout_logic=data["layoutLogic"],
            methodology_steps=tuple(data["methodologySteps"]),
        )


@dataclass(frozen=True)
class Methodology:
    id: str
    name: str
    image_url: str
    analysis: StyleAnalysis
    created_at: int

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "imageUrl": self.image_url,
            "analysis": self.analysis.to_dict(),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data["id"],
            name=data["name"],
            image_url=data["imageUrl"],
            analysis=StyleAnalysis.from_dict(data["analysis"]),
            created_at=int(data.get("createdAt", 0)),
        )
