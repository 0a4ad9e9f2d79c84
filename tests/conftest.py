import base64
import io
import os
import tempfile

# Keep the module-level studio in app.py away from the working directory.
os.environ.setdefault("UIFORGE_DATA_DIR", tempfile.mkdtemp(prefix="uiforge-test-"))

import pytest
from PIL import Image

from models import StyleAnalysis
from storage import JsonStorage
from studio import Studio


@pytest.fixture
def storage(tmp_path):
    return JsonStorage(str(tmp_path / "data"))


@pytest.fixture
def studio(storage):
    return Studio(storage)


@pytest.fixture
def png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), (79, 70, 229)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_data_url(png_bytes):
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("utf-8")


@pytest.fixture
def analysis_payload():
    return {
        "visualStyle": "Glassmorphism 风格，半透明层次",
        "colorPalette": ["#4F46E5", "#F8FAFC"],
        "typography": "Inter，几何无衬线",
        "layoutLogic": "12 栏栅格，卡片分区",
        "methodologySteps": ["建立栅格", "设置背景模糊", "统一圆角", "控制留白", "校准对比度"],
    }


@pytest.fixture
def analysis(analysis_payload):
    return StyleAnalysis.from_dict(analysis_payload)
