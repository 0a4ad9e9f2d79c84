"""Tests for the Flask API."""

import io
import json

import pytest

import app as app_module
import gateways
from errors import GatewayError


@pytest.fixture
def client(monkeypatch, studio):
    monkeypatch.setattr(app_module, "studio", studio)
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as client:
        yield client


class TestViews:
    """Tests for the five-way view switch."""

    def test_index_serves_page(self, client):
        res = client.get("/")
        assert res.status_code == 200
        assert b"UI Forge" in res.data

    @pytest.mark.parametrize("view", ["DASHBOARD", "library", "Builder", "ANALYZER", "METHODOLOGIES"])
    def test_each_view_renders(self, client, studio, view):
        res = client.get(f"/api/views/{view}")
        assert res.status_code == 200
        assert res.json["view"] == view.upper()
        assert studio.current_view.value == view.upper()

    def test_unknown_view(self, client):
        assert client.get("/api/views/settings").status_code == 404

    def test_dashboard_counts(self, client, studio):
        studio.library.save("one", [])
        studio.library.save("two", [])
        data = client.get("/api/views/dashboard").json["data"]
        assert data["promptCount"] == 2
        assert data["methodologyCount"] == 0
        assert [e["title"] for e in data["recent"]] == ["two", "one"]

    def test_builder_groups_notes(self, client):
        data = client.get("/api/views/builder").json["data"]
        assert [c["category"] for c in data["categories"]] == ["公式", "视觉风格", "布局结构", "配色氛围", "技术细节"]
        assert data["workspace"]["composed"] == ""

    def test_library_view_search(self, client, studio):
        studio.library.save("Wealth app", ["金融"])
        studio.library.save("Game lobby", [])
        data = client.get("/api/views/library?q=金融").json["data"]
        assert [e["title"] for e in data["entries"]] == ["Wealth app"]


class TestNotesApi:
    """Tests for the fragment endpoints."""

    def test_list_by_category(self, client):
        res = client.get("/api/notes?category=公式")
        assert [n["id"] for n in res.json["notes"]] == ["f1", "f2"]

    def test_create_note(self, client, studio):
        res = client.post("/api/notes", json={
            "note": {"label": "暗色", "value": "Dark UI", "category": "配色氛围"},
            "imageUrlText": "a.png, b.png\na.png",
        })
        assert res.status_code == 200
        assert res.json["persisted"] is True
        note = res.json["note"]
        assert note["imageUrls"] == ["a.png", "b.png"]
        assert studio.fragments.get(note["id"]).label == "暗色"

    def test_edit_into_formula_deselects(self, client, studio):
        """Test that editing a selected note into a Formula removes it from the selection."""
        client.post("/api/workspace/toggle", json={"noteId": "vs1"})
        res = client.post("/api/notes", json={
            "note": {"id": "vs1", "label": "玻璃公式", "value": "FORMULA [a]", "category": "公式"},
        })
        assert res.json["note"]["category"] == "公式"

        snap = client.get("/api/workspace").json
        assert snap["selected"] == []
        assert client.post("/api/workspace/save").json["entry"] is None

    @pytest.mark.parametrize("body", [
        {"note": "oops"},
        {"note": {"label": "l", "value": "v", "category": "公式"}, "imageUrlText": ["a.png"]},
        {"note": {"label": "l", "value": "v", "category": "公式", "imageUrls": "a.png"}},
    ])
    def test_malformed_note_declined(self, client, studio, body):
        before = len(studio.fragments)
        res = client.post("/api/notes", json=body)
        assert res.status_code == 200
        assert res.json["note"] is None
        assert len(studio.fragments) == before

    def test_incomplete_note_declined(self, client, studio):
        before = len(studio.fragments)
        res = client.post("/api/notes", json={"note": {"label": "x"}})
        assert res.status_code == 200
        assert res.json["note"] is None
        assert len(studio.fragments) == before

    def test_upload_images(self, client, png_bytes):
        res = client.post(
            "/api/uploads",
            data={
                "existing": ["https://a.example/1.png", "https://a.example/2.png", "https://a.example/3.png"],
                "images": [(io.BytesIO(png_bytes), "a.png"), (io.BytesIO(png_bytes), "b.png")],
            },
            content_type="multipart/form-data",
        )
        assert res.status_code == 200
        urls = res.json["imageUrls"]
        assert len(urls) == 4
        assert urls[3].startswith("data:image/png;base64,")

    def test_upload_rejects_non_image(self, client):
        res = client.post(
            "/api/uploads",
            data={"images": [(io.BytesIO(b"text"), "a.txt")]},
            content_type="multipart/form-data",
        )
        assert res.status_code == 400


class TestWorkspaceApi:
    """Tests for the composition workspace endpoints."""

    def test_toggle_and_save(self, client, studio):
        client.post("/api/workspace/toggle", json={"noteId": "vs1"})
        client.put("/api/workspace/text", json={"freeText": "金融控制面板"})
        snap = client.get("/api/workspace").json
        assert snap["composed"] == "Glassmorphism, frosted glass effects, background blur, 金融控制面板"

        res = client.post("/api/workspace/save")
        entry = res.json["entry"]
        assert entry["tags"] == ["视觉风格"]
        assert entry["title"] == "Glassmorphism..."
        assert res.json["persisted"] is True
        assert client.get("/api/workspace").json["composed"] == ""
        assert client.get("/api/library").json["entries"][0]["id"] == entry["id"]

    def test_save_empty_workspace(self, client, studio):
        res = client.post("/api/workspace/save")
        assert res.json["entry"] is None
        assert len(studio.library) == 0

    def test_formula_modes(self, client):
        client.put("/api/workspace/text", json={"freeText": "Hello"})
        snap = client.post("/api/workspace/toggle", json={"noteId": "f2", "mode": "append"}).json
        assert snap["freeText"].startswith("Hello\nMinimalist")
        assert snap["selected"] == []

        snap = client.post("/api/workspace/toggle", json={"noteId": "f1", "mode": "replace"}).json
        assert snap["freeText"] == "[主体内容], [视觉风格], [布局结构], [配色氛围], [技术细节]"

    def test_toggle_unknown_note(self, client):
        assert client.post("/api/workspace/toggle", json={"noteId": "zzz"}).status_code == 404

    def test_toggle_bad_mode(self, client):
        res = client.post("/api/workspace/toggle", json={"noteId": "f1", "mode": "merge"})
        assert res.status_code == 400

    def test_remove_and_clear(self, client):
        client.post("/api/workspace/toggle", json={"noteId": "vs1"})
        client.post("/api/workspace/toggle", json={"noteId": "ls1"})
        snap = client.post("/api/workspace/remove", json={"noteId": "vs1"}).json
        assert [n["id"] for n in snap["selected"]] == ["ls1"]
        snap = client.post("/api/workspace/clear").json
        assert snap["selected"] == [] and snap["freeText"] == ""

    def test_refine_success(self, client, monkeypatch):
        calls = []

        def fake_refine(raw, model):
            calls.append((raw, model))
            return "专业化润色结果"

        monkeypatch.setattr(gateways, "refine_prompt", fake_refine)
        client.post("/api/workspace/toggle", json={"noteId": "td1"})
        res = client.post("/api/workspace/refine", json={"model": "gemini-2.5-flash"})

        assert res.status_code == 200
        assert res.json["freeText"] == "专业化润色结果"
        assert res.json["selected"] == []
        assert calls == [("Anti-aliasing, crystal sharp edges", "gemini-2.5-flash")]

    def test_refine_failure(self, client, monkeypatch):
        def fake_refine(raw, model):
            raise GatewayError("quota")

        monkeypatch.setattr(gateways, "refine_prompt", fake_refine)
        client.post("/api/workspace/toggle", json={"noteId": "td1"})
        res = client.post("/api/workspace/refine", json={})

        assert res.status_code == 502
        assert "quota" in res.json["error"]
        assert [n["id"] for n in client.get("/api/workspace").json["selected"]] == ["td1"]

    def test_refine_unknown_model(self, client):
        assert client.post("/api/workspace/refine", json={"model": "gpt-x"}).status_code == 400

    def test_refine_busy(self, client, studio, monkeypatch):
        monkeypatch.setattr(gateways, "refine_prompt", lambda raw, model: "x")
        studio.builder.set_text("busy")
        studio.builder._busy.acquire()
        try:
            assert client.post("/api/workspace/refine", json={}).status_code == 409
        finally:
            studio.builder._busy.release()

    def test_persistence_failure_is_reported(self, client, studio, monkeypatch):
        monkeypatch.setattr(studio.storage, "save", lambda key, value: False)
        studio.builder.set_text("Some prompt")
        res = client.post("/api/workspace/save")
        assert res.json["entry"] is not None
        assert res.json["persisted"] is False


class TestAnalyzerApi:
    """Tests for the style analyzer endpoints."""

    def test_full_flow(self, client, studio, monkeypatch, png_bytes, analysis):
        monkeypatch.setattr(gateways, "analyze_ui_style", lambda image, model: analysis)

        res = client.post(
            "/api/analyzer/image",
            data={"image": (io.BytesIO(png_bytes), "shot.png")},
            content_type="multipart/form-data",
        )
        assert res.json["state"] == "IMAGE_READY"

        res = client.post("/api/analyzer/analyze", json={})
        assert res.status_code == 200
        assert res.json["state"] == "RESULT_READY"
        assert res.json["result"]["colorPalette"] == ["#4F46E5", "#F8FAFC"]

        res = client.post("/api/analyzer/save")
        assert res.json["methodology"]["name"] == "研究报告：Glassmorphism 设计"
        assert client.get("/api/analyzer").json["state"] == "IDLE"
        assert len(client.get("/api/methodologies").json["methodologies"]) == 1

        persisted = studio.storage.load("uiforge_methodologies")
        assert persisted[0]["analysis"]["typography"] == analysis.typography

    def test_json_image_and_failure(self, client, monkeypatch, png_data_url):
        def boom(image, model):
            raise RuntimeError("invalid api key")

        monkeypatch.setattr(gateways, "analyze_ui_style", boom)
        client.post("/api/analyzer/image", data=json.dumps({"imageData": png_data_url}),
                    content_type="application/json")

        res = client.post("/api/analyzer/analyze", json={})
        assert res.status_code == 502
        snap = client.get("/api/analyzer").json
        assert snap["state"] == "IMAGE_READY"
        assert snap["image"] == png_data_url
        assert snap["result"] is None

    def test_invalid_image(self, client):
        res = client.post("/api/analyzer/image", json={"imageData": "nope"})
        assert res.status_code == 400

    def test_save_without_result(self, client):
        res = client.post("/api/analyzer/save")
        assert res.json["methodology"] is None

    def test_reset(self, client, png_data_url):
        client.post("/api/analyzer/image", json={"imageData": png_data_url})
        assert client.post("/api/analyzer/reset").json["state"] == "IDLE"


class TestModelsApi:
    def test_lists_models(self, client):
        data = client.get("/api/models").json
        assert data["default"] in data["models"]
