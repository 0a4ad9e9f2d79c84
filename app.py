import logging
import time
from functools import partial

from flask import Flask, request, jsonify

import gateways
from config import DEBUG, DEFAULT_MODEL, MAX_NOTE_IMAGES, PORT
from errors import AnalysisFailed, GatewayError, InvalidImage, WorkspaceBusy
from images import append_uploads, to_data_url
from models import ViewType
from studio import Studio
from workspace import ApplyMode

app = Flask(__name__)

studio = Studio.open()


def pick_model(data):
    model = data.get("model") or DEFAULT_MODEL
    if model not in gateways.AVAILABLE_MODELS:
        return None
    return model


@app.route("/")
def index():
    return HTML_PAGE


@app.route("/api/models")
def list_models():
    return jsonify({"models": gateways.AVAILABLE_MODELS, "default": DEFAULT_MODEL})


@app.route("/api/views/<name>")
def show_view(name):
    try:
        view = ViewType(name.upper())
    except ValueError:
        return jsonify({"error": f"Unknown view: {name}"}), 404
    return jsonify({"view": view.value, "data": studio.show(view, request.args)})


# Fragment store

@app.route("/api/notes")
def list_notes():
    category = request.args.get("category")
    return jsonify({"notes": [n.to_dict() for n in studio.fragments.list(category)]})


@app.route("/api/notes", methods=["POST"])
def upsert_note():
    data = request.get_json(silent=True) or {}
    note = studio.fragments.upsert(data.get("note") or {}, data.get("imageUrlText", ""))
    if note is None:
        return jsonify({"note": None, "persisted": False})
    studio.builder.drop_formulas()
    persisted = studio.fragments.persist()
    return jsonify({"note": note.to_dict(), "persisted": persisted})


@app.route("/api/uploads", methods=["POST"])
def upload_images():
    """Turn uploaded files into data URLs, respecting the per-note image cap."""
    files = request.files.getlist("images")
    if not files:
        return jsonify({"error": "No images provided"}), 400
    existing = request.form.getlist("existing")

    try:
        urls = [to_data_url(f.read()) for f in files]
    except InvalidImage as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({"imageUrls": append_uploads(existing, urls, limit=MAX_NOTE_IMAGES)})


# Composition workspace

@app.route("/api/workspace")
def get_workspace():
    return jsonify(studio.builder.snapshot())


@app.route("/api/workspace/toggle", methods=["POST"])
def toggle_note():
    data = request.get_json(silent=True) or {}
    note = studio.fragments.get(data.get("noteId"))
    if note is None:
        return jsonify({"error": "Unknown note"}), 404
    try:
        mode = ApplyMode(data.get("mode", ApplyMode.APPEND.value))
    except ValueError:
        return jsonify({"error": f"Unknown mode: {data.get('mode')}"}), 400

    studio.builder.toggle(note, mode)
    return jsonify(studio.builder.snapshot())


@app.route("/api/workspace/remove", methods=["POST"])
def remove_note():
    data = request.get_json(silent=True) or {}
    studio.builder.remove(data.get("noteId"))
    return jsonify(studio.builder.snapshot())


@app.route("/api/workspace/text", methods=["PUT"])
def set_text():
    data = request.get_json(silent=True) or {}
    text = data.get("freeText", "")
    if not isinstance(text, str):
        return jsonify({"error": "freeText must be a string"}), 400
    studio.builder.set_text(text)
    return jsonify(studio.builder.snapshot())


@app.route("/api/workspace/clear", methods=["POST"])
def clear_workspace():
    studio.builder.clear()
    return jsonify(studio.builder.snapshot())


@app.route("/api/workspace/refine", methods=["POST"])
def refine_workspace():
    data = request.get_json(silent=True) or {}
    model = pick_model(data)
    if model is None:
        return jsonify({"error": f"Unknown model: {data.get('model')}"}), 400

    try:
        start = time.time()
        studio.builder.refine(partial(gateways.refine_prompt, model=model))
        elapsed = round(time.time() - start, 1)
    except WorkspaceBusy as e:
        return jsonify({"error": str(e)}), 409
    except GatewayError as e:
        return jsonify({"error": f"润色失败：{e}"}), 502

    return jsonify({**studio.builder.snapshot(), "elapsed": elapsed})


@app.route("/api/workspace/save", methods=["POST"])
def save_workspace():
    entry = studio.builder.save_to(studio.library)
    if entry is None:
        return jsonify({"entry": None, "persisted": False})
    persisted = studio.library.persist()
    return jsonify({"entry": entry.to_dict(), "persisted": persisted})


# Library and methodologies

@app.route("/api/library")
def search_library():
    entries = studio.library.search(request.args.get("q", ""))
    return jsonify({"entries": [e.to_dict() for e in entries]})


@app.route("/api/methodologies")
def list_methodologies():
    return jsonify({"methodologies": [m.to_dict() for m in studio.methodologies.list()]})


# Style analyzer

@app.route("/api/analyzer")
def get_analyzer():
    return jsonify(studio.analyzer.snapshot())


@app.route("/api/analyzer/image", methods=["POST"])
def select_analyzer_image():
    upload = request.files.get("image")
    try:
        if upload is not None:
            image_data = to_data_url(upload.read())
        else:
            data = request.get_json(silent=True) or {}
            image_data = data.get("imageData", "")
        studio.analyzer.select_image(image_data)
    except InvalidImage as e:
        return jsonify({"error": str(e)}), 400
    except WorkspaceBusy as e:
        return jsonify({"error": str(e)}), 409
    return jsonify(studio.analyzer.snapshot())


@app.route("/api/analyzer/analyze", methods=["POST"])
def analyze_image():
    data = request.get_json(silent=True) or {}
    model = pick_model(data)
    if model is None:
        return jsonify({"error": f"Unknown model: {data.get('model')}"}), 400

    try:
        start = time.time()
        studio.analyzer.analyze(partial(gateways.analyze_ui_style, model=model))
        elapsed = round(time.time() - start, 1)
    except WorkspaceBusy as e:
        return jsonify({"error": str(e)}), 409
    except AnalysisFailed as e:
        return jsonify({"error": f"解析失败，请检查 API 密钥设置。({e})"}), 502

    return jsonify({**studio.analyzer.snapshot(), "elapsed": elapsed})


@app.route("/api/analyzer/save", methods=["POST"])
def save_analysis():
    methodology = studio.analyzer.save_to(studio.methodologies)
    if methodology is None:
        return jsonify({"methodology": None, "persisted": False})
    persisted = studio.methodologies.persist()
    return jsonify({"methodology": methodology.to_dict(), "persisted": persisted})


@app.route("/api/analyzer/reset", methods=["POST"])
def reset_analyzer():
    studio.analyzer.reset()
    return jsonify(studio.analyzer.snapshot())


HTML_PAGE = r"""<!DOCTYPE html>
<html lang="zh-CN">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>UI Forge</title>
<style>
  *, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }

  body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    background: #f8fafc;
    color: #1e293b;
    height: 100vh;
    overflow: hidden;
  }

  .layout { display: flex; height: 100vh; }

  aside {
    width: 240px;
    background: #fff;
    border-right: 1px solid #e2e8f0;
    padding: 24px 16px;
    display: flex;
    flex-direction: column;
    gap: 6px;
    flex-shrink: 0;
  }
  aside h1 { font-size: 1.1rem; margin: 0 8px 20px; color: #4f46e5; }

  .nav-btn {
    text-align: left;
    background: none;
    border: none;
    padding: 10px 12px;
    border-radius: 10px;
    font-size: 0.88rem;
    color: #475569;
    cursor: pointer;
  }
  .nav-btn:hover { background: #f1f5f9; }
  .nav-btn.active { background: #eef2ff; color: #4338ca; font-weight: 600; }

  main { flex: 1; overflow-y: auto; padding: 32px 40px 80px; }
  main h2 { font-size: 1.8rem; margin-bottom: 6px; }
  .sub { color: #64748b; margin-bottom: 24px; }

  .grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(260px, 1fr)); gap: 16px; }
  .card {
    background: #fff;
    border: 1px solid #e2e8f0;
    border-radius: 16px;
    padding: 18px;
    display: flex;
    flex-direction: column;
    gap: 10px;
  }
  .card h3 { font-size: 1rem; }
  .card p { font-size: 0.85rem; color: #475569; line-height: 1.5; }
  .tag {
    display: inline-block;
    font-size: 0.7rem;
    padding: 2px 8px;
    border-radius: 6px;
    background: #f1f5f9;
    color: #475569;
    margin-right: 4px;
  }
  .meta { font-size: 0.7rem; color: #94a3b8; }

  .stats { display: flex; gap: 16px; margin-bottom: 24px; }
  .stat { background: #fff; border: 1px solid #e2e8f0; border-radius: 16px; padding: 16px 24px; }
  .stat b { font-size: 1.5rem; display: block; }

  button.primary, button.secondary {
    border: none;
    border-radius: 10px;
    padding: 10px 18px;
    font-size: 0.85rem;
    font-weight: 600;
    cursor: pointer;
  }
  button.primary { background: #4f46e5; color: #fff; }
  button.secondary { background: #fff; color: #334155; border: 1px solid #e2e8f0; }
  button:disabled { opacity: 0.5; cursor: not-allowed; }

  input[type=text], textarea, select {
    background: #fff;
    border: 1px solid #e2e8f0;
    border-radius: 10px;
    padding: 10px 12px;
    font-size: 0.88rem;
    font-family: inherit;
    outline: none;
  }
  textarea { width: 100%; min-height: 120px; resize: vertical; line-height: 1.5; }
  input:focus, textarea:focus, select:focus { border-color: #6366f1; }

  .builder { display: flex; gap: 24px; align-items: flex-start; }
  .bank { flex: 2; display: flex; flex-direction: column; gap: 18px; }
  .bench { flex: 1; position: sticky; top: 0; }
  .cat-head { display: flex; justify-content: space-between; align-items: center; margin-bottom: 8px; }
  .cat-head h4 { font-size: 0.8rem; color: #64748b; }
  .notes { display: flex; flex-wrap: wrap; gap: 8px; }
  .note {
    border: 1px solid #e2e8f0;
    background: #fff;
    border-radius: 10px;
    padding: 6px 10px;
    font-size: 0.82rem;
    cursor: pointer;
  }
  .note.formula { background: #fffbeb; border-color: #fde68a; }
  .note.selected { background: #0f172a; color: #fff; border-color: #0f172a; }
  .note .edit { margin-left: 6px; color: #94a3b8; font-size: 0.7rem; }
  .chips { display: flex; flex-wrap: wrap; gap: 6px; min-height: 32px; }
  .chip { background: #eef2ff; color: #4338ca; border-radius: 8px; padding: 4px 8px; font-size: 0.75rem; cursor: pointer; }
  .actions { display: flex; gap: 8px; margin-top: 12px; }

  .swatches { display: flex; gap: 6px; flex-wrap: wrap; }
  .swatch { width: 28px; height: 28px; border-radius: 50%; border: 1px solid #e2e8f0; }
  .preview { max-width: 100%; max-height: 320px; border-radius: 12px; }
  .thumbs { display: flex; gap: 6px; }
  .thumbs img { width: 56px; height: 56px; object-fit: cover; border-radius: 8px; cursor: pointer; }

  .modal-bg { position: fixed; inset: 0; background: rgba(15, 23, 42, 0.4); display: none; align-items: center; justify-content: center; }
  .modal-bg.visible { display: flex; }
  .modal { background: #fff; border-radius: 20px; padding: 24px; width: 480px; display: flex; flex-direction: column; gap: 10px; }

  .notice {
    position: fixed;
    bottom: 24px;
    left: 50%;
    transform: translateX(-50%);
    background: #0f172a;
    color: #fff;
    padding: 10px 18px;
    border-radius: 10px;
    font-size: 0.85rem;
    opacity: 0;
    transition: opacity 0.3s;
    pointer-events: none;
  }
  .notice.visible { opacity: 1; }
  .empty { padding: 48px; text-align: center; color: #94a3b8; border: 2px dashed #e2e8f0; border-radius: 16px; }
</style>
</head>
<body>
<div class="layout">
  <aside>
    <h1>UI Forge</h1>
    <button class="nav-btn" data-view="DASHBOARD">工作室总览</button>
    <button class="nav-btn" data-view="LIBRARY">提示词库</button>
    <button class="nav-btn" data-view="BUILDER">提示词生成器</button>
    <button class="nav-btn" data-view="ANALYZER">UI 风格解析</button>
    <button class="nav-btn" data-view="METHODOLOGIES">我的方法论</button>
    <div style="flex:1"></div>
    <select id="modelSelect"></select>
  </aside>
  <main id="main"></main>
</div>

<div class="modal-bg" id="noteModal">
  <div class="modal">
    <h3 id="modalTitle">编辑便签</h3>
    <select id="noteCategory"></select>
    <input type="text" id="noteLabel" placeholder="如：玻璃拟态">
    <textarea id="noteValue" placeholder="AI 实际执行的内容，如：frosted glass effects, blurry background..."></textarea>
    <div class="thumbs" id="noteThumbs"></div>
    <input type="file" id="noteFiles" accept="image/*" multiple>
    <textarea id="noteUrls" placeholder="粘贴图片 URL 或相对路径 (多条用回车分隔)..." style="min-height:60px"></textarea>
    <div class="actions">
      <button class="secondary" id="noteCancel">放弃修改</button>
      <button class="primary" id="noteSave">确认并同步</button>
    </div>
  </div>
</div>

<div class="notice" id="notice"></div>

<script>
  const mainEl = document.getElementById('main');
  const noticeEl = document.getElementById('notice');
  const modelEl = document.getElementById('modelSelect');
  const CATEGORIES = ['公式', '视觉风格', '布局结构', '配色氛围', '技术细节'];
  let currentView = 'DASHBOARD';
  let searchQuery = '';
  let editingNote = null;

  function notify(msg) {
    noticeEl.textContent = msg;
    noticeEl.classList.add('visible');
    setTimeout(() => noticeEl.classList.remove('visible'), 2200);
  }

  function esc(s) {
    const d = document.createElement('div');
    d.textContent = s == null ? '' : String(s);
    return d.innerHTML.replace(/"/g, '&quot;');
  }

  async function api(url, options) {
    const res = await fetch(url, options);
    const data = await res.json();
    if (!res.ok) throw new Error(data.error || ('HTTP ' + res.status));
    return data;
  }

  function postJson(url, body, method) {
    return api(url, {
      method: method || 'POST',
      headers: { 'Content-Type': 'application/json' },
      body: JSON.stringify(body || {}),
    });
  }

  function promptCard(p) {
    return '<div class="card"><h3>' + esc(p.title) + '</h3>' +
      '<p>"' + esc(p.content) + '"</p>' +
      '<div>' + p.tags.map(t => '<span class="tag">' + esc(t) + '</span>').join('') + '</div>' +
      '<div class="meta">' + esc(p.category) + ' · ' + new Date(p.createdAt).toLocaleDateString('zh-CN') + '</div>' +
      '<button class="secondary" data-copy="' + esc(p.content) + '">复制</button></div>';
  }

  const renderers = {
    DASHBOARD(d) {
      return '<h2>工作室总览</h2><p class="sub">您的设计军械库正在不断壮大。</p>' +
        '<div class="stats"><div class="stat"><b>' + d.promptCount + '</b>提示词数</div>' +
        '<div class="stat"><b>' + d.methodologyCount + '</b>方法论数</div></div>' +
        '<h3 style="margin-bottom:12px">最近收藏</h3>' +
        '<div class="grid">' + d.recent.map(promptCard).join('') + '</div>' +
        '<div class="actions"><button class="primary" data-go="ANALYZER">开始解析</button>' +
        '<button class="secondary" data-go="LIBRARY">查看提示词库</button></div>';
    },
    LIBRARY(d) {
      const cards = d.entries.map(promptCard).join('');
      return '<h2>提示词库</h2><p class="sub">存档您最优秀的视觉指令。</p>' +
        '<input type="text" id="search" placeholder="搜索提示词或标签..." value="' + esc(d.query) + '" style="width:280px;margin-bottom:20px">' +
        (cards ? '<div class="grid">' + cards + '</div>' : '<div class="empty">未找到匹配的提示词。</div>');
    },
    BUILDER(d) {
      const ws = d.workspace;
      const selectedIds = new Set(ws.selected.map(n => n.id));
      const bank = d.categories.map(c =>
        '<div><div class="cat-head"><h4>' + esc(c.category) + '</h4>' +
        '<button class="secondary" data-new="' + esc(c.category) + '">+ 新增</button></div>' +
        '<div class="notes">' + c.notes.map(n =>
          '<span class="note' + (n.category === '公式' ? ' formula' : '') + (selectedIds.has(n.id) ? ' selected' : '') +
          '" data-toggle="' + esc(n.id) + '" data-formula="' + (n.category === '公式' ? '1' : '') + '">' + esc(n.label) +
          '<span class="edit" data-edit="' + esc(n.id) + '">✎</span></span>').join('') +
        '</div></div>').join('');
      const chips = ws.selected.map(n => '<span class="chip" data-remove="' + esc(n.id) + '">' + esc(n.label) + ' ×</span>').join('');
      const empty = !ws.composed;
      return '<h2>提示词实验室 Pro</h2><p class="sub">组合便签，润色，并保存至提示词库。</p>' +
        '<div class="builder"><div class="bank">' + bank + '</div>' +
        '<div class="bench card"><div class="cat-head"><h3>配方组合</h3>' +
        '<button class="secondary" id="clearBtn">清空重置</button></div>' +
        '<div class="chips">' + (chips || '<span class="meta">点击左侧便签加入组合</span>') + '</div>' +
        '<textarea id="freeText" placeholder="在此键入您的核心需求主体...">' + esc(ws.freeText) + '</textarea>' +
        '<div class="actions"><button class="secondary" id="refineBtn"' + (ws.refining || empty ? ' disabled' : '') + '>' +
        (ws.refining ? '润色中...' : 'AI 实验室润色') + '</button>' +
        '<button class="primary" id="saveBtn"' + (empty ? ' disabled' : '') + '>保存存档</button></div></div></div>';
    },
    ANALYZER(d) {
      let html = '<h2>UI 风格解析</h2><p class="sub">上传 UI 截图，拆解其设计 DNA。</p><div class="card">';
      if (d.image) html += '<img class="preview" src="' + d.image + '">';
      html += '<input type="file" id="analyzerFile" accept="image/*"' + (d.state === 'ANALYZING' ? ' disabled' : '') + '>';
      if (d.image && !d.result) {
        html += '<button class="primary" id="analyzeBtn"' + (d.state === 'ANALYZING' ? ' disabled' : '') + '>' +
          (d.state === 'ANALYZING' ? '正在深度拆解设计模式...' : '提取设计方法论') + '</button>';
      }
      html += '</div>';
      if (d.result) {
        const r = d.result;
        html += '<div class="card" style="margin-top:16px"><div class="cat-head"><h3>已提取设计精髓</h3>' +
          '<button class="primary" id="saveAnalysisBtn">保存到存档</button></div>' +
          '<p>' + esc(r.visualStyle) + '</p>' +
          '<div class="swatches">' + r.colorPalette.map(c => '<div class="swatch" title="' + esc(c) + '" style="background:' + esc(c) + '"></div>').join('') + '</div>' +
          '<p><b>字体排版</b> ' + esc(r.typography) + '</p><p><b>布局逻辑</b> ' + esc(r.layoutLogic) + '</p>' +
          '<ol style="padding-left:20px">' + r.methodologySteps.map(s => '<li><p>' + esc(s) + '</p></li>').join('') + '</ol></div>';
      }
      return html;
    },
    METHODOLOGIES(d) {
      const cards = d.methodologies.map(m =>
        '<div class="card"><img class="preview" src="' + m.imageUrl + '"><h3>' + esc(m.name) + '</h3>' +
        '<div class="swatches">' + m.analysis.colorPalette.map(c => '<div class="swatch" style="background:' + esc(c) + '"></div>').join('') + '</div>' +
        '<p><i>' + esc(m.analysis.visualStyle) + '</i></p>' +
        '<p><b>字体排版</b> ' + esc(m.analysis.typography) + '</p><p><b>布局逻辑</b> ' + esc(m.analysis.layoutLogic) + '</p>' +
        '<div class="meta">' + new Date(m.createdAt).toLocaleDateString('zh-CN') + '</div></div>').join('');
      return '<h2>我的方法论</h2><p class="sub">从视觉研究中提取的设计蓝图。</p>' +
        (cards ? '<div class="grid">' + cards + '</div>' :
          '<div class="empty">暂无存档的方法论。<div class="actions" style="justify-content:center">' +
          '<button class="primary" data-go="ANALYZER">前往风格解析</button></div></div>');
    },
  };

  async function show(view) {
    currentView = view;
    document.querySelectorAll('.nav-btn').forEach(b => b.classList.toggle('active', b.dataset.view === view));
    const qs = view === 'LIBRARY' ? '?q=' + encodeURIComponent(searchQuery) : '';
    try {
      const res = await api('/api/views/' + view + qs);
      mainEl.innerHTML = renderers[view](res.data);
      bindView(view);
    } catch (e) {
      notify(e.message);
    }
  }

  function bindView(view) {
    mainEl.querySelectorAll('[data-go]').forEach(b => b.addEventListener('click', () => show(b.dataset.go)));
    mainEl.querySelectorAll('[data-copy]').forEach(b => b.addEventListener('click', () => {
      navigator.clipboard.writeText(b.dataset.copy);
      notify('提示词已复制到剪贴板！');
    }));

    if (view === 'LIBRARY') {
      const search = document.getElementById('search');
      search.addEventListener('keydown', e => {
        if (e.key === 'Enter') { searchQuery = search.value; show('LIBRARY'); }
      });
    }

    if (view === 'BUILDER') bindBuilder();
    if (view === 'ANALYZER') bindAnalyzer();
  }

  function bindBuilder() {
    const freeText = document.getElementById('freeText');
    freeText.addEventListener('change', () => postJson('/api/workspace/text', { freeText: freeText.value }, 'PUT').then(() => show('BUILDER')));

    mainEl.querySelectorAll('[data-toggle]').forEach(el => el.addEventListener('click', async e => {
      if (e.target.dataset.edit) return;
      let mode = 'append';
      if (el.dataset.formula && freeText.value) {
        mode = confirm('是否套用此公式并清空当前编辑器内容？') ? 'replace' : 'append';
      }
      await postJson('/api/workspace/text', { freeText: freeText.value }, 'PUT');
      await postJson('/api/workspace/toggle', { noteId: el.dataset.toggle, mode });
      show('BUILDER');
    }));
    mainEl.querySelectorAll('[data-edit]').forEach(el => el.addEventListener('click', async e => {
      e.stopPropagation();
      const res = await api('/api/notes');
      openModal(res.notes.find(n => n.id === el.dataset.edit));
    }));
    mainEl.querySelectorAll('[data-new]').forEach(b => b.addEventListener('click', () => openModal({ category: b.dataset.new, imageUrls: [] })));
    mainEl.querySelectorAll('[data-remove]').forEach(c => c.addEventListener('click', async () => {
      await postJson('/api/workspace/remove', { noteId: c.dataset.remove });
      show('BUILDER');
    }));

    document.getElementById('clearBtn').addEventListener('click', async () => {
      await postJson('/api/workspace/clear');
      show('BUILDER');
    });

    const refineBtn = document.getElementById('refineBtn');
    refineBtn.addEventListener('click', async () => {
      refineBtn.disabled = true;
      refineBtn.textContent = '润色中...';
      try {
        await postJson('/api/workspace/text', { freeText: freeText.value }, 'PUT');
        const data = await postJson('/api/workspace/refine', { model: modelEl.value });
        notify('润色完成，用时 ' + data.elapsed + 's');
      } catch (e) {
        notify(e.message);
      } finally {
        show('BUILDER');
      }
    });

    document.getElementById('saveBtn').addEventListener('click', async () => {
      await postJson('/api/workspace/text', { freeText: freeText.value }, 'PUT');
      const data = await postJson('/api/workspace/save');
      if (data.entry) notify(data.persisted ? '已成功保存至您的库！' : '已保存，但未能写入本地存储。');
      show('BUILDER');
    });
  }

  function bindAnalyzer() {
    const fileEl = document.getElementById('analyzerFile');
    fileEl.addEventListener('change', async () => {
      if (!fileEl.files[0]) return;
      const form = new FormData();
      form.append('image', fileEl.files[0]);
      try {
        await api('/api/analyzer/image', { method: 'POST', body: form });
      } catch (e) {
        notify(e.message);
      }
      show('ANALYZER');
    });

    const analyzeBtn = document.getElementById('analyzeBtn');
    if (analyzeBtn) analyzeBtn.addEventListener('click', async () => {
      analyzeBtn.disabled = true;
      analyzeBtn.textContent = '正在深度拆解设计模式...';
      try {
        await postJson('/api/analyzer/analyze', { model: modelEl.value });
      } catch (e) {
        notify(e.message);
      } finally {
        show('ANALYZER');
      }
    });

    const saveBtn = document.getElementById('saveAnalysisBtn');
    if (saveBtn) saveBtn.addEventListener('click', async () => {
      const data = await postJson('/api/analyzer/save');
      if (data.methodology) notify('方法论已保存至您的存档！');
      show('ANALYZER');
    });
  }

  // Note editor modal
  const modalEl = document.getElementById('noteModal');
  const noteCategoryEl = document.getElementById('noteCategory');
  const noteThumbsEl = document.getElementById('noteThumbs');
  const noteFilesEl = document.getElementById('noteFiles');
  noteCategoryEl.innerHTML = CATEGORIES.map(c => '<option>' + c + '</option>').join('');

  function renderThumbs() {
    noteThumbsEl.innerHTML = '';
    (editingNote.imageUrls || []).forEach((url, i) => {
      const img = document.createElement('img');
      img.src = url;
      img.title = '点击移除';
      img.addEventListener('click', () => { editingNote.imageUrls.splice(i, 1); renderThumbs(); });
      noteThumbsEl.appendChild(img);
    });
    noteFilesEl.disabled = (editingNote.imageUrls || []).length >= 4;
  }

  function openModal(note) {
    editingNote = { ...note, imageUrls: [...(note.imageUrls || [])] };
    noteCategoryEl.value = note.category;
    document.getElementById('noteLabel').value = note.label || '';
    document.getElementById('noteValue').value = note.value || '';
    document.getElementById('noteUrls').value = '';
    noteFilesEl.value = '';
    renderThumbs();
    modalEl.classList.add('visible');
  }

  noteFilesEl.addEventListener('change', async () => {
    const form = new FormData();
    Array.from(noteFilesEl.files).forEach(f => form.append('images', f));
    editingNote.imageUrls.forEach(u => form.append('existing', u));
    try {
      const data = await api('/api/uploads', { method: 'POST', body: form });
      editingNote.imageUrls = data.imageUrls;
      renderThumbs();
    } catch (e) {
      notify(e.message);
    }
    noteFilesEl.value = '';
  });

  document.getElementById('noteCancel').addEventListener('click', () => {
    modalEl.classList.remove('visible');
    editingNote = null;
  });

  document.getElementById('noteSave').addEventListener('click', async () => {
    editingNote.category = noteCategoryEl.value;
    editingNote.label = document.getElementById('noteLabel').value;
    editingNote.value = document.getElementById('noteValue').value;
    const data = await postJson('/api/notes', {
      note: editingNote,
      imageUrlText: document.getElementById('noteUrls').value,
    });
    if (!data.note) return;
    modalEl.classList.remove('visible');
    editingNote = null;
    show('BUILDER');
  });

  document.querySelectorAll('.nav-btn').forEach(b => b.addEventListener('click', () => show(b.dataset.view)));

  api('/api/models').then(data => {
    modelEl.innerHTML = data.models.map(m => '<option' + (m === data.default ? ' selected' : '') + '>' + m + '</option>').join('');
  });

  show(currentView);
</script>
</body>
</html>
"""

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.DEBUG if DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(debug=DEBUG, port=PORT, threaded=True)
