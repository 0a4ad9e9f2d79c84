REFINE_PROMPT = """\
请将以下 UI 设计提示词进行专业化润色，以获得更高质量的生成效果，输出必须为中文： "{raw_prompt}"。\
重点关注技术细节、视觉清晰度和艺术指导。"""

ANALYZE_PROMPT = """\
分析这张 UI 设计图并提取一套复刻该风格的方法论。请使用中文输出 JSON 格式，包含：\
visualStyle (视觉风格描述), colorPalette (十六进制色码列表), typography (字体建议及感觉), \
layoutLogic (布局逻辑), 以及 methodologySteps (复刻该设计精髓的 5 个步骤)。"""

ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "visualStyle": {"type": "STRING"},
        "colorPalette": {"type": "ARRAY", "items": {"type": "STRING"}},
        "typography": {"type": "STRING"},
        "layoutLogic": {"type": "STRING"},
        "methodologySteps": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["visualStyle", "colorPalette", "typography", "layoutLogic", "methodologySteps"],
}
