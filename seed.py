from models import Category, Fragment


def _unsplash(photo):
    return f"https://images.unsplash.com/{photo}?auto=format&fit=crop&w=300&q=80"


F, VS, LS, CP, TD = (
    Category.FORMULA,
    Category.VISUAL_STYLE,
    Category.LAYOUT,
    Category.COLOR_MOOD,
    Category.TECHNICAL_DETAIL,
)

SEED_NOTES = [
    ("f1", "UI 标准组合", "[主体内容], [视觉风格], [布局结构], [配色氛围], [技术细节]", F, []),
    ("f2", "极简艺术家", "Minimalist [主体], high-end whitespace, [强调色] accent, refined technical details", F, []),

    ("vs1", "玻璃拟态", "Glassmorphism, frosted glass effects, background blur", VS,
     [_unsplash("photo-1618005182384-a83a8bd57fbe")]),
    ("vs2", "新拟态", "Neumorphism, soft UI shadows, subtle 3D extrusion", VS,
     [_unsplash("photo-1614850523296-d8c1af93d400")]),
    ("vs3", "极简主义", "Minimalist design, maximum whitespace, essentialism", VS,
     [_unsplash("photo-1487014679447-9f8336841d58")]),
    ("vs4", "拟物风", "Skeuomorphic textures, realistic materials, tactile UI", VS,
     [_unsplash("photo-1558655146-d09347e92766")]),
    ("vs5", "扁平化 2.0", "Flat 2.0, subtle gradients, soft depth, vibrant icons", VS,
     [_unsplash("photo-1558591710-4b4a1ae0f04d")]),

    ("ls1", "非对称栅格", "Asymmetric grid, experimental composition", LS, []),
    ("ls2", "层级分区", "Hierarchical partitioning, clear visual logic", LS, []),
    ("ls3", "斐波那契布局", "Fibonacci ratio layout, golden ratio balance", LS, []),
    ("ls4", "流体容器", "Fluid container, dynamic responsive widths", LS, []),

    ("cp1", "单色极简", "Monochromatic minimalist, shades of grey and deep indigo", CP, []),
    ("cp2", "高对比活力", "High-contrast vibrancy, complementary bold hues", CP, []),
    ("cp3", "柔和粉调", "Pastel dream, soft pinks and mints", CP, []),
    ("cp4", "赛博霓虹", "Cyberpunk neon, glowing accents on dark theme", CP, []),
    ("cp5", "低调深沉", "Muted sophistication, deep charcoal and navy", CP, []),

    ("td1", "抗锯齿", "Anti-aliasing, crystal sharp edges", TD, []),
    ("td2", "高斯模糊", "Gaussian blur overlays, soft focus transitions", TD, []),
    ("td3", "次表面散射", "Subsurface scattering for realistic 3D textures", TD, []),
    ("td4", "微观排版", "Micro-typography, precise kerning and line-height", TD, []),
    ("td5", "动态阴影", "Dynamic shadow mapping, real-time lighting simulation", TD, []),
]


def seed_fragments():
    """Fresh copies of the built-in sticky notes."""
    return [
        Fragment(id=id_, label=label, value=value, category=category, image_urls=list(urls))
        for id_, label, value, category, urls in SEED_NOTES
    ]
