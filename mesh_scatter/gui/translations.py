import bpy

TRANSLATIONS = {
    "zh_CN": {
        # Panel
        "Mesh Scatter": "网格散布",
        "Source": "来源",
        "Mesh Source": "网格来源",
        "Mesh object name, mesh name, or .glb/.gltf file": "网格对象名、网格名或 .glb/.gltf 文件",
        "Placement": "放置",
        "Instances": "实例数量",
        "Area": "区域",
        "Width": "宽度",
        "Depth": "深度",
        "Seed": "随机种子",
        "Randomize Seed": "随机种子",
        "Rebuild": "重建",
        "Add Scatter": "添加散布",
        "Target": "目标对象",
        "Select or add a scatter object": "请选择或添加散布对象",

        # Preferences
        "Defaults": "默认值",
        "Default Instances": "默认实例数量",
        "Default Area": "默认区域",
        "Default Seed": "默认随机种子",
        "Diagnostics": "诊断",
        "Log Level": "日志级别",
        "Report Missing Mesh": "报告缺失网格",
        "Show a warning on the panel when the mesh source cannot be found": "网格来源无法找到时在面板显示警告",
    }
}


def t(text):
    is_cn = False
    try:
        if bpy.app.translations.locale in {"zh_CN", "zh_HANS"}:
            is_cn = True
        elif bpy.context.preferences.view.language in {"zh_CN", "zh_HANS"}:
            is_cn = True
    except AttributeError:
        pass

    if is_cn:
        return TRANSLATIONS.get("zh_CN", {}).get(text, text)
    return text
