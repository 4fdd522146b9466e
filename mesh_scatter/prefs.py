import bpy

from .gui.translations import t
from .setup_logging import setup_logging


def update_log_level(self, context):
    setup_logging(self.log_level)


class MeshScatterPreferences(bpy.types.AddonPreferences):
    bl_idname = __package__

    default_instance_count: bpy.props.IntProperty(
        name="Default Instances",
        min=1,
        soft_max=10000,
        default=50,
    )

    default_area: bpy.props.FloatVectorProperty(
        name="Default Area",
        size=2,
        min=0.0,
        default=(5.0, 5.0),
        subtype="XYZ",
        unit="LENGTH",
    )

    default_seed: bpy.props.IntProperty(name="Default Seed", default=0)

    log_level: bpy.props.EnumProperty(
        name="Log Level",
        items=[
            ("DEBUG", "Debug", "Log every rebuild"),
            ("INFO", "Info", ""),
            ("WARNING", "Warning", "Only rejected values and missing meshes"),
            ("ERROR", "Error", ""),
        ],
        default="WARNING",
        update=update_log_level,
    )

    report_missing_mesh: bpy.props.BoolProperty(
        name="Report Missing Mesh",
        description="Show a warning on the panel when the mesh source cannot be found",
        default=True,
    )

    def draw(self, context):
        layout = self.layout
        box = layout.box()
        box.label(text=t("Defaults"))
        box.prop(self, "default_instance_count", text=t("Default Instances"))
        box.prop(self, "default_area", text=t("Default Area"))
        box.prop(self, "default_seed", text=t("Default Seed"))

        box = layout.box()
        box.label(text=t("Diagnostics"))
        box.prop(self, "log_level", text=t("Log Level"))
        box.prop(self, "report_missing_mesh", text=t("Report Missing Mesh"))
