from __future__ import annotations

import bpy

from ..scatter.host import controller_for
from .translations import t


def _owner_controller(props):
    props.status = ""
    return controller_for(props.id_data)


def update_mesh_source(self, context):
    _owner_controller(self).set_mesh_source(self.mesh_source)


def update_instance_count(self, context):
    _owner_controller(self).set_instance_count(int(self.instance_count))


def update_area(self, context):
    _owner_controller(self).set_area_dimensions((float(self.area[0]), float(self.area[1])))


def update_seed(self, context):
    _owner_controller(self).set_seed(int(self.seed))


class MeshScatterProperties(bpy.types.PropertyGroup):
    is_scatter: bpy.props.BoolProperty(name="Is Scatter", default=False)

    mesh_source: bpy.props.StringProperty(
        name="Mesh Source",
        description="Mesh object name, mesh name, or .glb/.gltf file",
        subtype="FILE_PATH",
        default="",
        update=update_mesh_source,
    )

    instance_count: bpy.props.IntProperty(
        name="Instances",
        min=1,
        soft_max=10000,
        default=50,
        update=update_instance_count,
    )

    area: bpy.props.FloatVectorProperty(
        name="Area",
        size=2,
        min=0.0,
        soft_max=1000.0,
        default=(5.0, 5.0),
        subtype="XYZ",
        unit="LENGTH",
        update=update_area,
    )

    seed: bpy.props.IntProperty(
        name="Seed",
        default=0,
        update=update_seed,
    )

    target_object: bpy.props.PointerProperty(
        name="Target",
        type=bpy.types.Object,
        description="Points object that draws the instances",
    )

    status: bpy.props.StringProperty(name="Status", default="")


class MESHSCATTER_PT_Scatter(bpy.types.Panel):
    bl_label = "Mesh Scatter"
    bl_space_type = "VIEW_3D"
    bl_region_type = "UI"
    bl_category = "Mesh Scatter"

    def draw(self, context):
        layout = self.layout
        obj = context.active_object
        s = getattr(obj, "mesh_scatter", None) if obj is not None else None

        if s is None or not s.is_scatter:
            layout.label(text=t("Select or add a scatter object"), icon="INFO")
            layout.operator("mesh_scatter.add_scatter", text=t("Add Scatter"), icon="ADD")
            return

        box = layout.box()
        box.label(text=t("Source"))
        box.prop(s, "mesh_source", text=t("Mesh Source"))
        if s.status:
            box.label(text=s.status, icon="ERROR")

        box = layout.box()
        box.label(text=t("Placement"))
        col = box.column()
        col.prop(s, "instance_count", text=t("Instances"))
        row = col.row(align=True)
        row.prop(s, "area", index=0, text=t("Width"))
        row.prop(s, "area", index=1, text=t("Depth"))
        row = col.row(align=True)
        row.prop(s, "seed", text=t("Seed"))
        row.operator("mesh_scatter.randomize_seed", text="", icon="FILE_REFRESH")

        box.separator()
        box.prop(s, "target_object", text=t("Target"))
        box.operator("mesh_scatter.rebuild", text=t("Rebuild"))
