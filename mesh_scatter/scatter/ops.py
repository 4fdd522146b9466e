from __future__ import annotations

import random

import bpy

from .host import addon_prefs, controller_for


def _active_scatter(context):
    obj = context.active_object
    if obj is None or not obj.mesh_scatter.is_scatter:
        return None
    return obj


class MESHSCATTER_OT_AddScatter(bpy.types.Operator):
    bl_idname = "mesh_scatter.add_scatter"
    bl_label = "Add Scatter"
    bl_description = "Add an empty that scatters instances of a mesh over an area"
    bl_options = {"REGISTER", "UNDO"}

    def execute(self, context):
        owner = bpy.data.objects.new("MeshScatter", None)
        owner.empty_display_type = "PLAIN_AXES"
        owner.location = context.scene.cursor.location
        context.collection.objects.link(owner)
        for ob in context.selected_objects:
            ob.select_set(False)
        owner.select_set(True)
        context.view_layer.objects.active = owner

        s = owner.mesh_scatter
        s.is_scatter = True
        prefs = addon_prefs()

        controller = controller_for(owner)
        with controller.batch():
            if prefs is not None:
                s.instance_count = int(prefs.default_instance_count)
                s.area = prefs.default_area
                s.seed = int(prefs.default_seed)
            controller.rebuild()

        self.report({"INFO"}, f"Created {controller.config.instance_count} instances")
        return {"FINISHED"}


class MESHSCATTER_OT_Rebuild(bpy.types.Operator):
    bl_idname = "mesh_scatter.rebuild"
    bl_label = "Rebuild Scatter"
    bl_options = {"REGISTER", "UNDO"}

    def execute(self, context):
        owner = _active_scatter(context)
        if owner is None:
            self.report({"ERROR"}, "Active object is not a scatter")
            return {"CANCELLED"}

        owner.mesh_scatter.status = ""
        controller = controller_for(owner)
        if not controller.rebuild():
            self.report({"WARNING"}, "Scene not ready, nothing rebuilt")
            return {"CANCELLED"}
        if controller.last_warning:
            self.report({"WARNING"}, controller.last_warning)
        else:
            self.report({"INFO"}, f"Rebuilt {controller.config.instance_count} instances")
        return {"FINISHED"}


class MESHSCATTER_OT_RandomizeSeed(bpy.types.Operator):
    bl_idname = "mesh_scatter.randomize_seed"
    bl_label = "Randomize Seed"
    bl_options = {"REGISTER", "UNDO"}

    def execute(self, context):
        owner = _active_scatter(context)
        if owner is None:
            self.report({"ERROR"}, "Active object is not a scatter")
            return {"CANCELLED"}
        owner.mesh_scatter.seed = random.randint(0, 999999)
        return {"FINISHED"}
