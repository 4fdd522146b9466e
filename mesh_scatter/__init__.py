bl_info = {
    "name": "Mesh Scatter",
    "author": "mesh-scatter contributors",
    "version": (0, 1, 0),
    "blender": (4, 0, 0),
    "location": "View3D > Sidebar > Mesh Scatter",
    "description": "Scatter seeded, reproducible instances of a mesh over a rectangular area",
    "category": "Object",
}

# Blender modules are imported in register() so that the placement core
# (geom, scatter.sampler, scatter.core) imports without bpy.


def _classes():
    from .gui.scatter import MESHSCATTER_PT_Scatter, MeshScatterProperties
    from .prefs import MeshScatterPreferences
    from .scatter.ops import (
        MESHSCATTER_OT_AddScatter,
        MESHSCATTER_OT_RandomizeSeed,
        MESHSCATTER_OT_Rebuild,
    )

    return (
        MeshScatterPreferences,
        MeshScatterProperties,
        MESHSCATTER_OT_AddScatter,
        MESHSCATTER_OT_Rebuild,
        MESHSCATTER_OT_RandomizeSeed,
        MESHSCATTER_PT_Scatter,
    )


def register():
    import bpy

    from .gui.scatter import MeshScatterProperties
    from .scatter.host import forget_controllers_on_load
    from .setup_logging import setup_logging

    for c in _classes():
        bpy.utils.register_class(c)
    bpy.types.Object.mesh_scatter = bpy.props.PointerProperty(type=MeshScatterProperties)
    bpy.app.handlers.load_post.append(forget_controllers_on_load)

    addon = bpy.context.preferences.addons.get(__name__)
    setup_logging(addon.preferences.log_level if addon is not None else "WARNING")


def unregister():
    import bpy

    from .scatter.host import forget_controllers, forget_controllers_on_load

    if forget_controllers_on_load in bpy.app.handlers.load_post:
        bpy.app.handlers.load_post.remove(forget_controllers_on_load)
    forget_controllers()
    # The pointer goes first; it refers to a class unregistered below.
    del bpy.types.Object.mesh_scatter
    for c in reversed(_classes()):
        bpy.utils.unregister_class(c)
