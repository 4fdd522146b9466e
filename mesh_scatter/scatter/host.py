from __future__ import annotations

import logging
import os

import bpy
from bpy.app.handlers import persistent

from .core import ResolvedMesh, ScatterConfig, ScatterController
from .gn import BlenderInstancingTarget

logger = logging.getLogger(__name__)

OWNER_KEY = "ms_owner"
IMPORT_LIBRARY = "MS_ImportedMeshes"
GLTF_EXTENSIONS = (".glb", ".gltf")

_controllers: dict[int, ScatterController] = {}


def addon_prefs():
    addon = bpy.context.preferences.addons.get(__package__.rpartition(".")[0])
    return addon.preferences if addon is not None else None


def _first_material(mesh: bpy.types.Mesh, obj: bpy.types.Object | None = None):
    if obj is not None and obj.material_slots:
        return obj.material_slots[0].material
    if len(mesh.materials) > 0:
        return mesh.materials[0]
    return None


def _ensure_import_library() -> bpy.types.Collection:
    lib = bpy.data.collections.get(IMPORT_LIBRARY)
    if lib is None:
        lib = bpy.data.collections.new(IMPORT_LIBRARY)
        bpy.context.scene.collection.children.link(lib)
    lib.hide_viewport = True
    lib.hide_render = True
    lib.hide_select = True
    return lib


def _import_gltf_once(filepath: str) -> bpy.types.Collection:
    base = os.path.splitext(os.path.basename(filepath))[0]
    lib = _ensure_import_library()
    name = f"MS_Imported_{base}"
    imported = bpy.data.collections.get(name)
    if imported is None:
        imported = bpy.data.collections.new(name)
        lib.children.link(imported)
    if len(imported.all_objects) > 0:
        return imported

    before_objects = set(bpy.data.objects)
    bpy.ops.import_scene.gltf(filepath=filepath)
    new_objects = [ob for ob in bpy.data.objects if ob not in before_objects]
    for ob in new_objects:
        if ob.name not in imported.objects:
            imported.objects.link(ob)
        for c in list(ob.users_collection):
            if c != imported:
                c.objects.unlink(ob)
    logger.debug("Imported %d objects from %s", len(new_objects), filepath)
    return imported


def resolve_mesh_source(source: str) -> ResolvedMesh | None:
    """Find a mesh by object name, mesh name, or glTF file path."""
    if not source:
        return None

    obj = bpy.data.objects.get(source)
    if obj is not None and obj.type == "MESH":
        return ResolvedMesh(obj.data, _first_material(obj.data, obj))

    mesh = bpy.data.meshes.get(source)
    if mesh is not None:
        return ResolvedMesh(mesh, _first_material(mesh))

    path = bpy.path.abspath(source)
    if not os.path.isfile(path) or not path.lower().endswith(GLTF_EXTENSIONS):
        return None
    try:
        imported = _import_gltf_once(path)
    except RuntimeError as e:
        logger.warning("glTF import failed for %s: %s", path, e)
        return None
    for ob in sorted(imported.all_objects, key=lambda o: o.name):
        if ob.type == "MESH":
            return ResolvedMesh(ob.data, _first_material(ob.data, ob))
    return None


class BlenderScatterHost:
    def __init__(self, owner: bpy.types.Object):
        self.owner = owner

    def is_ready(self) -> bool:
        # bpy.data is a restricted stand-in while add-ons register.
        if not isinstance(bpy.data, bpy.types.BlendData):
            return False
        try:
            return bool(self.owner.users_scene)
        except ReferenceError:
            return False

    def _attach(self, obj: bpy.types.Object) -> None:
        owner = self.owner
        for c in owner.users_collection:
            if obj.name not in c.objects:
                c.objects.link(obj)
        if obj.parent != owner:
            obj.parent = owner
        obj[OWNER_KEY] = owner.name
        obj.hide_viewport = False
        obj.hide_render = False
        owner.mesh_scatter.target_object = obj

    def obtain_target(self, current: BlenderInstancingTarget | None) -> BlenderInstancingTarget:
        stored = self.owner.mesh_scatter.target_object
        if current is not None and current.is_valid() and stored is not None and current.object == stored:
            return current

        if stored is None or stored.type != "MESH":
            mesh = bpy.data.meshes.new(f"{self.owner.name}_InstancesMesh")
            stored = bpy.data.objects.new(f"{self.owner.name}_Instances", mesh)
            logger.debug("Created instancing target %s", stored.name)
        self._attach(stored)
        return BlenderInstancingTarget(stored)

    def resolve_mesh(self, source: str) -> ResolvedMesh | None:
        return resolve_mesh_source(source)

    def report_warning(self, message: str) -> None:
        prefs = addon_prefs()
        if prefs is not None and not prefs.report_missing_mesh:
            return
        self.owner.mesh_scatter.status = message


def config_from_props(props) -> ScatterConfig:
    return ScatterConfig(
        mesh_source=str(props.mesh_source),
        instance_count=int(props.instance_count),
        area_dimensions=(float(props.area[0]), float(props.area[1])),
        seed=int(props.seed),
    )


def controller_for(owner: bpy.types.Object) -> ScatterController:
    key = owner.as_pointer()
    config = config_from_props(owner.mesh_scatter)
    controller = _controllers.get(key)
    if controller is None:
        controller = ScatterController(BlenderScatterHost(owner), config)
        _controllers[key] = controller
    else:
        # Undo restores properties in place, so the cached config can be stale.
        controller.config = config
        controller.host.owner = owner
    return controller


def forget_controllers() -> None:
    _controllers.clear()


@persistent
def forget_controllers_on_load(*_args) -> None:
    forget_controllers()
