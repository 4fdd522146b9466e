from __future__ import annotations

import bpy
from mathutils import Euler

from ..geom import ROTATION_ORDER, Transform


NODE_GROUP_NAME = "MS_ScatterInstances"
MODIFIER_NAME = "MS_ScatterInstances"
INSTANCE_SOCKET = "Instance Object"

ATTR_ROTATION = "ms_rotation"
ATTR_SCALE = "ms_scale"

PROTOTYPE_COLLECTION = "MS_Prototypes"


def _new_node(nt: bpy.types.NodeTree, node_type: str, x: float, y: float) -> bpy.types.Node:
    n = nt.nodes.new(node_type)
    n.location = (x, y)
    return n


def _interface_sockets(node_group: bpy.types.NodeTree, in_out: str):
    if hasattr(node_group, "interface"):
        for item in node_group.interface.items_tree:
            if getattr(item, "item_type", None) == "SOCKET" and getattr(item, "in_out", None) == in_out:
                yield item
        return
    sockets = node_group.inputs if in_out == "INPUT" else node_group.outputs
    for s in sockets:
        yield s


def _find_socket(node_group: bpy.types.NodeTree, name: str, in_out: str):
    for s in _interface_sockets(node_group, in_out):
        if getattr(s, "name", "") == name:
            return s
    return None


def _ensure_socket(node_group: bpy.types.NodeTree, *, name: str, in_out: str, socket_type: str):
    s = _find_socket(node_group, name, in_out)
    if s is not None:
        return s
    if hasattr(node_group, "interface"):
        return node_group.interface.new_socket(name=name, in_out=in_out, socket_type=socket_type)
    if in_out == "INPUT":
        return node_group.inputs.new(socket_type, name)
    return node_group.outputs.new(socket_type, name)


def _ensure_gn_node_group() -> bpy.types.NodeTree:
    ng = bpy.data.node_groups.get(NODE_GROUP_NAME)
    if ng is not None and getattr(ng, "bl_idname", "") == "GeometryNodeTree":
        return ng

    ng = bpy.data.node_groups.new(NODE_GROUP_NAME, "GeometryNodeTree")
    _ensure_socket(ng, name="Geometry", in_out="INPUT", socket_type="NodeSocketGeometry")
    _ensure_socket(ng, name=INSTANCE_SOCKET, in_out="INPUT", socket_type="NodeSocketObject")
    _ensure_socket(ng, name="Geometry", in_out="OUTPUT", socket_type="NodeSocketGeometry")

    nt = ng
    nt.nodes.clear()
    nt.links.clear()

    group_in = _new_node(nt, "NodeGroupInput", -700, 0)
    group_out = _new_node(nt, "NodeGroupOutput", 500, 0)
    if hasattr(group_out, "is_active_output"):
        group_out.is_active_output = True

    info = _new_node(nt, "GeometryNodeObjectInfo", -420, 200)
    info.transform_space = "ORIGINAL"
    nt.links.new(group_in.outputs[INSTANCE_SOCKET], info.inputs["Object"])
    if "As Instance" in info.inputs:
        info.inputs["As Instance"].default_value = True

    named_rot = _new_node(nt, "GeometryNodeInputNamedAttribute", -420, -80)
    named_rot.data_type = "FLOAT_VECTOR"
    named_rot.inputs["Name"].default_value = ATTR_ROTATION

    named_scale = _new_node(nt, "GeometryNodeInputNamedAttribute", -420, -260)
    named_scale.data_type = "FLOAT_VECTOR"
    named_scale.inputs["Name"].default_value = ATTR_SCALE

    rot = _new_node(nt, "FunctionNodeEulerToRotation", -160, -80)
    nt.links.new(named_rot.outputs["Attribute"], rot.inputs["Euler"])

    inst = _new_node(nt, "GeometryNodeInstanceOnPoints", 200, 0)
    nt.links.new(group_in.outputs["Geometry"], inst.inputs["Points"])
    nt.links.new(info.outputs["Geometry"], inst.inputs["Instance"])
    nt.links.new(rot.outputs["Rotation"], inst.inputs["Rotation"])
    nt.links.new(named_scale.outputs["Attribute"], inst.inputs["Scale"])

    nt.links.new(inst.outputs["Instances"], group_out.inputs["Geometry"])
    return ng


def apply_instancing_modifier(
    *,
    points_obj: bpy.types.Object,
    prototype: bpy.types.Object | None,
) -> str | None:
    if points_obj is None or points_obj.type != "MESH":
        return "Scatter points object is not a mesh"

    ng = _ensure_gn_node_group()

    mod = points_obj.modifiers.get(MODIFIER_NAME)
    if mod is None:
        mod = points_obj.modifiers.new(MODIFIER_NAME, "NODES")
    mod.node_group = ng

    # ID sockets can't be cleared to None, so a missing prototype disables
    # the modifier and leaves bare points.
    enabled = prototype is not None
    mod.show_viewport = enabled
    mod.show_render = enabled
    socket = _find_socket(ng, INSTANCE_SOCKET, "INPUT")
    if socket is not None and enabled:
        mod[socket.identifier] = prototype
    points_obj.update_tag()
    return None


def gn_rotation(transform: Transform) -> tuple[float, float, float]:
    """Rotation as the XYZ Euler that Euler to Rotation expects."""
    # A single non-zero angle reads the same in any order.
    if sum(1 for a in transform.rotation if a != 0.0) <= 1:
        return transform.rotation
    return tuple(Euler(transform.rotation, ROTATION_ORDER).to_matrix().to_euler("XYZ"))


def _ensure_prototype_collection() -> bpy.types.Collection:
    c = bpy.data.collections.get(PROTOTYPE_COLLECTION)
    if c is None:
        c = bpy.data.collections.new(PROTOTYPE_COLLECTION)
        bpy.context.scene.collection.children.link(c)
    c.hide_viewport = True
    c.hide_render = True
    c.hide_select = True
    return c


def _ensure_attr(mesh: bpy.types.Mesh, name: str, typ: str):
    attr = mesh.attributes.get(name)
    if attr is not None and attr.data_type == typ and attr.domain == "POINT":
        return attr
    if attr is not None:
        mesh.attributes.remove(attr)
    return mesh.attributes.new(name=name, type=typ, domain="POINT")


class BlenderInstancingTarget:
    """Points mesh whose vertices are drawn as instances of a prototype object.

    Each vertex is one instance: ``co`` is its location, and the
    ``ms_rotation``/``ms_scale`` point attributes feed Instance on Points.
    """

    def __init__(self, obj: bpy.types.Object):
        self.object = obj

    def is_valid(self) -> bool:
        try:
            return self.object.type == "MESH"
        except ReferenceError:
            return False

    @property
    def instance_count(self) -> int:
        return len(self.object.data.vertices)

    @property
    def prototype(self) -> bpy.types.Object | None:
        name = self.object.get("ms_prototype")
        if not name:
            return None
        return bpy.data.objects.get(name)

    def _ensure_prototype(self, mesh: bpy.types.Mesh) -> bpy.types.Object:
        proto = self.prototype
        if proto is None or proto.type != "MESH":
            proto = bpy.data.objects.new(f"{self.object.name}_Prototype", mesh)
            self.object["ms_prototype"] = proto.name
        else:
            proto.data = mesh
        lib = _ensure_prototype_collection()
        if proto.name not in lib.objects:
            lib.objects.link(proto)
        return proto

    def set_instance_count(self, count: int) -> None:
        mesh = self.object.data
        mesh.clear_geometry()
        if count > 0:
            mesh.vertices.add(int(count))
        _ensure_attr(mesh, ATTR_ROTATION, "FLOAT_VECTOR")
        _ensure_attr(mesh, ATTR_SCALE, "FLOAT_VECTOR")
        mesh.update()

    def set_mesh(self, mesh: bpy.types.Mesh | None) -> None:
        proto = self._ensure_prototype(mesh) if mesh is not None else None
        err = apply_instancing_modifier(points_obj=self.object, prototype=proto)
        if err:
            raise RuntimeError(err)

    def set_material(self, material: bpy.types.Material | None) -> None:
        proto = self.prototype
        if proto is None or proto.type != "MESH":
            return
        if material is None:
            for slot in proto.material_slots:
                slot.link = "DATA"
            return
        if not proto.material_slots:
            return
        slot = proto.material_slots[0]
        slot.link = "OBJECT"
        slot.material = material

    def set_instance_transform(self, index: int, transform: Transform) -> None:
        # set_instance_count already tagged the mesh for re-evaluation.
        mesh = self.object.data
        mesh.vertices[index].co = transform.location
        mesh.attributes[ATTR_ROTATION].data[index].vector = gn_rotation(transform)
        mesh.attributes[ATTR_SCALE].data[index].vector = transform.scale
