from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator

from ..geom import Transform
from .sampler import RandomStream, sample_transform

logger = logging.getLogger(__name__)

DEFAULT_INSTANCE_COUNT = 50
DEFAULT_AREA = (5.0, 5.0)
DEFAULT_SEED = 0

STATE_UNINITIALIZED = "UNINITIALIZED"
STATE_READY = "READY"


@dataclass
class ScatterConfig:
    mesh_source: str = ""
    instance_count: int = DEFAULT_INSTANCE_COUNT
    area_dimensions: tuple[float, float] = DEFAULT_AREA
    seed: int = DEFAULT_SEED


@dataclass(frozen=True)
class ResolvedMesh:
    mesh: Any
    material: Any = None


@dataclass
class InstanceBuffer:
    """In-memory instancing primitive.

    Mirrors the calls the controller makes on a Blender target, and keeps a
    ``history`` of them so call ordering can be checked.
    """

    mesh: Any = None
    material: Any = None
    transforms: list[Transform | None] = field(default_factory=list)
    history: list[tuple] = field(default_factory=list)

    @property
    def instance_count(self) -> int:
        return len(self.transforms)

    def set_instance_count(self, count: int) -> None:
        self.history.append(("set_instance_count", int(count)))
        self.transforms = [None] * max(0, int(count))

    def set_mesh(self, mesh: Any) -> None:
        self.history.append(("set_mesh", mesh))
        self.mesh = mesh

    def set_material(self, material: Any) -> None:
        self.history.append(("set_material", material))
        self.material = material

    def set_instance_transform(self, index: int, transform: Transform) -> None:
        if index < 0 or index >= len(self.transforms):
            raise IndexError(f"Instance index {index} out of range for count {len(self.transforms)}")
        self.transforms[index] = transform


def _valid_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class ScatterController:
    """Keeps a ScatterConfig and repopulates an instancing target from it.

    ``host`` supplies the environment:

    - ``is_ready()`` - False while the scene can't be edited yet.
    - ``obtain_target(current)`` - return ``current`` if still usable, else a
      new target that the host has attached and taken ownership of.
    - ``resolve_mesh(source)`` - a ``ResolvedMesh`` or None.
    - ``report_warning(message)`` - surface a problem to the user.

    Every setter rebuilds, unless a ``batch()`` is open.
    """

    def __init__(self, host, config: ScatterConfig | None = None, stream: RandomStream | None = None):
        self.host = host
        self.config = config if config is not None else ScatterConfig()
        self.stream = stream if stream is not None else RandomStream(self.config.seed)
        self.target = None
        self.last_warning = ""
        self.rebuild_count = 0
        self._batch_depth = 0
        self._rebuild_pending = False

    @property
    def state(self) -> str:
        return STATE_READY if self.target is not None else STATE_UNINITIALIZED

    @contextmanager
    def batch(self) -> Iterator["ScatterController"]:
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
        if self._batch_depth == 0 and self._rebuild_pending:
            self._rebuild_pending = False
            self.rebuild()

    def set_mesh_source(self, source: str | None) -> bool:
        self.config.mesh_source = str(source or "")
        self.rebuild()
        return True

    def set_instance_count(self, count: int) -> bool:
        accepted = _valid_count(count)
        if accepted:
            self.config.instance_count = int(count)
        else:
            logger.warning("Rejected instance count %r, keeping %d", count, self.config.instance_count)
        self.rebuild()
        return accepted

    def set_area_dimensions(self, dimensions) -> bool:
        accepted = True
        try:
            width, depth = (float(v) for v in dimensions)
        except (TypeError, ValueError):
            accepted = False
        else:
            if not (math.isfinite(width) and math.isfinite(depth) and width >= 0.0 and depth >= 0.0):
                accepted = False
        if accepted:
            self.config.area_dimensions = (width, depth)
        else:
            logger.warning("Rejected area %r, keeping %r", dimensions, self.config.area_dimensions)
        self.rebuild()
        return accepted

    def set_seed(self, seed: int) -> bool:
        self.config.seed = int(seed)
        self.rebuild()
        return True

    def _resolve(self) -> ResolvedMesh | None:
        source = self.config.mesh_source
        if not source:
            logger.debug("No mesh source set, instancing without a mesh")
            return None
        resolved = self.host.resolve_mesh(source)
        if resolved is None or resolved.mesh is None:
            message = f"Mesh source not found: {source}"
            logger.warning(message)
            self.last_warning = message
            self.host.report_warning(message)
            return None
        return resolved

    def rebuild(self) -> bool:
        if self._batch_depth > 0:
            self._rebuild_pending = True
            return False
        if not self.host.is_ready():
            logger.debug("Host not ready, rebuild skipped")
            return False

        cfg = self.config
        self.stream.set_seed(cfg.seed)
        self.target = self.host.obtain_target(self.target)

        self.last_warning = ""
        resolved = self._resolve()
        mesh = resolved.mesh if resolved is not None else None
        material = resolved.material if resolved is not None else None

        # Count goes to zero before the mesh changes so no stale instance
        # ever refers to the new mesh.
        target = self.target
        target.set_instance_count(0)
        target.set_mesh(mesh)
        target.set_material(material)
        target.set_instance_count(cfg.instance_count)

        width, depth = cfg.area_dimensions
        for i in range(cfg.instance_count):
            target.set_instance_transform(i, sample_transform(self.stream, width, depth))

        self.rebuild_count += 1
        logger.debug(
            "Rebuilt %d instances (seed=%d, area=%.3fx%.3f)", cfg.instance_count, cfg.seed, width, depth
        )
        return True
