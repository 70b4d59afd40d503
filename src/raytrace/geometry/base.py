"""Scene object interface and intersection results.

Every renderable shape implements SceneObject. The render loop only relies
on two capabilities: intersecting a ray on the host, and uploading itself to
the device tables that the render kernel reads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from raytrace.core.errors import InvalidGeometryError
from raytrace.core.vector import Vector4, require_direction, require_point
from raytrace.shading.material import Material


@dataclass(frozen=True)
class Intersection:
    """Where a ray meets a surface.

    Attributes:
        point: Homogeneous hit point.
        normal: Homogeneous unit surface normal at the hit point.
        t: Ray parameter of the hit, non-negative.
    """

    point: Vector4
    normal: Vector4
    t: float

    def __post_init__(self) -> None:
        require_point(self.point, "intersection point")
        require_direction(self.normal, "intersection normal")
        if not self.t >= 0.0:
            raise InvalidGeometryError(f"Intersection parameter t must be >= 0, got {self.t}")


class SceneObject(ABC):
    """Abstract base for intersection-testable shapes."""

    material: Material

    @abstractmethod
    def intersect(self, origin: Vector4, direction: Vector4) -> Intersection | None:
        """Return the nearest valid hit along the ray, or None on a miss."""

    @abstractmethod
    def upload(self, object_id: int) -> int:
        """Write this object into the device tables.

        Args:
            object_id: Position of the object in its scene's object list;
                reported back by device-side nearest-hit queries.

        Returns:
            The slot index used in the shape's device table.
        """
