"""Geometry table: which plotnine geom each gf_ function draws."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping


@dataclass(frozen=True)
class GeometrySpec:
    """A plotnine geom plus keyword arguments fixed for it (values are Python source)."""

    name: str
    fixed_extras: Mapping[str, str] = field(default_factory=dict)

    @property
    def function_name(self) -> str:
        return f"geom_{self.name}"


# gf_<key> -> geometry
GEOMETRIES: Dict[str, GeometrySpec] = {
    "frame": GeometrySpec("blank"),
    "point": GeometrySpec("point"),
    "jitter": GeometrySpec("jitter"),
    "line": GeometrySpec("line"),
    "path": GeometrySpec("path"),
    "density": GeometrySpec("density"),
    "density_2d": GeometrySpec("density_2d"),
    # plotnine has no geom_hex
    "bin_2d": GeometrySpec("bin_2d"),
    "hline": GeometrySpec("hline"),
    "vline": GeometrySpec("vline"),
    "abline": GeometrySpec("abline"),
    "boxplot": GeometrySpec("boxplot"),
    "violin": GeometrySpec("violin"),
    "freqpoly": GeometrySpec("freqpoly"),
    "histogram": GeometrySpec("histogram"),
    "text": GeometrySpec("text"),
    "counts": GeometrySpec("bar", MappingProxyType({"stat": '"count"'})),
    "bar": GeometrySpec("bar", MappingProxyType({"stat": '"identity"'})),
}
