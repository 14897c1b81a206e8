"""Loading triangle-mesh models (STL, OBJ) into shells of triangular faces."""

from __future__ import annotations

import itertools
import struct
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Sequence

Point = tuple[float, float, float]

_STL_HEADER = 80
_STL_FACET = struct.Struct("<12fH")


@dataclass(frozen=True)
class Triangle:
    a: Point
    b: Point
    c: Point

    def is_degenerate(self) -> bool:
        return self.a == self.b or self.b == self.c or self.a == self.c


@dataclass(frozen=True)
class Shell:
    """A set of triangular faces; empty when nothing could be loaded."""

    triangles: tuple[Triangle, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.triangles

    def __len__(self) -> int:
        return len(self.triangles)

    def __iter__(self) -> Iterator[Triangle]:
        return iter(self.triangles)


def _shell(triangles: Iterable[Triangle]) -> Shell:
    return Shell(tuple(t for t in triangles if not t.is_degenerate()))


def _fan(points: Sequence[Point]) -> Iterator[Triangle]:
    first = points[0]
    for b, c in zip(points[1:], points[2:]):
        yield Triangle(first, b, c)


class ModelLoader(ABC):
    """Reads a model file; any failure to read or parse yields an empty shell."""

    def load(self, fname: str | Path) -> Shell:
        try:
            return self._load(Path(fname))
        except (OSError, ValueError, struct.error):
            return Shell()

    @abstractmethod
    def _load(self, path: Path) -> Shell: ...


class EmptyLoader(ModelLoader):
    """Loader for unknown formats: always an empty shell."""

    def _load(self, path: Path) -> Shell:
        return Shell()


class StlLoader(ModelLoader):
    """Binary or ASCII STL."""

    def _load(self, path: Path) -> Shell:
        data = path.read_bytes()
        if len(data) >= _STL_HEADER + 4:
            (count,) = struct.unpack_from("<I", data, _STL_HEADER)
            if len(data) == _STL_HEADER + 4 + _STL_FACET.size * count:
                return _shell(self._binary(data, count))
        text = data.decode("latin-1")
        if not text.lstrip().lower().startswith("solid"):
            raise ValueError("not an STL file")
        return _shell(self._ascii(text))

    @staticmethod
    def _binary(data: bytes, count: int) -> Iterator[Triangle]:
        for offset in range(_STL_HEADER + 4, _STL_HEADER + 4 + _STL_FACET.size * count,
                            _STL_FACET.size):
            values = _STL_FACET.unpack_from(data, offset)
            yield Triangle(tuple(values[3:6]), tuple(values[6:9]), tuple(values[9:12]))

    @staticmethod
    def _ascii(text: str) -> list[Triangle]:
        triangles: list[Triangle] = []
        facet: list[Point] = []
        tokens = iter(text.split())
        for token in tokens:
            word = token.lower()
            if word == "facet":
                facet = []
            elif word == "vertex":
                coords = list(itertools.islice(tokens, 3))
                if len(coords) < 3:
                    raise ValueError("truncated vertex")
                facet.append(tuple(float(v) for v in coords))
            elif word == "endfacet":
                if len(facet) >= 3:
                    triangles.extend(_fan(facet))
                facet = []
        return triangles


class ObjLoader(ModelLoader):
    """Wavefront OBJ; polygons are split into triangle fans."""

    def _load(self, path: Path) -> Shell:
        vertices: list[Point] = []
        triangles: list[Triangle] = []
        with path.open(encoding="utf-8", errors="replace") as handle:
            for raw in handle:
                fields = raw.split("#", 1)[0].split()
                if not fields:
                    continue
                if fields[0] == "v":
                    if len(fields) < 4:
                        raise ValueError("vertex needs three coordinates")
                    vertices.append(tuple(float(v) for v in fields[1:4]))
                elif fields[0] == "f":
                    corners = [vertices[self._index(f, len(vertices))] for f in fields[1:]]
                    if len(corners) >= 3:
                        triangles.extend(_fan(corners))
        return _shell(triangles)

    @staticmethod
    def _index(field: str, count: int) -> int:
        index = int(field.split("/")[0])
        resolved = count + index if index < 0 else index - 1
        if not 0 <= resolved < count:
            raise ValueError(f"vertex index {index} out of range")
        return resolved


class ModelLoaderFactory:
    """Chooses a loader by its file-dialog filter name."""

    def __init__(self) -> None:
        self._loaders: list[tuple[str, ModelLoader]] = [
            ("STL (*.stl)", StlLoader()),
            ("OBJ (*.obj)", ObjLoader()),
        ]
        self._empty = EmptyLoader()

    def supported_filters(self) -> str:
        return ";;".join(name for name, _ in self._loaders)

    def loader(self, filter_name: str) -> ModelLoader:
        return next((loader for name, loader in self._loaders if name == filter_name),
                    self._empty)