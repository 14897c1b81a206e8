import struct

from fanucbot.models import (
    EmptyLoader,
    ModelLoaderFactory,
    ObjLoader,
    Shell,
    StlLoader,
    Triangle,
)

ASCII_STL = """solid cube
facet normal 0 0 1
  outer loop
    vertex 0 0 0
    vertex 1 0 0
    vertex 0 1 0
  endloop
endfacet
facet normal 0 0 1
  outer loop
    vertex 1 0 0
    vertex 1 1 0
    vertex 0 1 0
  endloop
endfacet
endsolid cube
"""


def _binary_stl(triangles):
    data = bytearray(b"\0" * 80)
    data += struct.pack("<I", len(triangles))
    for a, b, c in triangles:
        data += struct.pack("<12fH", 0.0, 0.0, 1.0, *a, *b, *c, 0)
    return bytes(data)


def test_ascii_stl(tmp_path):
    path = tmp_path / "part.stl"
    path.write_text(ASCII_STL)
    shell = StlLoader().load(path)
    assert shell.triangles == (
        Triangle((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)),
        Triangle((1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)),
    )


def test_binary_stl(tmp_path):
    tris = [((0.0, 0.0, 0.0), (2.0, 0.0, 0.0), (0.0, 2.0, 0.0)),
            ((0.0, 0.0, 1.0), (2.0, 0.0, 1.0), (0.0, 2.0, 1.0))]
    path = tmp_path / "part.stl"
    path.write_bytes(_binary_stl(tris))
    shell = StlLoader().load(str(path))
    assert [(t.a, t.b, t.c) for t in shell] == tris


def test_stl_degenerate_dropped(tmp_path):
    tris = [((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0)),
            ((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))]
    path = tmp_path / "d.stl"
    path.write_bytes(_binary_stl(tris))
    shell = StlLoader().load(path)
    assert len(shell) == 1
    assert shell.triangles[0].b == (1.0, 0.0, 0.0)


def test_stl_garbage_is_empty(tmp_path):
    path = tmp_path / "bad.stl"
    path.write_bytes(b"not a model")
    assert StlLoader().load(path).is_empty


def test_missing_file_is_empty(tmp_path):
    assert StlLoader().load(tmp_path / "none.stl") == Shell()
    assert ObjLoader().load(tmp_path / "none.obj") == Shell()


def test_obj_quad_fan(tmp_path):
    path = tmp_path / "q.obj"
    path.write_text("# quad\nv 0 0 0\nv 1 0 0\nv 1 1 0\nv 0 1 0\nf 1/1/1 2/2/2 3 4\n")
    shell = ObjLoader().load(path)
    assert shell.triangles == (
        Triangle((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0)),
        Triangle((0.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)),
    )


def test_obj_negative_indices(tmp_path):
    path = tmp_path / "n.obj"
    path.write_text("v 0 0 0\nv 1 0 0\nv 0 1 0\nf -3 -2 -1\n")
    shell = ObjLoader().load(path)
    assert shell.triangles == (Triangle((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)),)


def test_obj_bad_index_is_empty(tmp_path):
    path = tmp_path / "b.obj"
    path.write_text("v 0 0 0\nf 1 2 3\n")
    assert ObjLoader().load(path).is_empty


def test_factory_filters_and_lookup():
    factory = ModelLoaderFactory()
    assert factory.supported_filters() == "STL (*.stl);;OBJ (*.obj)"
    assert isinstance(factory.loader("STL (*.stl)"), StlLoader)
    assert isinstance(factory.loader("OBJ (*.obj)"), ObjLoader)
    assert isinstance(factory.loader("STEP (*.step *.stp)"), EmptyLoader)


def test_empty_loader_ignores_file(tmp_path):
    path = tmp_path / "part.stl"
    path.write_text(ASCII_STL)
    assert ModelLoaderFactory().loader("unknown").load(path).is_empty