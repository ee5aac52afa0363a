import json
import textwrap

import pytest

from convertshaders.backend import BackendTarget
from convertshaders.compiler.glslcc import ConvertedShader
from convertshaders.project.project_config import ProjectConfig


VERTEX_REFLECTION = {
    "vs": {
        "inputs": [
            {
                "id": 1,
                "name": "uv",
                "location": 1,
                "semantic": "TEXCOORD",
                "semantic_index": 0,
                "type": "float2",
            },
            {
                "id": 0,
                "name": "pos",
                "location": 0,
                "semantic": "POSITION",
                "semantic_index": 0,
                "type": "float2",
            },
        ],
        "uniform_buffers": [
            {
                "id": 12,
                "name": "Block",
                "set": 0,
                "binding": 0,
                "block_size": 32,
                "members": [
                    {"name": "transform", "type": "float4", "offset": 0, "size": 16},
                    {"name": "z", "type": "float", "offset": 16, "size": 4},
                ],
            }
        ],
    }
}

FRAGMENT_REFLECTION = {
    "fs": {
        "inputs": [
            {
                "id": 3,
                "name": "vUV",
                "location": 0,
                "semantic": "TEXCOORD",
                "semantic_index": 0,
                "type": "float2",
            }
        ],
        "uniform_buffers": [
            {
                "id": 7,
                "name": "Color",
                "set": 0,
                "binding": 0,
                "block_size": 16,
                "members": [{"name": "_color", "type": "float4", "offset": 0, "size": 16}],
            }
        ],
        "textures": [
            {
                "id": 9,
                "name": "tex",
                "set": 0,
                "binding": 0,
                "dimension": "2d",
                "format": "float4",
            }
        ],
    }
}


class FakeConverter:
    """
    Stands in for GLSLCC: echoes the expanded shader code prefixed with the
    target name and returns a canned reflection document.
    """

    def __init__(self, reflection=None, fail_on: BackendTarget = None):
        self.reflection = reflection
        self.fail_on = fail_on
        self.calls = []
        self.scratch_dirs = set()

    def convert(self, path, stage, target, scratch_dir, flatten_ubos=False, options=None):
        from convertshaders.errors import ConversionError

        self.calls.append((path, stage, target))
        self.scratch_dirs.add(scratch_dir)
        if target == self.fail_on:
            raise ConversionError("GLSLCC failed", output="error: syntax error", target=target.name)

        with open(path) as f:
            code = f.read()

        reflection = self.reflection
        if callable(reflection):
            reflection = reflection(target)
        if reflection is None:
            reflection = VERTEX_REFLECTION if stage.name == "Vertex" else FRAGMENT_REFLECTION
        if not isinstance(reflection, (str, bytes)):
            reflection = json.dumps(reflection)

        return ConvertedShader(f"// {target.name}\n{code}", reflection)


class FakeBytecodeCompiler:
    def __init__(self):
        self.calls = []

    def compile(self, code, entry_point, profile, scratch_dir):
        self.calls.append((entry_point, profile))
        return b"DXBC" + profile.encode()


@pytest.fixture
def write_shaders(tmp_path):
    def write(files: dict[str, str]):
        folder = tmp_path / "shaders"
        folder.mkdir(exist_ok=True)
        for name, code in files.items():
            (folder / name).write_text(textwrap.dedent(code))
        return folder

    return write


@pytest.fixture
def project_config(tmp_path):
    config = ProjectConfig()
    config.module = "gpu.shaders"
    config.shaders_folder = str(tmp_path / "shaders")
    config.output_path = str(tmp_path / "gpu" / "shaders.py")
    return config
