import os
from enum import Enum

from convertshaders.errors import UnrecognizedShaderStage


class ShaderStage(Enum):
    Vertex = 0
    Fragment = 1

    # (file extension, glslcc flag, glslcc output suffix, HLSL profile prefix)
    def _properties(self):
        if self == ShaderStage.Vertex:
            return (".vert", "--vert", "vs", "vs")
        return (".frag", "--frag", "fs", "ps")

    @property
    def extension(self) -> str:
        return self._properties()[0]

    @property
    def compiler_flag(self) -> str:
        return self._properties()[1]

    @property
    def output_suffix(self) -> str:
        return self._properties()[2]

    def hlsl_profile(self, version: str = "4_0") -> str:
        return f"{self._properties()[3]}_{version}"

    @classmethod
    def from_path(cls, path: str):
        extension = os.path.splitext(path)[1]
        for stage in cls:
            if stage.extension == extension:
                return stage

        raise UnrecognizedShaderStage(
            f'Unrecognized shader type "{extension}", expected ".vert" or ".frag"',
            path=path,
        )
