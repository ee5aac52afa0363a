from .data_type import DataType
from .stage import ShaderStage
from .target import BackendTarget
from .shader_sources import (
    InputLocation,
    UniformBlock,
    UniformLocation,
    UniformsReflection,
    TextureBinding,
    ShaderSources,
)
