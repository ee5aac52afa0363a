from dataclasses import dataclass, field

from .data_type import DataType


@dataclass(frozen=True)
class InputLocation:
    name: str
    location: int
    semantic: str
    semantic_index: int
    type: DataType
    size: int


@dataclass(frozen=True)
class UniformBlock:
    name: str
    binding: int


@dataclass(frozen=True)
class UniformLocation:
    name: str
    type: DataType
    size: int
    offset: int


@dataclass(frozen=True)
class UniformsReflection:
    blocks: tuple[UniformBlock, ...] = ()
    locations: tuple[UniformLocation, ...] = ()
    size: int = 0


@dataclass(frozen=True)
class TextureBinding:
    name: str
    binding: int


@dataclass(frozen=True)
class ShaderSources:
    """
    Backend sources of a single shader variant together with the binding
    metadata a renderer needs to feed it.

    `hlsl` holds compiled DXBC bytecode, or None when no bytecode compiler was
    available during the build. `hlsl_source` is kept for debugging only and is
    not part of the generated module.
    """

    name: str = ""
    inputs: tuple[InputLocation, ...] = ()
    uniforms: UniformsReflection = field(default_factory=UniformsReflection)
    textures: tuple[TextureBinding, ...] = ()
    glsl100es: str = ""
    glsl300es: str = ""
    hlsl: bytes | None = None
    hlsl_source: str = field(default="", compare=False, repr=False)
