import json

from convertshaders.backend import (
    InputLocation,
    UniformBlock,
    UniformLocation,
    UniformsReflection,
    TextureBinding,
    ShaderSources,
)
from convertshaders.errors import ReflectionParseError, UnsupportedType

from .data_type import parse_data_type


def _get_field(object: dict, key: str, field_type: type, context: str):
    """
    Reads a typed field from a decoded JSON object. Missing fields get the zero
    value of their type, fields of a different type are rejected.
    """
    if key not in object:
        return field_type()

    value = object[key]
    if not isinstance(value, field_type) or (
        field_type is int and isinstance(value, bool)
    ):
        raise ReflectionParseError(
            f'Invalid reflection field "{context}.{key}": '
            f"expected {field_type.__name__}, got {type(value).__name__}"
        )
    return value


def _get_list(object: dict, key: str, item_type: type, context: str) -> list:
    items = _get_field(object, key, list, context)
    return [item_type().load(item, f"{context}.{key}[{i}]") for i, item in enumerate(items)]


def _check_object(object, context: str):
    if not isinstance(object, dict):
        raise ReflectionParseError(
            f'Invalid reflection entry "{context}": expected object, got {type(object).__name__}'
        )


class InputReflection:
    id: int
    name: str
    location: int
    semantic: str
    semantic_index: int
    type: str

    def __init__(self) -> None:
        self.id = 0
        self.name = ""
        self.location = 0
        self.semantic = ""
        self.semantic_index = 0
        self.type = ""

    def load(self, object: dict, context: str = "input"):
        _check_object(object, context)
        self.id = _get_field(object, "id", int, context)
        self.name = _get_field(object, "name", str, context)
        self.location = _get_field(object, "location", int, context)
        self.semantic = _get_field(object, "semantic", str, context)
        self.semantic_index = _get_field(object, "semantic_index", int, context)
        self.type = _get_field(object, "type", str, context)
        return self


class UniformMemberReflection:
    name: str
    type: str
    offset: int
    size: int

    def __init__(self) -> None:
        self.name = ""
        self.type = ""
        self.offset = 0
        self.size = 0

    def load(self, object: dict, context: str = "member"):
        _check_object(object, context)
        self.name = _get_field(object, "name", str, context)
        self.type = _get_field(object, "type", str, context)
        self.offset = _get_field(object, "offset", int, context)
        self.size = _get_field(object, "size", int, context)
        return self


class UniformBufferReflection:
    id: int
    name: str
    set: int
    binding: int
    size: int
    members: list[UniformMemberReflection]

    def __init__(self) -> None:
        self.id = 0
        self.name = ""
        self.set = 0
        self.binding = 0
        self.size = 0
        self.members = []

    def load(self, object: dict, context: str = "uniform_buffer"):
        _check_object(object, context)
        self.id = _get_field(object, "id", int, context)
        self.name = _get_field(object, "name", str, context)
        self.set = _get_field(object, "set", int, context)
        self.binding = _get_field(object, "binding", int, context)
        self.size = _get_field(object, "block_size", int, context)
        self.members = _get_list(object, "members", UniformMemberReflection, context)
        return self


class TextureReflection:
    id: int
    name: str
    set: int
    binding: int
    dimension: str
    format: str

    def __init__(self) -> None:
        self.id = 0
        self.name = ""
        self.set = 0
        self.binding = 0
        self.dimension = ""
        self.format = ""

    def load(self, object: dict, context: str = "texture"):
        _check_object(object, context)
        self.id = _get_field(object, "id", int, context)
        self.name = _get_field(object, "name", str, context)
        self.set = _get_field(object, "set", int, context)
        self.binding = _get_field(object, "binding", int, context)
        self.dimension = _get_field(object, "dimension", str, context)
        self.format = _get_field(object, "format", str, context)
        return self


class StageReflection:
    inputs: list[InputReflection]
    uniform_buffers: list[UniformBufferReflection]
    textures: list[TextureReflection]

    def __init__(self) -> None:
        self.inputs = []
        self.uniform_buffers = []
        self.textures = []

    def load(self, object: dict, context: str = "stage"):
        _check_object(object, context)
        self.inputs = _get_list(object, "inputs", InputReflection, context)
        self.uniform_buffers = _get_list(
            object, "uniform_buffers", UniformBufferReflection, context
        )
        self.textures = _get_list(object, "textures", TextureReflection, context)
        return self


class ShaderReflection:
    vs: StageReflection
    fs: StageReflection

    def __init__(self) -> None:
        self.vs = StageReflection()
        self.fs = StageReflection()

    def load(self, object: dict):
        _check_object(object, "reflection")
        if "vs" in object:
            self.vs = StageReflection().load(object["vs"], "vs")
        if "fs" in object:
            self.fs = StageReflection().load(object["fs"], "fs")
        return self

    @classmethod
    def from_json(cls, json_data: str | bytes):
        try:
            object = json.loads(json_data)
        except ValueError as e:
            raise ReflectionParseError(f"Malformed reflection JSON: {e}") from None
        return cls().load(object)


def parse_reflection(json_data: str | bytes, name: str = "") -> ShaderSources:
    """
    Converts a glslcc reflection document into binding metadata.

    Vertex inputs are sorted by location, since renderers bind attributes by
    position. Uniform blocks and textures come from the vertex stage, or from
    the fragment stage if the vertex stage declares none. All uniform blocks
    share one address space: each block starts where the previous one ended.
    """
    reflection = ShaderReflection.from_json(json_data)

    inputs = []
    for input in reflection.vs.inputs:
        data_type, size = _parse_type(input.type, f'input "{input.name}"')
        inputs.append(
            InputLocation(
                name=input.name,
                location=input.location,
                semantic=input.semantic,
                semantic_index=input.semantic_index,
                type=data_type,
                size=size,
            )
        )
    inputs.sort(key=lambda x: x.location)

    uniform_buffers = reflection.vs.uniform_buffers or reflection.fs.uniform_buffers
    blocks = []
    locations = []
    block_offset = 0
    for block in uniform_buffers:
        blocks.append(UniformBlock(name=block.name, binding=block.binding))
        for member in block.members:
            data_type, size = _parse_type(
                member.type, f'uniform "{block.name}.{member.name}"'
            )
            locations.append(
                UniformLocation(
                    # Synthetic name generated by glslcc.
                    name=f"_{block.id}.{member.name}",
                    type=data_type,
                    size=size,
                    offset=block_offset + member.offset,
                )
            )
        block_offset += block.size

    textures = reflection.vs.textures or reflection.fs.textures

    return ShaderSources(
        name=name,
        inputs=tuple(inputs),
        uniforms=UniformsReflection(
            blocks=tuple(blocks), locations=tuple(locations), size=block_offset
        ),
        textures=tuple(TextureBinding(name=t.name, binding=t.binding) for t in textures),
    )


def _parse_type(type_name: str, context: str):
    try:
        return parse_data_type(type_name)
    except UnsupportedType as e:
        raise UnsupportedType(f"{e.message} for {context}") from None
