from convertshaders.backend.data_type import DataType
from convertshaders.errors import UnsupportedType

# Scalar and vector type names as reported by glslcc reflection.
_DATA_TYPES = {
    "float": (DataType.Float, 1),
    "float2": (DataType.Float, 2),
    "float3": (DataType.Float, 3),
    "float4": (DataType.Float, 4),
    "int": (DataType.Int, 1),
    "int2": (DataType.Int, 2),
    "int3": (DataType.Int, 3),
    "int4": (DataType.Int, 4),
}


def parse_data_type(name: str) -> tuple[DataType, int]:
    """Returns data type and component count of a reflected type name."""
    if name not in _DATA_TYPES:
        raise UnsupportedType(f'Unsupported input data type "{name}"')
    return _DATA_TYPES[name]
