from .data_type import parse_data_type
from .reflection import parse_reflection, ShaderReflection
