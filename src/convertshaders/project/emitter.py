from dataclasses import fields
from enum import Enum

from convertshaders.backend import ShaderSources
from convertshaders.tempfile import AtomicOutputFile

from .shader_entry import ShaderEntry

INDENT = "    "
BYTES_PER_LINE = 48

HEADER = "# Code generated by convertshaders. DO NOT EDIT."

IMPORTS = """from convertshaders.backend import (
    DataType,
    InputLocation,
    ShaderSources,
    TextureBinding,
    UniformBlock,
    UniformLocation,
    UniformsReflection,
)"""


def _format_value(value) -> str:
    if isinstance(value, Enum):
        return f"{type(value).__name__}.{value.name}"
    return repr(value)


def _format_record(record) -> str:
    args = ", ".join(
        f"{f.name}={_format_value(getattr(record, f.name))}" for f in fields(record)
    )
    return f"{type(record).__name__}({args})"


def _sequence_lines(name: str, items: tuple, indent: str) -> list[str]:
    lines = [f"{indent}{name}=("]
    lines.extend(f"{indent}{INDENT}{_format_record(item)}," for item in items)
    lines.append(f"{indent}),")
    return lines


def _literal_lines(name: str, value: str | bytes, indent: str) -> list[str]:
    """Long strings and byte arrays are split into implicitly joined literals."""
    if isinstance(value, bytes):
        chunks = [
            value[i : i + BYTES_PER_LINE] for i in range(0, len(value), BYTES_PER_LINE)
        ]
    else:
        chunks = value.splitlines(keepends=True)

    if len(chunks) <= 1:
        return [f"{indent}{name}={value!r},"]

    lines = [f"{indent}{name}=("]
    lines.extend(f"{indent}{INDENT}{chunk!r}" for chunk in chunks)
    lines.append(f"{indent}),")
    return lines


def _shader_sources_lines(src: ShaderSources, indent: str) -> list[str]:
    inner = indent + INDENT
    lines = [f"{indent}ShaderSources("]
    lines.append(f"{inner}name={src.name!r},")

    if src.inputs:
        lines.extend(_sequence_lines("inputs", src.inputs, inner))

    if src.uniforms.blocks:
        lines.append(f"{inner}uniforms=UniformsReflection(")
        lines.extend(_sequence_lines("blocks", src.uniforms.blocks, inner + INDENT))
        lines.extend(
            _sequence_lines("locations", src.uniforms.locations, inner + INDENT)
        )
        lines.append(f"{inner}{INDENT}size={src.uniforms.size},")
        lines.append(f"{inner}),")

    if src.textures:
        lines.extend(_sequence_lines("textures", src.textures, inner))

    lines.extend(_literal_lines("glsl100es", src.glsl100es, inner))
    lines.extend(_literal_lines("glsl300es", src.glsl300es, inner))

    if src.hlsl_source:
        lines.append(f"{inner}# HLSL source:")
        lines.extend(
            f"{inner}# {line}".rstrip() for line in src.hlsl_source.splitlines()
        )

    if src.hlsl is None:
        lines.append(f"{inner}hlsl=None,")
    else:
        lines.extend(_literal_lines("hlsl", src.hlsl, inner))

    lines.append(f"{indent})")
    return lines


def generate_module(entries: list[ShaderEntry], module_name: str) -> str:
    """
    Renders shader entries as Python source, one module level assignment per
    shader, in the order the entries are given.
    """
    lines = [HEADER, "", f'"""Shader sources of the {module_name} module."""', ""]
    lines.append(IMPORTS)

    for entry in entries:
        lines.extend(("", ""))
        if entry.is_multi_variant:
            lines.append(f"{entry.name} = (")
            for src in entry.sources:
                src_lines = _shader_sources_lines(src, INDENT)
                src_lines[-1] += ","
                lines.extend(src_lines)
            lines.append(")")
        else:
            src_lines = _shader_sources_lines(entry.sources, "")
            src_lines[0] = f"{entry.name} = {src_lines[0]}"
            lines.extend(src_lines)

    return "\n".join(lines) + "\n"


def write_module(entries: list[ShaderEntry], module_name: str, path: str):
    code = generate_module(entries, module_name)
    with AtomicOutputFile(path) as f:
        f.write(code)
    return path
