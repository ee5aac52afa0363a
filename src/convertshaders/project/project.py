import os, dataclasses

from .emitter import write_module
from .project_config import ProjectConfig
from .shader_entry import ShaderEntry
from .variant import Variant, VARIANTS

from convertshaders import util
from convertshaders.backend import BackendTarget, ShaderSources, ShaderStage
from convertshaders.compiler.fxc import FxcCompiler
from convertshaders.compiler.glslcc import ConvertedShader, GlslccCompiler
from convertshaders.errors import (
    ConvertShadersError,
    DiscoveryError,
    DuplicateShaderName,
)
from convertshaders.reflection import parse_reflection
from convertshaders.tempfile import ScratchDirectory


class BuildContext:
    """
    State shared by all shader conversions of a single run. The scratch
    directory is only valid while the run is in progress.
    """

    config: ProjectConfig
    scratch_dir: str
    converter: GlslccCompiler
    bytecode_compiler: FxcCompiler | None
    entries: list[ShaderEntry]

    def __init__(
        self,
        config: ProjectConfig,
        scratch_dir: str,
        converter: GlslccCompiler,
        bytecode_compiler: FxcCompiler | None = None,
    ) -> None:
        self.config = config
        self.scratch_dir = scratch_dir
        self.converter = converter
        self.bytecode_compiler = bytecode_compiler
        self.entries = []

    def convert(
        self, code_path: str, stage: ShaderStage, target: BackendTarget
    ) -> ConvertedShader:
        try:
            return self.converter.convert(
                code_path,
                stage,
                target,
                self.scratch_dir,
                self.config.flatten_ubos,
                self.config.glslcc_options,
            )
        except ConvertShadersError as e:
            raise e.add_context(target=target.name)

    def compile_bytecode(self, code: str, stage: ShaderStage) -> bytes | None:
        if self.bytecode_compiler is None:
            return None
        try:
            return self.bytecode_compiler.compile(
                code, self.config.entry_point, stage.hlsl_profile(), self.scratch_dir
            )
        except ConvertShadersError as e:
            raise e.add_context(target=BackendTarget.HLSL40.name)


def discover_shaders(shaders_folder: str) -> list[str]:
    try:
        entries = os.listdir(shaders_folder)
    except OSError as e:
        raise DiscoveryError(
            f'Failed to read shader folder "{shaders_folder}": {e.strerror}'
        ) from None

    paths = []
    for entry in sorted(entries):
        path = os.path.join(shaders_folder, entry)
        if not entry.startswith(".") and os.path.isfile(path):
            paths.append(path)
    return paths


def check_shader_names(shader_paths: list[str]):
    """
    Rejects shader files that would be emitted under the same module level
    name, e.g. "a-b.frag" and "a_b.frag".
    """
    names: dict[str, str] = {}
    for path in shader_paths:
        name = util.format_shader_name(path)
        if name in names:
            raise DuplicateShaderName(
                f'Shaders "{names[name]}" and "{path}" both map to "{name}"',
                path=path,
            )
        names[name] = path


def convert_variant(
    context: BuildContext, path: str, stage: ShaderStage, variant: Variant
) -> ShaderSources:
    with variant.write_expanded(path, context.scratch_dir) as code_path:
        glsl100es = context.convert(code_path, stage, BackendTarget.GLSL100ES)
        # Reflection is backend independent, only the first conversion is parsed.
        try:
            sources = parse_reflection(glsl100es.reflection, os.path.basename(path))
        except ConvertShadersError as e:
            raise e.add_context(target=BackendTarget.GLSL100ES.name)

        glsl300es = context.convert(code_path, stage, BackendTarget.GLSL300ES)
        hlsl = context.convert(code_path, stage, BackendTarget.HLSL40)

    return dataclasses.replace(
        sources,
        # Make the GL ES 2 source compatible with desktop GL 3. Code that already
        # starts with a version directive is kept as is, glslcc never emits one
        # for profile 100.
        glsl100es=util.insert_version_directive(
            glsl100es.text, BackendTarget.GLSL100ES
        ),
        glsl300es=glsl300es.text,
        hlsl=context.compile_bytecode(hlsl.text, stage),
        hlsl_source=hlsl.text,
    )


def convert_shader_file(context: BuildContext, path: str) -> ShaderEntry:
    try:
        stage = ShaderStage.from_path(path)
    except ConvertShadersError as e:
        raise e.add_context(path=path)

    variants = []
    for variant in VARIANTS:
        try:
            variants.append(convert_variant(context, path, stage, variant))
        except ConvertShadersError as e:
            raise e.add_context(path=path, variant=variant.name)

    return ShaderEntry(path, variants)


def compile(
    config: ProjectConfig,
    converter: GlslccCompiler = None,
    bytecode_compiler: FxcCompiler = None,
):
    """
    Converts every shader of the configured folder and writes the generated
    module. Any failure aborts the whole run before the module is written.
    """
    config.validate()

    if converter is None:
        converter = GlslccCompiler(config.glslcc_paths)

    if not config.compile_bytecode:
        bytecode_compiler = None
    elif bytecode_compiler is None:
        bytecode_compiler = FxcCompiler.find(config.fxc_paths)
        if bytecode_compiler is None:
            print(
                "Warning! FXC compiler was not found, HLSL bytecode will not be generated."
            )

    shader_paths = discover_shaders(config.shaders_folder)
    check_shader_names(shader_paths)

    with ScratchDirectory() as scratch_dir:
        context = BuildContext(config, scratch_dir, converter, bytecode_compiler)
        for path in shader_paths:
            print(os.path.basename(path))
            context.entries.append(convert_shader_file(context, path))

    output_path = config.get_output_path()
    write_module(context.entries, config.module, output_path)
    print(f'Wrote "{output_path}"')

    return context.entries
