from convertshaders import util
from convertshaders.backend import ShaderSources


class ShaderEntry:
    """
    Generated output for one shader file. `sources` is a single ShaderSources
    if every variant produced the same code, otherwise a tuple of them in
    variant order.
    """

    path: str
    name: str
    sources: ShaderSources | tuple[ShaderSources, ...]

    def __init__(self, path: str, variants: list[ShaderSources]) -> None:
        self.path = path
        self.name = util.format_shader_name(path)

        # If the shader doesn't use the variant arguments, keep a single version.
        # The comparison is textual: only identical GLSL ES 100 code is merged.
        if all(v.glsl100es == variants[0].glsl100es for v in variants[1:]):
            self.sources = variants[0]
        else:
            self.sources = tuple(variants)

    @property
    def is_multi_variant(self) -> bool:
        return isinstance(self.sources, tuple)

    def get_variants(self) -> tuple[ShaderSources, ...]:
        return self.sources if self.is_multi_variant else (self.sources,)
