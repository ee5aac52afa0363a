import os, re

from convertshaders.errors import TemplateError
from convertshaders.tempfile import ScratchFile

# {{.Key}}, {{ .Key }}, trim markers {{- .Key -}} and comments {{/* ... */}}
_TEMPLATE_ACTION = re.compile(r"\{\{(-\s)?(.*?)(\s-)?\}\}", re.DOTALL)
_FIELD_REFERENCE = re.compile(r"\s*\.([A-Za-z_][A-Za-z0-9_]*)\s*")
_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_TRIMMED = " \t\r\n"


def render_template(template: str, values: dict[str, str], path: str = None):
    if "{{" in _TEMPLATE_ACTION.sub("", template):
        raise TemplateError("Unterminated template action", path=path)

    def render_action(match: re.Match):
        body = match.group(2)
        if _COMMENT.fullmatch(body):
            return ""
        field = _FIELD_REFERENCE.fullmatch(body)
        if field is None:
            raise TemplateError(
                f'Unsupported template action "{match.group(0)}"', path=path
            )
        key = field.group(1)
        if key not in values:
            raise TemplateError(
                f'Template references undefined key "{key}"', path=path
            )
        return values[key]

    output = []
    position = 0
    trim_next = False
    for match in _TEMPLATE_ACTION.finditer(template):
        text = template[position : match.start()]
        if trim_next:
            text = text.lstrip(_TRIMMED)
        if match.group(1):
            text = text.rstrip(_TRIMMED)
        output.append(text)
        output.append(render_action(match))
        position = match.end()
        trim_next = bool(match.group(3))

    text = template[position:]
    output.append(text.lstrip(_TRIMMED) if trim_next else text)
    return "".join(output)


class Variant:
    name: str
    fetch_color_expr: str
    header: str

    def __init__(self, name: str = "", fetch_color_expr: str = "", header: str = ""):
        self.name = name
        self.fetch_color_expr = fetch_color_expr
        self.header = header

    def __repr__(self) -> str:
        return f"Variant({self.name!r})"

    def template_values(self):
        return {
            "FetchColorExpr": self.fetch_color_expr,
            "Header": self.header,
        }

    def expand(self, template_path: str) -> str:
        try:
            with open(template_path, encoding="utf-8") as f:
                template = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateError(
                f"Failed to read shader template: {e}", path=template_path
            ) from None

        return render_template(template, self.template_values(), template_path)

    def write_expanded(self, template_path: str, scratch_dir: str):
        """
        Writes the variant specialized shader into the scratch directory, under
        the template's file name. Returns a context manager yielding its path,
        the file is removed on exit.
        """
        return ScratchFile(
            scratch_dir, os.path.basename(template_path), self.expand(template_path)
        )


# Order matters: multi-variant shaders are emitted as a tuple indexed by it.
VARIANTS = (
    Variant(
        "uniform_color",
        fetch_color_expr="_color",
        header="layout(binding=0) uniform Color { vec4 _color; };",
    ),
    Variant(
        "sampled_texture",
        fetch_color_expr="texture(tex, vUV)",
        header="layout(binding=0) uniform sampler2D tex;",
    ),
)
