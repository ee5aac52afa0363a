"""Tests for the GLSLCC and FXC wrappers, using shell scripts as compilers."""

import json
import os
import sys
import textwrap

import pytest

from convertshaders.backend import BackendTarget, ShaderStage
from convertshaders.compiler import locate_compiler
from convertshaders.compiler.fxc import FxcCompiler
from convertshaders.compiler.glslcc import GlslccCompiler
from convertshaders.errors import (
    BytecodeCompileError,
    CompilerNotFoundError,
    ConversionError,
)

pytestmark = pytest.mark.skipif(
    sys.platform == "win32", reason="stand-in compilers are shell scripts"
)

FAKE_GLSLCC = r"""
    #!/bin/sh
    # Writes "<output>_<vs|fs>" and its JSON reflection like glslcc does.
    out=""; suffix=""; input=""; lang=""; profile=""; extra=""
    while [ $# -gt 0 ]; do
        case "$1" in
            --help) exit 0;;
            --output) out="$2"; shift;;
            --vert) suffix=vs; input="$2"; shift;;
            --frag) suffix=fs; input="$2"; shift;;
            --lang) lang="$2"; shift;;
            --profile) profile="$2"; shift;;
            --silent|--optimize|--reflect) ;;
            *) extra="$extra $1";;
        esac
        shift
    done
    if grep -q FAIL "$input"; then
        echo "$input:1: error: syntax error" >&2
        exit 1
    fi
    if grep -q NOOUTPUT "$input"; then
        exit 0
    fi
    if grep -q NOTUTF8 "$input"; then
        printf '\377\376' > "${out}_${suffix}"
        echo '{}' > "${out}_${suffix}.json"
        exit 0
    fi
    { echo "// $lang $profile$extra"; cat "$input"; } > "${out}_${suffix}"
    echo '{"fs": {"textures": [{"id": 1, "name": "tex", "binding": 0}]}}' > "${out}_${suffix}.json"
"""

FAKE_FXC = r"""
    #!/bin/sh
    out=""; input=""; profile=""; entry=""
    while [ $# -gt 0 ]; do
        case "$1" in
            "/?") exit 1;;
            /Fo) out="$2"; shift;;
            /T) profile="$2"; shift;;
            /E) entry="$2"; shift;;
            /nologo) ;;
            *) input="$1";;
        esac
        shift
    done
    if grep -q FAIL "$input"; then
        echo "$input(1,1): error X3000: syntax error" >&2
        exit 1
    fi
    printf "DXBC $profile $entry" > "$out"
"""


def _write_script(path, code: str) -> str:
    path.write_text(textwrap.dedent(code).lstrip())
    path.chmod(0o755)
    return str(path)


@pytest.fixture
def glslcc(tmp_path):
    return GlslccCompiler(_write_script(tmp_path / "glslcc", FAKE_GLSLCC))


@pytest.fixture
def fxc(tmp_path):
    return FxcCompiler.find(_write_script(tmp_path / "fxc", FAKE_FXC))


@pytest.fixture
def scratch_dir(tmp_path):
    path = tmp_path / "scratch"
    path.mkdir()
    return str(path)


def _shader(scratch_dir, name: str, code: str) -> str:
    path = os.path.join(scratch_dir, name)
    with open(path, "w", encoding="utf-8") as f:
        f.write(code)
    return path


class TestLocateCompiler:
    def test_first_existing(self, tmp_path):
        script = _write_script(tmp_path / "tool", "#!/bin/sh\nexit 3\n")
        assert locate_compiler([str(tmp_path / "missing"), script], ["-v"]) == script

    def test_none_found(self, tmp_path):
        assert locate_compiler([str(tmp_path / "missing")], ["-v"]) == ""


class TestGlslcc:
    def test_not_found(self, tmp_path):
        with pytest.raises(CompilerNotFoundError):
            GlslccCompiler(str(tmp_path / "missing"))

    def test_convert(self, glslcc, scratch_dir):
        path = _shader(scratch_dir, "blit.frag", "void main() {}\n")
        result = glslcc.convert(path, ShaderStage.Fragment, BackendTarget.GLSL300ES, scratch_dir)

        assert result.text == "// gles 300\nvoid main() {}\n"
        assert json.loads(result.reflection)["fs"]["textures"][0]["name"] == "tex"
        # Output files are scratch files, only the input remains.
        assert os.listdir(scratch_dir) == ["blit.frag"]

    def test_stage_and_target_flags(self, glslcc, scratch_dir):
        path = _shader(scratch_dir, "quad.vert", "void main() {}\n")
        result = glslcc.convert(
            path,
            ShaderStage.Vertex,
            BackendTarget.HLSL40,
            scratch_dir,
            flatten_ubos=True,
            options=["--defines=X"],
        )
        assert result.text.startswith("// hlsl 40 --flatten-ubos --defines=X\n")

    def test_failure_keeps_diagnostics(self, glslcc, scratch_dir):
        path = _shader(scratch_dir, "blit.frag", "FAIL\n")
        with pytest.raises(ConversionError) as e:
            glslcc.convert(path, ShaderStage.Fragment, BackendTarget.GLSL100ES, scratch_dir)

        assert "error: syntax error" in e.value.output
        assert e.value.target == "GLSL100ES"
        assert "blit.frag" in str(e.value)
        assert os.listdir(scratch_dir) == ["blit.frag"]

    def test_missing_output(self, glslcc, scratch_dir):
        path = _shader(scratch_dir, "blit.frag", "NOOUTPUT\n")
        with pytest.raises(ConversionError, match="did not produce"):
            glslcc.convert(path, ShaderStage.Fragment, BackendTarget.GLSL100ES, scratch_dir)

    def test_utf8_output(self, glslcc, scratch_dir):
        path = _shader(scratch_dir, "blit.frag", "// d\u00e9grad\u00e9\nvoid main() {}\n")
        result = glslcc.convert(path, ShaderStage.Fragment, BackendTarget.GLSL100ES, scratch_dir)
        assert result.text == "// gles 100\n// d\u00e9grad\u00e9\nvoid main() {}\n"

    def test_output_not_utf8(self, glslcc, scratch_dir):
        path = _shader(scratch_dir, "blit.frag", "NOTUTF8\n")
        with pytest.raises(ConversionError, match="not valid UTF-8") as e:
            glslcc.convert(path, ShaderStage.Fragment, BackendTarget.GLSL100ES, scratch_dir)

        assert e.value.target == "GLSL100ES"
        assert os.listdir(scratch_dir) == ["blit.frag"]


class TestFxc:
    def test_not_found(self, tmp_path):
        assert FxcCompiler.find(str(tmp_path / "missing")) is None

    def test_compile(self, fxc, scratch_dir):
        code = fxc.compile("float4 main() : SV_Target { return 0; }", "main", "ps_4_0", scratch_dir)
        assert code == b"DXBC ps_4_0 main"
        assert os.listdir(scratch_dir) == []

    def test_failure(self, fxc, scratch_dir):
        with pytest.raises(BytecodeCompileError) as e:
            fxc.compile("FAIL", "main", "vs_4_0", scratch_dir)
        assert "error X3000" in e.value.output
        assert os.listdir(scratch_dir) == []
