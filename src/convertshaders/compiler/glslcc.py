import subprocess, os
from dataclasses import dataclass

from convertshaders import util
from convertshaders.backend.stage import ShaderStage
from convertshaders.backend.target import BackendTarget
from convertshaders.errors import CompilerNotFoundError, ConversionError
from convertshaders.tempfile import ScratchFile

from . import locate_compiler


@dataclass
class ConvertedShader:
    text: str
    reflection: bytes


class GlslccCompiler:
    glslcc_path: str

    def __init__(self, glslcc_paths: list[str] | str | None = None) -> None:
        if glslcc_paths is None:
            glslcc_paths = ["glslcc", "./glslcc"]
        elif isinstance(glslcc_paths, str):
            glslcc_paths = [glslcc_paths]

        self.glslcc_path = locate_compiler(glslcc_paths, ["--help"])

        if not self.glslcc_path:
            raise CompilerNotFoundError(
                f"Error! No valid GLSLCC cross-compiler was found in the list {glslcc_paths}"
            )

    def convert(
        self,
        path: str,
        stage: ShaderStage,
        target: BackendTarget,
        scratch_dir: str,
        flatten_ubos: bool = False,
        options: list[str] = None,
    ) -> ConvertedShader:
        """
        Converts a GLSL source file to the target backend language.
        Returns converted code and the raw JSON reflection document.
        """
        output_base = os.path.join(scratch_dir, "shader")
        args = [
            self.glslcc_path,
            "--silent",
            "--optimize",
            "--reflect",
            "--output",
            output_base,
            "--lang",
            target.language,
            "--profile",
            target.profile,
            stage.compiler_flag,
            path,
        ]
        if flatten_ubos:
            args.append("--flatten-ubos")
        if options:
            args.extend(options)

        output_name = f"shader_{stage.output_suffix}"
        with ScratchFile(scratch_dir, output_name) as code_path, ScratchFile(
            scratch_dir, output_name + ".json"
        ) as reflection_path:
            result = subprocess.run(args, capture_output=True)
            log = util.format_process_log(result, args)

            if result.returncode:
                raise ConversionError(
                    f'GLSLCC failed to convert "{os.path.basename(path)}" '
                    f"(exit code {result.returncode})",
                    output=log,
                    target=target.name,
                )

            if log:
                print(log)

            try:
                with open(code_path, encoding="utf-8") as f:
                    text = f.read()
                with open(reflection_path, "rb") as f:
                    reflection = f.read()
            except FileNotFoundError as e:
                raise ConversionError(
                    f'GLSLCC did not produce expected output "{e.filename}"',
                    output=log,
                    target=target.name,
                ) from None
            except UnicodeDecodeError:
                raise ConversionError(
                    "GLSLCC produced output that is not valid UTF-8",
                    output=log,
                    target=target.name,
                ) from None

        return ConvertedShader(text, reflection)
