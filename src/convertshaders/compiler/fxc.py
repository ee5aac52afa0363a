import subprocess

from convertshaders import util
from convertshaders.errors import BytecodeCompileError
from convertshaders.tempfile import ScratchFile

from . import locate_compiler


class FxcCompiler:
    fxc_path: str

    def __init__(self, fxc_path: str) -> None:
        self.fxc_path = fxc_path

    @classmethod
    def find(cls, fxc_paths: list[str] | str | None = None):
        """
        Locates the FXC compiler. Returns None if it is not installed, in which
        case shaders are built without HLSL bytecode.
        """
        if fxc_paths is None:
            fxc_paths = ["fxc", "fxc.exe"]
        elif isinstance(fxc_paths, str):
            fxc_paths = [fxc_paths]

        path = locate_compiler(fxc_paths, ["/?"])
        return cls(path) if path else None

    def compile(
        self,
        code: str,
        entry_point: str,
        profile: str,
        scratch_dir: str,
    ) -> bytes:
        with ScratchFile(scratch_dir, "shader.hlsl", code) as input_path, ScratchFile(
            scratch_dir, "shader.bin"
        ) as output_path:
            args = [
                self.fxc_path,
                "/T",
                profile,
                "/E",
                entry_point,
                "/nologo",
                "/Fo",
                output_path,
                input_path,
            ]
            result = subprocess.run(args, capture_output=True)
            log = util.format_process_log(result, args)

            if result.returncode:
                raise BytecodeCompileError(
                    f"FXC failed to compile HLSL bytecode (exit code {result.returncode})",
                    output=log,
                )

            if log:
                print(log)

            try:
                with open(output_path, "rb") as f:
                    return f.read()
            except FileNotFoundError:
                raise BytecodeCompileError(
                    "FXC did not produce a bytecode file", output=log
                ) from None
