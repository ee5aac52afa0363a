import subprocess
import os
import re

from convertshaders.backend.target import BackendTarget


def format_shader_name(path: str):
    # blit.frag -> shader_blit_frag
    name = os.path.basename(path)
    name = re.sub(r"[^0-9A-Za-z_]", "_", name)
    return "shader_" + name


def format_process_log(result: subprocess.CompletedProcess, args: list[str]):
    """
    Joins captured stdout and stderr of a finished process together with the
    command line that produced them. Returns an empty string if the process
    printed nothing.
    """
    log = []
    if result.stdout:
        log.append(_decode(result.stdout))
    if result.stderr:
        log.append(_decode(result.stderr))

    if not log:
        return ""
    return "\n\n".join(log + ["Command: " + " ".join(args)])


def _decode(output: str | bytes):
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output


def insert_version_directive(code: str, target: BackendTarget):
    if not re.search(r"^\s*#\s*version\s+", code, re.MULTILINE):
        version_string = target.profile
        if target.language == "gles" and target.profile != "100":
            version_string += " es"
        code = f"#version {version_string}\n{code}"
    return code
