import subprocess


def locate_compiler(paths: list[str], check_args: list[str]) -> str:
    """
    Returns the first command from `paths` that can be started, or an empty
    string if none of them exist. Exit status of the check is ignored, some
    compilers report usage with a non-zero code.
    """
    for path in paths:
        try:
            subprocess.run([path, *check_args], capture_output=True)
        except OSError:
            pass
        else:
            return path
    return ""
