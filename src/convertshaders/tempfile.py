import contextlib, tempfile, shutil, os


@contextlib.contextmanager
def ScratchDirectory(prefix: str = "shader-convert"):
    """
    Context manager for a temporary directory shared by a whole conversion run.
    The directory and everything written into it is removed on exit, including
    when the run is aborted by an exception or an interrupt.
    """
    path = tempfile.mkdtemp(prefix=prefix)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@contextlib.contextmanager
def ScratchFile(directory: str, name: str, data: str | bytes = None):
    """
    Context manager for a named file inside a scratch directory.
    Optionally writes `data` into it, always deletes it on exit.
    """
    path = os.path.join(directory, name)
    if data is not None:
        mode = "wb" if isinstance(data, bytes) else "w"
        with open(path, mode, encoding=None if "b" in mode else "utf-8") as f:
            f.write(data)
    try:
        yield path
    finally:
        with contextlib.suppress(FileNotFoundError):
            os.remove(path)


@contextlib.contextmanager
def AtomicOutputFile(path: str, mode: str = "w"):
    """
    Context manager for writing a file that either appears complete or not at
    all. Data goes to a temporary file next to `path`, which replaces `path`
    only if the block exits without an exception.
    """
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=directory, prefix=".", suffix=".tmp")
    try:
        text_mode = "b" not in mode
        with os.fdopen(
            fd,
            mode,
            encoding="utf-8" if text_mode else None,
            newline="\n" if text_mode else None,
        ) as f:
            yield f
        os.replace(temp_path, path)
    finally:
        with contextlib.suppress(FileNotFoundError):
            os.remove(temp_path)
