import os, pyjson5
from collections.abc import Callable
from typing import Any

from convertshaders.errors import ConfigError


def _command_list(value) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(x, str) for x in value):
        return value
    raise ValueError("expected a command or a list of commands")


def _string(value) -> str:
    if not isinstance(value, str):
        raise ValueError("expected a string")
    return value


def _string_list(value) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(x, str) for x in value):
        raise ValueError("expected a list of strings")
    return value


def _bool(value) -> bool:
    if not isinstance(value, bool):
        raise ValueError("expected true or false")
    return value


class ProjectConfig:
    FILE_NAME = "convertshaders.json"

    module: str
    shaders_folder: str
    output_path: str
    glslcc_paths: list[str] | None
    fxc_paths: list[str] | None
    compile_bytecode: bool
    flatten_ubos: bool
    glslcc_options: list[str]
    entry_point: str
    project_folder: str

    def __init__(self) -> None:
        self.module = ""
        self.shaders_folder = "shaders"
        self.output_path = ""
        self.glslcc_paths = None
        self.fxc_paths = None
        self.compile_bytecode = True
        self.flatten_ubos = False
        self.glslcc_options = []
        self.entry_point = "main"
        self.project_folder = ""

    def read_json_file(self, path: str):
        if not os.path.isfile(path):
            return self
        try:
            with open(path, encoding="utf-8") as f:
                json_data = pyjson5.load(f)
        except (OSError, ValueError, pyjson5.Json5Exception) as e:
            raise ConfigError(f'Failed to read config file "{path}": {e}') from None

        self.project_folder = os.path.dirname(os.path.abspath(path))
        return self.read_json(json_data, path)

    def read_json(self, json_data: dict, source: str = "config"):
        if not isinstance(json_data, dict):
            raise ConfigError(f'Invalid config "{source}": expected an object')

        properties: list[tuple[str, str, Callable[[Any], Any]]] = [
            ("module", "module", _string),
            ("shaders", "shaders_folder", self._resolve_path),
            ("output", "output_path", self._resolve_path),
            ("glslcc", "glslcc_paths", _command_list),
            ("fxc", "fxc_paths", _command_list),
            ("bytecode", "compile_bytecode", _bool),
            ("flatten_ubos", "flatten_ubos", _bool),
            ("glslcc_options", "glslcc_options", _string_list),
            ("entry_point", "entry_point", _string),
        ]
        known_keys = {key for key, _, _ in properties}

        for key, attribute, value_getter in properties:
            if key not in json_data:
                continue
            try:
                setattr(self, attribute, value_getter(json_data[key]))
            except ValueError as e:
                raise ConfigError(f'Invalid value of "{key}" in "{source}": {e}') from None

        for key in json_data:
            if key not in known_keys:
                print(f'Warning: unknown config key "{key}" in "{source}"')

        return self

    def _resolve_path(self, value) -> str:
        path = _string(value)
        if self.project_folder:
            path = os.path.normpath(os.path.join(self.project_folder, path))
        return path

    def get_output_path(self) -> str:
        if self.output_path:
            return self.output_path
        path = self.module.replace(".", os.sep) + ".py"
        if self.project_folder:
            path = os.path.join(self.project_folder, path)
        return path

    def validate(self):
        if not self.module:
            raise ConfigError(
                "Output module name is not set, use --module or the \"module\" config key"
            )
        if not all(part.isidentifier() for part in self.module.split(".")):
            raise ConfigError(f'Invalid output module name "{self.module}"')
        return self
