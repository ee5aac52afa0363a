import argparse
import time
import sys
import os

import convertshaders.project.project
from convertshaders.errors import ConvertShadersError
from convertshaders.project.project_config import ProjectConfig


def load_config(args) -> ProjectConfig:
    config = ProjectConfig()

    config_path = args.config or ProjectConfig.FILE_NAME
    if args.config and not os.path.isfile(config_path):
        raise ConvertShadersError(f'Config file "{config_path}" was not found')
    config.read_json_file(config_path)

    # Command line arguments take precedence over the config file.
    if args.module:
        config.module = args.module
    if args.shaders:
        config.shaders_folder = args.shaders
    if args.output:
        config.output_path = args.output
    if args.glslcc:
        config.glslcc_paths = [args.glslcc]
    if args.fxc:
        config.fxc_paths = [args.fxc]
    if args.no_bytecode:
        config.compile_bytecode = False
    if args.flatten_ubos:
        config.flatten_ubos = True
    if args.glslcc_args:
        config.glslcc_options = config.glslcc_options + args.glslcc_args
    if args.entry_point:
        config.entry_point = args.entry_point

    return config


def build(args):
    config = load_config(args)
    entries = convertshaders.project.project.compile(config)

    variant_count = sum(len(e.get_variants()) for e in entries)
    print(f"Converted {len(entries)} shaders ({variant_count} variants)")


def main(argv: list[str] = None):
    parser = argparse.ArgumentParser(
        prog="convertshaders",
        description="Converts GLSL shader templates into GLSL ES 100, GLSL ES 300 and HLSL variants "
        "with binding reflection, and writes them as a generated Python module",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help=f'Path to JSON5 config file (default: "{ProjectConfig.FILE_NAME}" if present)',
    )
    parser.add_argument(
        "-m",
        "--module",
        type=str,
        default=None,
        help="Dotted name of the generated module, e.g. gpu.shaders",
    )
    parser.add_argument(
        "-s", "--shaders", type=str, default=None, help="Shader templates folder"
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output file path (default: derived from module name)",
    )
    parser.add_argument(
        "--glslcc", type=str, default=None, help="GLSLCC cross-compiler command"
    )
    parser.add_argument("--fxc", type=str, default=None, help="FXC compiler command")
    parser.add_argument(
        "--no-bytecode",
        action="store_true",
        help="Do not compile HLSL bytecode even if FXC is available",
    )
    parser.add_argument(
        "--flatten-ubos",
        action="store_true",
        help="Ask GLSLCC to flatten uniform blocks into plain uniform arrays",
    )
    parser.add_argument(
        "--glslcc-args",
        type=str,
        nargs="*",
        default=[],
        help="Additional GLSLCC arguments",
    )
    parser.add_argument(
        "--entry-point", type=str, default=None, help="HLSL entry point name"
    )

    args = parser.parse_args(argv)
    current_time = time.perf_counter()

    try:
        build(args)
    except (ConvertShadersError, OSError) as e:
        print(f"convertshaders: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Completed in {round(time.perf_counter() - current_time, 2)} seconds")
