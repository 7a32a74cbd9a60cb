#!/usr/bin/env python3
"""
UserDataWrangler

This script reads structure definitions annotated with `@userdata` and generates the bindings that
expose those structures as indexable objects inside an embedded scripting runtime: an `index`
dispatch for reads and a `new_index` dispatch for writes, per structure.

Usage:
    python userdata_wrangler.py --input <input_file> --output <output_dir> [--py] [--json] [--language <lang>] [--output-name <name>] [--default-namespace <module>] [--strict-keys] [--dump-model <path>] [--verbose]

Arguments:
    --input, -i         : Path to the definition file
    --output, -o        : Directory where output files will be generated
    --py                : Generate the Python bindings module
    --json              : Generate the JSON binding manifest
    --language, -l      : Output formats (python, json, or all), overrides --py and --json.
                          Several can be given, separated by spaces or commas
    --output-name, -n   : Base name for output files without extension (default: input filename).
                          Files are named <name>_userdata.py and <name>_userdata.json
    --default-namespace : Namespace root used by structures without a `crate` option (default: host_runtime)
    --strict-keys       : Fail a structure when two of its fields resolve to the same key
    --dump-model        : Write the resolved structures as JSON to this path
    --verbose, -v       : Print debug information

Environment variables UW_INPUT_FILE, UW_OUTPUT_DIR, UW_OUTPUT_NAME, UW_LANGUAGE, UW_DEFAULT_NAMESPACE,
UW_STRICT_KEYS and UW_VERBOSE override the matching arguments.

Example:
    python userdata_wrangler.py --input structures.def --output ./generated
    python userdata_wrangler.py --input structures.def --output ./generated --language python,json
"""

import argparse
import os
import sys
from typing import List, Optional

from binding_expander import BindingExpander
from def_file_loader import file_level_name, load_def_file
from errors import BindingError
from generators.json_generator import write_manifest_file
from generators.python_generator import write_python_file
from model import DEFAULT_NAMESPACE_ROOT, UserDataStructure
from model_debug import dump_structures

VALID_LANGUAGES = ['python', 'json', 'all']
TRUE_VALUES = {'1', 'true', 'yes', 'on'}


class BindingConverter:
    """
    Loads a definition file, expands its structures and writes the requested outputs.
    """

    def __init__(self, input_file: str, output_dir: str, output_name: Optional[str] = None,
                 default_namespace: str = DEFAULT_NAMESPACE_ROOT, strict_keys: bool = False, verbose: bool = False):
        self.input_file = input_file
        self.output_dir = output_dir
        self.verbose = verbose
        self.expander = BindingExpander(default_namespace, strict_keys, verbose)
        self.structures: List[UserDataStructure] = []
        self.errors = []

        if output_name is None:
            self.output_name = file_level_name(input_file)
        else:
            self.output_name = output_name

    def parse_input_file(self) -> bool:
        """
        Load and expand the input file.

        Returns:
            bool: True if every structure expanded, False otherwise
        """
        if not os.path.exists(self.input_file):
            self.errors.append(f"Error: Input file '{self.input_file}' does not exist.")
            return False
        try:
            early_structures = load_def_file(self.input_file)
        except BindingError as e:
            self.errors.append(e.format_diagnostic())
            return False

        self.structures = self.expander.expand_all(early_structures)
        self.errors.extend(self.expander.errors)
        return not self.expander.errors

    def _output_path(self, extension: str) -> str:
        return os.path.join(self.output_dir, f"{self.output_name}_userdata.{extension}")

    def generate_python_output(self) -> bool:
        path = self._output_path("py")
        if write_python_file(self.structures, path, source=self.input_file):
            if self.verbose:
                print(f"[DEBUG] Wrote {path}")
        elif self.verbose:
            print("[DEBUG] No bindings to write")
        return True

    def generate_json_output(self) -> bool:
        os.makedirs(self.output_dir, exist_ok=True)
        path = self._output_path("json")
        if write_manifest_file(self.structures, path) and self.verbose:
            print(f"[DEBUG] Wrote {path}")
        return True


def _split_languages(values) -> List[str]:
    languages = []
    for value in values:
        languages.extend(part.strip().lower() for part in value.replace(',', ' ').split())
    return languages


def parse_arguments(argv=None):
    """
    Parse command line arguments.

    Returns:
        argparse.Namespace: Parsed command line arguments, with `py` and `json` resolved
    """
    parser = argparse.ArgumentParser(
        description="Generate scripting runtime userdata bindings from structure definitions",
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument('--input', '-i', help='Path to the definition file')
    parser.add_argument('--output', '-o', help='Directory where output files will be generated')
    parser.add_argument('--py', action='store_true', help='Generate the Python bindings module')
    parser.add_argument('--json', action='store_true', help='Generate the JSON binding manifest')
    parser.add_argument('--language', '-l', nargs='+', help='Output formats (python, json, or all)')
    parser.add_argument('--output-name', '-n', help='Base name for output files without extension (default: input filename)')
    parser.add_argument('--default-namespace', default=DEFAULT_NAMESPACE_ROOT,
                        help='Namespace root for structures without a crate option')
    parser.add_argument('--strict-keys', action='store_true', help='Reject duplicate exposed keys')
    parser.add_argument('--dump-model', help='Write the resolved structures as JSON to this path')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output for debugging')

    args = parser.parse_args(argv)

    if args.language:
        args.language = _split_languages(args.language)
        for lang in args.language:
            if lang not in VALID_LANGUAGES:
                parser.error(f"argument --language/-l: invalid choice: '{lang}' (choose from 'python', 'json', 'all')")
        args.py = any(lang in ('python', 'all') for lang in args.language)
        args.json = any(lang in ('json', 'all') for lang in args.language)
    elif not args.py and not args.json:
        # Default: the bindings module only
        args.py = True

    return args


def main(argv=None) -> int:
    """
    Main entry point of the script.
    """
    args = parse_arguments(argv)

    input_file = os.environ.get('UW_INPUT_FILE', args.input)
    output_dir = os.environ.get('UW_OUTPUT_DIR', args.output)
    output_name = os.environ.get('UW_OUTPUT_NAME', args.output_name)
    default_namespace = os.environ.get('UW_DEFAULT_NAMESPACE', args.default_namespace)
    strict_keys = args.strict_keys or os.environ.get('UW_STRICT_KEYS', '').lower() in TRUE_VALUES
    verbose = args.verbose or os.environ.get('UW_VERBOSE', '').lower() in TRUE_VALUES

    if 'UW_LANGUAGE' in os.environ:
        env_languages = _split_languages([os.environ['UW_LANGUAGE']])
        invalid = [lang for lang in env_languages if lang not in VALID_LANGUAGES]
        if invalid or not env_languages:
            print(f"Error: UW_LANGUAGE must name python, json or all, got '{os.environ['UW_LANGUAGE']}'.", file=sys.stderr)
            return 2
        args.py = any(lang in ('python', 'all') for lang in env_languages)
        args.json = any(lang in ('json', 'all') for lang in env_languages)

    if not input_file or not output_dir:
        print("Error: an input file and an output directory are required.", file=sys.stderr)
        return 2

    converter = BindingConverter(input_file, output_dir, output_name, default_namespace, strict_keys, verbose)

    success = converter.parse_input_file()
    for warning in converter.expander.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    for error in converter.errors:
        print(error, file=sys.stderr)

    if args.dump_model:
        dump_structures(converter.structures, args.dump_model)

    if args.py:
        if not converter.generate_python_output():
            success = False

    if args.json:
        if not converter.generate_json_output():
            success = False

    if success:
        print(f"Generated bindings for {len(converter.structures)} structure(s).")
        return 0
    print("Binding generation completed with errors.")
    return 1


if __name__ == '__main__':
    sys.exit(main())
