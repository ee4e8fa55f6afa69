#
#  objcpatch | objcpatch
#  objcpatch_script.py
#
#  Command line entry point. Parses and validates arguments into a PatchConfig, then hands off to patch_binary
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

import json
import os
import sys
from argparse import ArgumentParser, ArgumentTypeError

from objcpatch.config import PatchConfig
from objcpatch.exceptions import (InvalidConfigurationException, MalformedMachOException, PatchWriteException,
                                  UnsupportedFiletypeException)
from objcpatch.objcpatch import patch_binary
from objcpatch.util import OUT_IS_TTY, highlight_json, log, LogLevel, version_output


def existing_file(path):
    if not os.path.isfile(path):
        raise ArgumentTypeError(f'File does not exist: {path}')
    return path


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog='objcpatch', description="A tool to patch Objective-C metadata in Mach-O binaries.")

    parser.add_argument('binary_to_patch', type=existing_file, nargs='?', help="The binary file to patch")
    parser.add_argument('--quiet', action='store_true', help="Suppress output messages")
    parser.add_argument('--dry-run', dest='dry_run', action='store_true',
                        help="Perform a dry run without modifying the file")
    parser.add_argument('--exclude', action='extend', nargs='+', default=[], metavar='CLASS',
                        help="List of class names to exclude from patching")
    parser.add_argument('--replace', nargs=2, metavar=('PATTERN', 'REPLACEMENT'),
                        help="Replace a pattern with a replacement string")
    parser.add_argument('--seed', type=int, default=None, help="Seed for randomize mode, for reproducible output")
    parser.add_argument('--json', action='store_true', help="Print a JSON report of every patch made (implies --quiet)")
    parser.add_argument('-v', dest='verbosity', action='count', default=0, help="Log verbosity (-v, -vv, -vvv)")
    parser.add_argument('--version', dest='get_vers', action='store_true', help="Print version info and exit")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.get_vers:
        version_output()
        return 0

    if args.binary_to_patch is None:
        parser.error('the following arguments are required: binary_to_patch')

    levels = [LogLevel.ERROR, LogLevel.WARN, LogLevel.INFO, LogLevel.DEBUG, LogLevel.DEBUG_MORE]
    log.LOG_LEVEL = levels[min(args.verbosity, len(levels) - 1)]

    try:
        # progress lines would corrupt the JSON on stdout
        config = PatchConfig.create(args.exclude, args.replace, args.quiet or args.json, args.dry_run, args.seed)
    except InvalidConfigurationException as ex:
        log.error(f'Error: {str(ex)}')
        return 1

    try:
        report = patch_binary(args.binary_to_patch, config)
    except OSError as ex:
        log.error(f'Error opening binary: {str(ex)}')
        return 1
    except (UnsupportedFiletypeException, MalformedMachOException):
        log.error('The provided file is not a valid Mach-O binary.')
        return 1
    except PatchWriteException as ex:
        log.error(str(ex))
        return 1

    if args.json:
        text = json.dumps(report.serialize(), indent=4)
        print(highlight_json(text) if OUT_IS_TTY else text)

    return 0


if __name__ == '__main__':
    sys.exit(main())
