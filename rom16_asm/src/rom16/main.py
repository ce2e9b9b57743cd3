# main.py

import sys
import os
import argparse

from rom16 import common
from rom16 import assembler
from rom16 import rom
from rom16.common import AsmError

class UsageError(Exception):
    pass

class ArgumentParser(argparse.ArgumentParser):
    # A wrong argument count exits with status 1, not argparse's 2
    def error(self, message):
        raise UsageError(message)

def make_parser():
    parser = ArgumentParser(
        prog="rom16-asm",
        description="Assemble a Rom16 source file into a hex ROM image",
        add_help=False,
    )
    parser.add_argument("input", help="Path to the assembly source file")
    parser.add_argument("output", help="Path of the hex image to write")
    return parser

# Both arguments are paths, so one starting with - is not an option

def positional_args(argv):
    argv = list(argv)
    return argv if "--" in argv else ["--"] + argv

def assemble_file(file_path):
    # Source bytes outside the word alphabet only ever separate words,
    # so any byte sequence must decode
    with open(file_path, "r", encoding="latin-1") as f:
        src_text = f.read()
    base_name = os.path.basename(file_path).split('.')[0]
    common.mode.devlog(f"assemble_file {file_path} ({len(src_text)} chars)")
    return assembler.assembler(base_name, src_text)

def main(argv=None):
    common.mode.trace_from_env()
    parser = make_parser()
    try:
        args = parser.parse_args(positional_args(sys.argv[1:] if argv is None else argv))
    except UsageError:
        print("usage: rom16-asm input_file output_file")
        return 1

    try:
        asm_info = assemble_file(args.input)
    except AsmError as e:
        common.mode.errlog(str(e))
        return 1
    except OSError as e:
        common.mode.errlog(f"Error: cannot read {args.input}: {e.strerror}")
        return 1

    try:
        rom.write_hex_file(asm_info.rom, args.output)
    except OSError as e:
        common.mode.errlog(f"Error: cannot write {args.output}: {e.strerror}")
        return 1
    common.mode.devlog(f"Wrote {asm_info.rom.size // 2} words to {args.output}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
