# common.py

# Copyright (C) 2025 The Rom16 authors. License: GNU GPL Version 3
# See Rom16/README and LICENSE

# This file is part of Rom16. Rom16 is free software: you can
# redistribute it and/or modify it under the terms of the GNU General
# Public License as published by the Free Software Foundation, either
# version 3 of the License, or (at your option) any later version.
# Rom16 is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# General Public License for more details. You should have received
# a copy of the GNU General Public License along with Rom16. If
# not, see <https://www.gnu.org/licenses/>.

# ----------------------------------------------------------------------
# common.py
# ----------------------------------------------------------------------

import os

TRACE_ENV_VAR = "ROM16_TRACE"

def stacktrace():
    import traceback
    traceback.print_stack()

class Mode:
    def __init__(self):
        self.trace = False
        self.show_err = True

    def set_trace(self):
        self.trace = True

    def clear_trace(self):
        self.trace = False

    def devlog(self, xs):
        if self.trace:
            print(xs)

    def errlog(self, xs):
        if self.show_err:
            print(xs)

    def trace_from_env(self, environ=None):
        env = os.environ if environ is None else environ
        if env.get(TRACE_ENV_VAR, "") not in ("", "0"):
            self.set_trace()

mode = Mode()

# ----------------------------------------------------------------------
# Logging error message
# ----------------------------------------------------------------------

def indicate_error(xs):
    print(f"\033[91m\033[1m{xs}\033[0m") # ANSI escape codes for red and bold
    stacktrace()

# ----------------------------------------------------------------------
# Assembly errors
# ----------------------------------------------------------------------

# Assembly stops at the first error. Each pass raises one of these and
# lets it propagate to the caller, which decides how to report it; the
# line number is the 1-based source line where the problem was found.

class AsmError(Exception):
    kind = "AsmError"

    def __init__(self, msg, line=None):
        super().__init__(msg)
        self.msg = msg
        self.line = line

    def __str__(self):
        if self.line is None:
            return self.msg
        return f"Line {self.line}: {self.msg}"

class MalformedConstant(AsmError):
    kind = "MalformedConstant"

class OperandOutOfRange(AsmError):
    kind = "OperandOutOfRange"

class InvalidRegister(AsmError):
    kind = "InvalidRegister"

class DuplicateLabel(AsmError):
    kind = "DuplicateLabel"

class LabelNotFound(AsmError):
    kind = "LabelNotFound"

class ArityMismatch(AsmError):
    kind = "ArityMismatch"

class LabelTableFull(AsmError):
    kind = "LabelTableFull"

class AddressOutOfBounds(AsmError):
    kind = "AddressOutOfBounds"

class InvalidLabel(AsmError):
    kind = "InvalidLabel"

class MisalignedAddress(AsmError):
    kind = "MisalignedAddress"

# Raised by the constant parser when a word is not a plain numeric
# literal. The encoder catches it to try a label lookup instead.

class NotALiteral(Exception):
    def __init__(self, text):
        super().__init__(f"{text} is not a numeric literal")
        self.text = text
