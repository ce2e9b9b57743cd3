# tokenizer.py

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
# tokenizer.py splits normalized source text into words
# ----------------------------------------------------------------------

import re
import string
from rom16 import common

# ----------------------------------------------------------------------
# Character set
# ----------------------------------------------------------------------

# A word is a maximal run of word characters. A newline is a word by
# itself and terminates a statement. Everything else separates words,
# and ; starts a comment that runs to the end of the line.

newline = "\n"
comment_char = ";"

word_parser = re.compile(r"[A-Z0-9.:]+|\n|;[^\n]*")

class Word:
    def __init__(self, text, line):
        self.text = text
        self.line = line

    def is_newline(self):
        return self.text == newline

    def is_label(self):
        return self.text.endswith(":")

    def __eq__(self, other):
        if isinstance(other, Word):
            return self.text == other.text and self.line == other.line
        return NotImplemented

    def __repr__(self):
        shown = "\\n" if self.is_newline() else self.text
        return f"Word({shown!r}, line={self.line})"

class WordStream:
    """The words of a source text. Each iteration starts again from the
    beginning of the text, so both assembler passes can scan it."""

    def __init__(self, text):
        self.text = text

    def __iter__(self):
        return scan_words(self.text)

def scan_words(text):
    line = 1
    for m in word_parser.finditer(text):
        xs = m.group(0)
        if xs.startswith(comment_char):
            common.mode.devlog(f"scan_words line {line} comment {xs!r}")
            continue
        yield Word(xs, line)
        if xs == newline:
            line += 1

# Only ASCII letters change case; every other character stays a
# separator (0xDF must not become SS)

ascii_upper = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)

def normalize(src_text):
    return src_text.translate(ascii_upper)
