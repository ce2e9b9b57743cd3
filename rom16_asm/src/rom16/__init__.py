# __init__.py

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
# rom16 is the Rom16 assembler: run rom16.main for the command line or
# rom16.gui for the IDE
# ----------------------------------------------------------------------
