"""
uitree: declarative UI trees compiled to host build calls.

A tree description names base templates, overrides their fields, attaches
markers and nests children, some of them behind `if`/`else` arms that are
decided when the tree is built. Descriptions compile once into a Program
of build operations that a host executes, or into Python source.
"""

__version__ = "0.1.0"


from ._error import *
from ._ast import *
from ._values import *
from ._merge import *
from ._parse import *
from ._ops import *
from ._emit import *
from ._host import *
from ._codegen import *
from ._compile import *
