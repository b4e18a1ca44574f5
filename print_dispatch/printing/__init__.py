"""
Printing subsystem for Print Dispatch.

- probe: TCP reachability checks for network printers
- payload: request body models and payload classification
- sink: the PrinterSink capability and its buffered ESC/POS implementation
- render: invoice and plain-text layouts
- executor: single-attempt print jobs on detached threads
"""

from .executor import *
from .payload import *
from .probe import *
from .render import *
from .sink import *
