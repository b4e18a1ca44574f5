#!/usr/bin/env python3
"""
Print Dispatch - HTTP print server for network ESC/POS receipt printers.
Runs next to the POS terminal and forwards receipts to LAN thermal printers.
"""

from print_dispatch.__main__ import main

if __name__ == "__main__":
    main()
