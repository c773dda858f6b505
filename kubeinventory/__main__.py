"""Entry point for `python -m kubeinventory`.

Usage:
    KUBEINV_URL=https://127.0.0.1:6443 python -m kubeinventory
"""

from __future__ import annotations

import asyncio

from kubeinventory.app import main

asyncio.run(main())
