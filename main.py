"""
mcp-sync
Run the sync CLI straight from a checkout.
"""

from mcp_sync.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
