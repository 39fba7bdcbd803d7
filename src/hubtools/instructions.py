"""MCP server instructions for hubtools.

Sent to the MCP host at initialization as the server's usage guidance.
"""

HUBTOOLS_INSTRUCTIONS = """hubtools exposes GitHub REST operations as tools, grouped into toolsets.

## Quick Start

1. **Know who you are**: `get_me` returns the authenticated user. Use it for requests about "me" or "my".
2. **Read before you write**: every toolset has read tools (get_*, list_*, search_*) that never modify GitHub.
3. **Page through lists**: list and search tools accept `page` (from 1) and `perPage` (1-100, default 30).

## Dynamic Toolsets

When the `dynamic` toolset is present, most toolsets start disabled:

1. `list_available_toolsets` shows every toolset and whether it is enabled
2. `get_toolset_tools(toolset)` shows what a toolset would add
3. `enable_toolset(toolset)` turns it on; its tools appear in the tool list right away

Enabling cannot be undone for the rest of the session, so enable only what the task needs.

## Errors

A tool error puts the message on its first line and `[<code>]` on the second. `validation` and
`not_found` errors can be fixed by changing the arguments; the `Hint:` line says how.
"""
