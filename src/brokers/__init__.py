"""
Broker export mappings.

One module per supported broker, each declaring the SchemaMapping that
describes its CSV export. The registry maps broker ids and command line
aliases onto those mappings.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""
