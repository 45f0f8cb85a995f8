"""
Symbol lookup providers.

This package contains the interface for reference-data services that turn
an ISIN, ticker or name into candidate securities, and the implementation
backed by the portfolio tracker API.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""
