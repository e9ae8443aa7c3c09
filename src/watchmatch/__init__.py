# SPDX-FileCopyrightText: 2025-present DouglasMacKrell <d.mackrell@gmail.com>
#
# SPDX-License-Identifier: MIT

"""Watchmatch - reconcile watch history against canonical TV metadata."""

from watchmatch.__about__ import __version__

__all__ = ["__version__"]
