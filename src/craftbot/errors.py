# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy for craftbot."""


class CraftbotError(Exception):
    """Base exception for craftbot."""

    pass


class ClientCreationError(CraftbotError):
    """The game client library could not construct a connection handle."""

    pass


class StatusServerError(CraftbotError):
    """The status server could not bind its listening socket."""

    pass
