# SPDX-License-Identifier: AGPL-3.0-or-later
"""License header checker and NOTICE generator."""
