"""School Portal Core.

Account provisioning and assessment scoring engine for a school
administration portal.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
