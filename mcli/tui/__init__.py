# SPDX-License-Identifier: MIT
"""Terminal UI for mcli: navigation engine and Textual front end."""
