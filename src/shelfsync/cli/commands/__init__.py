# ABOUTME: Subcommands registered on the shelfsync root group.
# ABOUTME: review, category, and default.
