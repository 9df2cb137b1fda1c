# ABOUTME: shelfsync - multi-source book metadata reconciliation and category curation.
# ABOUTME: Subpackages: metadata, categories, db, core, cli.
