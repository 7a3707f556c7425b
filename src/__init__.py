"""Invoice dashboard source package."""
